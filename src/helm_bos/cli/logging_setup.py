"""Logging configuration for the CLI entry point."""

import logging

DEBUG_FORMAT = "[DEBUG %(name)s:%(lineno)d] %(message)s"


def configure_logging(debug: bool) -> None:
    """Configure root logging once per process.

    Args:
        debug: Emit debug output of every protocol step when True; only
            warnings otherwise
    """
    if debug:
        logging.basicConfig(level=logging.DEBUG, format=DEBUG_FORMAT, force=True)
        # boto3/botocore are very chatty at debug level
        for noisy in ("boto3", "botocore", "s3transfer", "urllib3"):
            logging.getLogger(noisy).setLevel(logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
