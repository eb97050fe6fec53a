"""YAML helpers shared by the index and chart metadata readers.

Timestamps are kept as plain strings on load so that documents written by
other tools round-trip without reformatting.
"""

from typing import Any

import yaml

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class StringTimestampLoader(yaml.SafeLoader):
    """SafeLoader that does not convert ISO-8601 scalars into datetime objects."""

    pass


StringTimestampLoader.yaml_implicit_resolvers = {
    first_char: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first_char, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def load_yaml(text: str | bytes) -> Any:
    """Parse a YAML document, keeping timestamps as strings."""
    return yaml.load(text, Loader=StringTimestampLoader)


def dump_yaml(data: Any) -> str:
    """Serialize to block-style YAML with sorted keys."""
    return yaml.safe_dump(
        data,
        default_flow_style=False,
        sort_keys=True,
        allow_unicode=True,
    )
