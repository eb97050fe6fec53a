"""Production blob store backed by the BOS S3-compatible API.

BOS exposes an S3-compatible endpoint (https://s3.<region>.bcebos.com), so the
store talks to it through boto3. ETags serve as change tokens; conditional
writes use the IfMatch/IfNoneMatch preconditions of PutObject.
"""

import logging
from pathlib import Path
from typing import Any

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import ClientError

from helm_bos.core.blob_store.abc import BlobStore
from helm_bos.core.blob_store.types import (
    BlobNotFoundError,
    BlobObject,
    PreconditionFailedError,
    split_path,
)

logger = logging.getLogger(__name__)

INDEX_CACHE_CONTROL = "no-cache, max-age=0, no-transform"

_NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}
_PRECONDITION_CODES = {"PreconditionFailed", "412", "ConditionalRequestConflict", "409"}


def _error_code(err: ClientError) -> str:
    return str(err.response.get("Error", {}).get("Code", ""))


class BosBlobStore(BlobStore):
    """Blob store using boto3 against the BOS S3-compatible endpoint."""

    def __init__(
        self,
        *,
        access_key: str | None,
        secret_key: str | None,
        endpoint: str,
        region: str,
        conditional_writes: bool = True,
    ) -> None:
        """Create a client for the given endpoint.

        Args:
            access_key: BOS access key (None falls back to the boto3 credential chain)
            secret_key: BOS secret key
            endpoint: S3-compatible endpoint URL, e.g. https://s3.bj.bcebos.com
            region: BOS region, e.g. "bj"
            conditional_writes: Send IfMatch/IfNoneMatch preconditions on put
        """
        session = boto3.Session(
            aws_access_key_id=access_key or None,
            aws_secret_access_key=secret_key or None,
            region_name=region,
        )
        self._client = session.client(
            "s3",
            endpoint_url=endpoint,
            config=BotoConfig(
                signature_version="s3v4",
                s3={"addressing_style": "virtual"},
                retries={"max_attempts": 5, "mode": "standard"},
            ),
        )
        self._conditional_writes = conditional_writes

    @property
    def supports_conditional_writes(self) -> bool:
        return self._conditional_writes

    def get(self, path: str) -> BlobObject:
        location = split_path(path)
        try:
            resp = self._client.get_object(Bucket=location.bucket, Key=location.key)
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                raise BlobNotFoundError(path) from e
            raise
        etag = resp.get("ETag")
        return BlobObject(data=resp["Body"].read(), change_token=etag if etag else None)

    def head(self, path: str) -> str | None:
        location = split_path(path)
        try:
            resp = self._client.head_object(Bucket=location.bucket, Key=location.key)
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                return None
            raise
        etag = resp.get("ETag")
        return etag if etag else None

    def exists(self, path: str) -> bool:
        location = split_path(path)
        try:
            self._client.head_object(Bucket=location.bucket, Key=location.key)
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                return False
            raise
        return True

    def put(
        self,
        path: str,
        data: bytes,
        *,
        if_match: str | None = None,
        if_none_match: bool = False,
    ) -> str | None:
        location = split_path(path)
        kwargs: dict[str, Any] = {
            "Bucket": location.bucket,
            "Key": location.key,
            "Body": data,
            "CacheControl": INDEX_CACHE_CONTROL,
        }
        if self._conditional_writes:
            if if_match is not None:
                kwargs["IfMatch"] = if_match
            if if_none_match:
                kwargs["IfNoneMatch"] = "*"

        try:
            resp = self._client.put_object(**kwargs)
        except ClientError as e:
            if _error_code(e) in _PRECONDITION_CODES:
                raise PreconditionFailedError(path) from e
            raise
        etag = resp.get("ETag")
        return etag if etag else None

    def put_file(self, path: str, local_path: Path) -> None:
        location = split_path(path)
        logger.debug("upload %s to bucket=%s key=%s", local_path, location.bucket, location.key)
        self._client.upload_file(str(local_path), location.bucket, location.key)

    def delete(self, path: str) -> None:
        location = split_path(path)
        self._client.delete_object(Bucket=location.bucket, Key=location.key)
