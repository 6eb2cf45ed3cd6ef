from collections.abc import Iterable

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .config import DEFAULT_BUCKET_REGION
from .errors import BackendError, ConfigurationError, MissingBucketError
from .log import get_logger
from .schemas import ClientConfig, DeleteItem

logger = get_logger(__name__)

DELIMITER = "/"


def create_s3_client(config: ClientConfig | None, disable_checksums: bool = False):
    """Build a fresh S3 client from the credentials sent with the request.

    A custom endpoint (MinIO and other S3-compatible services) switches the
    client to path-style addressing.
    """
    if not (config and config.region and config.access_key_id and config.secret_access_key):
        raise ConfigurationError()

    options = {"signature_version": "s3v4"}
    if disable_checksums:
        options["request_checksum_calculation"] = "when_required"
        options["response_checksum_validation"] = "when_required"

    kwargs = {}
    if config.endpoint:
        kwargs["endpoint_url"] = config.endpoint
        options["s3"] = {"addressing_style": "path"}

    try:
        return boto3.client(
            "s3",
            region_name=config.region,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            config=Config(**options),
            **kwargs,
        )
    except (BotoCoreError, ValueError) as exc:
        # malformed endpoint URL or region name, rejected before any request
        raise ConfigurationError(str(exc) or type(exc).__name__)


def check_connection(s3) -> None:
    try:
        s3.list_buckets()
    except (ClientError, BotoCoreError) as exc:
        raise BackendError.from_exception(exc)


def list_buckets(s3) -> list[dict]:
    try:
        data = s3.list_buckets()
    except (ClientError, BotoCoreError) as exc:
        raise BackendError.from_exception(exc)
    return data.get("Buckets") or []


def list_objects(s3, bucket: str, prefix: str) -> tuple[list[dict], list[dict]]:
    """Return one page of (contents, common prefixes) under ``prefix``.

    Continuation tokens are never followed: a truncated listing only yields
    its first page.
    """
    try:
        data = s3.list_objects_v2(Bucket=bucket, Prefix=prefix, Delimiter=DELIMITER)
    except (ClientError, BotoCoreError) as exc:
        raise BackendError.from_exception(exc)

    if data.get("IsTruncated"):
        logger.warning("Listing of s3://%s/%s is truncated; returning the first page only", bucket, prefix)

    return data.get("Contents") or [], data.get("CommonPrefixes") or []


def create_bucket(s3, name: str, region: str | None) -> None:
    params = {"Bucket": name}
    if region and region != DEFAULT_BUCKET_REGION:
        params["CreateBucketConfiguration"] = {"LocationConstraint": region}

    try:
        s3.create_bucket(**params)
    except (ClientError, BotoCoreError) as exc:
        raise BackendError.from_exception(exc)


def create_folder(s3, bucket: str, key: str) -> None:
    # the folder is only a zero-byte marker object; callers end the key with "/"
    try:
        s3.put_object(Bucket=bucket, Key=key, Body=b"")
    except (ClientError, BotoCoreError) as exc:
        raise BackendError.from_exception(exc)


def partition_items(items: Iterable[DeleteItem]) -> tuple[list[DeleteItem], list[DeleteItem]]:
    objects, buckets = [], []
    for item in items:
        (buckets if item.is_bucket else objects).append(item)
    return objects, buckets


def delete_items(s3, bucket: str | None, items: Iterable[DeleteItem]) -> None:
    """Delete objects with one batched call, then buckets one at a time.

    Nothing is rolled back when a later call fails.
    """
    objects, buckets = partition_items(items)

    if objects and not bucket:
        raise MissingBucketError()

    try:
        if objects:
            resp = s3.delete_objects(
                Bucket=bucket,
                Delete={"Objects": [{"Key": item.key} for item in objects]},
            )
            errors = resp.get("Errors") or []
            if errors:
                first = errors[0]
                raise BackendError(f"{first.get('Key')}: {first.get('Message') or first.get('Code')}")

        for item in buckets:
            s3.delete_bucket(Bucket=item.name)
    except (ClientError, BotoCoreError) as exc:
        raise BackendError.from_exception(exc)
