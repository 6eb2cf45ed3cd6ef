import os
from collections.abc import Sequence
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import BinaryIO

from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError
from starlette.datastructures import UploadFile
from starlette.formparsers import MultiPartParser

from .errors import FileTooLargeError, UploadFailedError
from .log import get_logger

logger = get_logger(__name__)

# parts above this size were rolled over to a temp file by the form parser
SPOOL_MAX_SIZE = MultiPartParser.spool_max_size


@dataclass
class UploadItem:
    original_name: str
    content_type: str
    size: int
    stream: BinaryIO

    @property
    def source(self) -> str:
        return "disk" if self.size > SPOOL_MAX_SIZE else "memory"


def prepare_upload(upload: UploadFile, max_bytes: int) -> UploadItem:
    """Measure one multipart file part in place and rewind it for upload.

    The part's spooled file is owned by the request form, which removes any
    temp file when it is closed.
    """
    name = upload.filename or ""
    stream = upload.file

    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    if size > max_bytes:
        raise FileTooLargeError(name, max_bytes)
    stream.seek(0)

    return UploadItem(name, upload.content_type or "application/octet-stream", size, stream)


def prepare_uploads(files: Sequence[UploadFile], max_bytes: int) -> list[UploadItem]:
    # every part is size-checked before the first upload starts
    return [prepare_upload(f, max_bytes) for f in files]


def upload_item(s3, bucket: str, path: str, item: UploadItem) -> str | None:
    if item.size == 0:
        logger.info('Skipping file "%s" due to empty content from source: %s', item.original_name, item.source)
        return None

    key = f"{path}{item.original_name}"
    logger.info("Uploading %s (%d bytes, %s) to s3://%s/%s", item.original_name, item.size, item.source, bucket, key)

    try:
        s3.upload_fileobj(item.stream, bucket, key, ExtraArgs={"ContentType": item.content_type})
    except (S3UploadFailedError, ClientError, BotoCoreError) as exc:
        logger.error("Failed to upload %s: %s", key, exc)
        raise UploadFailedError(item.original_name, str(exc) or "Unknown S3 error")

    logger.info("Uploaded %s", key)
    return key


def upload_items(s3, bucket: str, path: str, items: Sequence[UploadItem], concurrency: int) -> list[str]:
    """Upload every item with at most ``concurrency`` transfers in flight.

    The first failure is raised once it is observed. Uploads already running
    are left to finish; queued ones are cancelled.
    """
    if not items:
        return []

    with ThreadPoolExecutor(max_workers=max(1, min(concurrency, len(items)))) as pool:
        futures = [pool.submit(upload_item, s3, bucket, path, item) for item in items]
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)
        for future in futures:
            if future in done and future.exception() is not None:
                for other in pending:
                    other.cancel()
                raise future.exception()

    return [key for key in (f.result() for f in futures) if key]
