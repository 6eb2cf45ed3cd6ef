import os

from fastapi import APIRouter, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from . import __version__, config, storage, uploads
from .errors import ConfigurationError, InvalidRequestError, S3ManagerError
from .log import get_logger, setup_logging
from .schemas import (
    BucketList,
    BucketsRequest,
    ClientConfig,
    ConnectRequest,
    CreateBucketRequest,
    CreateFolderRequest,
    DefaultsOut,
    DeleteRequest,
    ObjectListing,
    ObjectsRequest,
    StatusOut,
)

logger = get_logger(__name__)

app = FastAPI(
    title="S3 Manager",
    version=__version__,
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

router = APIRouter(prefix="/api")


class StaticAssets(StaticFiles):
    """Static files whose root may not exist yet; until it does, every path is a 404."""

    async def check_config(self) -> None:
        if self.directory is not None and os.path.isdir(self.directory):
            await super().check_config()


def _failure(exc: S3ManagerError, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"Invalid request: {field + ': ' if field else ''}{first.get('msg', 'malformed body')}"
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, message)

    content = {"error": message}
    if request.url.path.endswith("/connect"):
        content = {"success": False, **content}
    return JSONResponse(status_code=400, content=content)


@app.get("/health")
def health():
    return {"status": "ok"}


@router.get("/defaults", response_model=DefaultsOut)
def defaults():
    return DefaultsOut(
        region=config.AWS_REGION,
        access_key_id=config.AWS_ACCESS_KEY_ID,
        endpoint=config.S3_ENDPOINT,
    )


@router.post("/connect", response_model=StatusOut)
def connect(payload: ConnectRequest):
    try:
        s3 = storage.create_s3_client(payload.config)
        storage.check_connection(s3)
    except S3ManagerError as exc:
        # bad credentials are the caller's problem, hence 400 here only
        logger.exception("Connection test failed")
        return JSONResponse(status_code=400, content={"success": False, "error": exc.message})
    return StatusOut(message="Connection successful")


@router.post("/buckets", response_model=BucketList)
def list_buckets(payload: BucketsRequest):
    try:
        s3 = storage.create_s3_client(payload.config)
        buckets = storage.list_buckets(s3)
    except S3ManagerError as exc:
        logger.exception("List buckets failed")
        return _failure(exc)
    return {"buckets": buckets}


@router.post("/objects", response_model=ObjectListing)
def list_objects(payload: ObjectsRequest):
    try:
        s3 = storage.create_s3_client(payload.config)
        contents, prefixes = storage.list_objects(s3, payload.bucket, payload.prefix)
    except S3ManagerError as exc:
        logger.exception("List objects failed")
        return _failure(exc)
    return {"contents": contents, "commonPrefixes": prefixes}


@router.post("/buckets/create", response_model=StatusOut)
def create_bucket(payload: CreateBucketRequest):
    try:
        s3 = storage.create_s3_client(payload.config)
        storage.create_bucket(s3, payload.bucket_name, payload.region)
    except S3ManagerError as exc:
        logger.exception("Create bucket failed")
        return _failure(exc)
    return StatusOut(message=f"Bucket {payload.bucket_name} created.")


@router.post("/folders/create", response_model=StatusOut)
def create_folder(payload: CreateFolderRequest):
    try:
        s3 = storage.create_s3_client(payload.config)
        storage.create_folder(s3, payload.bucket, payload.key)
    except S3ManagerError as exc:
        logger.exception("Create folder failed")
        return _failure(exc)
    return StatusOut(message=f"Folder {payload.key} created.")


def _parse_config(raw) -> ClientConfig:
    if not isinstance(raw, str) or not raw:
        raise ConfigurationError()
    try:
        return ClientConfig.model_validate_json(raw)
    except ValidationError:
        raise InvalidRequestError("The config field must be a JSON object.")


def _upload(form, files: list[UploadFile]) -> None:
    bucket = form.get("bucket") or ""
    path = form.get("path") or ""
    logger.info("Received upload request for Bucket: [%s], Path: [%s]", bucket, path)

    s3 = storage.create_s3_client(_parse_config(form.get("config")), disable_checksums=True)
    logger.info("Found %d file(s) to upload.", len(files))

    items = uploads.prepare_uploads(files, config.MAX_UPLOAD_BYTES)
    uploads.upload_items(s3, bucket, path, items, config.UPLOAD_CONCURRENCY)


@router.post("/upload", response_model=StatusOut)
async def upload(request: Request):
    form = await request.form()
    try:
        files = [value for _, value in form.multi_items() if isinstance(value, UploadFile)]
        await run_in_threadpool(_upload, form, files)
    except S3ManagerError as exc:
        logger.exception("Upload process failed")
        return _failure(exc)
    finally:
        await form.close()

    logger.info("Upload request finished")
    return StatusOut(message="All files processed.")


@router.post("/delete", response_model=StatusOut)
def delete(payload: DeleteRequest):
    try:
        s3 = storage.create_s3_client(payload.config)
        storage.delete_items(s3, payload.bucket, payload.items)
    except S3ManagerError as exc:
        logger.exception("Delete failed")
        return _failure(exc)
    return StatusOut(message="Items deleted successfully.")


app.include_router(router)

# must stay last: it answers every path the API does not
app.mount("/", StaticAssets(directory=config.STATIC_DIR, html=True, check_dir=False), name="static")


def run() -> None:
    import uvicorn

    setup_logging(config.LOG_LEVEL)
    logger.info("S3 Manager running on http://%s:%d", config.HOST, config.PORT)
    uvicorn.run(app, host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
