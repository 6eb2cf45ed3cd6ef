import os

HOST = os.environ.get("S3MANAGER_HOST", "0.0.0.0")
PORT = int(os.environ.get("S3MANAGER_PORT", "8000"))

STATIC_DIR = os.environ.get("S3MANAGER_STATIC_DIR", os.path.join(os.getcwd(), "static"))

MAX_UPLOAD_BYTES = int(os.environ.get("S3MANAGER_MAX_UPLOAD_BYTES", str(100 * 1024 * 1024)))
UPLOAD_CONCURRENCY = int(os.environ.get("S3MANAGER_UPLOAD_CONCURRENCY", "8"))

LOG_LEVEL = os.environ.get("S3MANAGER_LOG_LEVEL", "INFO")

# us-east-1 rejects an explicit LocationConstraint
DEFAULT_BUCKET_REGION = "us-east-1"

# Only used to pre-fill the browser form; requests always carry their own config.
# The secret key is not exposed.
AWS_REGION = os.environ.get("AWS_REGION", os.environ.get("AWS_DEFAULT_REGION", ""))
AWS_ACCESS_KEY_ID = os.environ.get("AWS_ACCESS_KEY_ID", "")
S3_ENDPOINT = os.environ.get("S3_ENDPOINT", "")
