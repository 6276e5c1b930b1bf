DEFAULT_USER_AGENT = "LingStorage-SDK/1.0.0"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_RETRY_COUNT = 3

HEADER_API_KEY = "X-API-Key"
HEADER_API_SECRET = "X-API-Secret"
HEADER_USER_AGENT = "User-Agent"
HEADER_CONTENT_TYPE = "Content-Type"

UPLOAD_PATH = "/api/public/upload"
FILES_PATH = "/api/public/files"
BUCKETS_PATH = "/api/public/buckets"
