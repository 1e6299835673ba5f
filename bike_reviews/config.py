"""Configuration for the bike reviews backend, read from the environment."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent

PORT = int(os.getenv("PORT", "5000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

MONGO_CONFIG = {
    "uri": os.getenv("MONGODB_URI", "mongodb://localhost:27017"),
    "database": os.getenv("MONGODB_DATABASE", "bike_reviews"),
    "timeout_ms": int(os.getenv("MONGODB_TIMEOUT_MS", "5000")),
}

# "local" keeps images on disk, "s3" pushes them to an S3-compatible bucket
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "local").lower()
UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", str(BASE_DIR / "uploads")))
UPLOAD_URL_PREFIX = "/uploads"

S3_CONFIG = {
    "access_key": os.getenv("S3_ACCESS_KEY"),
    "secret_key": os.getenv("S3_SECRET_KEY"),
    "bucket_name": os.getenv("S3_BUCKET_NAME"),
    "region": os.getenv("S3_REGION", "us-east-1"),
    "endpoint_url": os.getenv("S3_ENDPOINT_URL"),
}
S3_FOLDER = "bike-reviews"

# Upload limits
MIN_IMAGES = 3
MAX_IMAGES = 5
MAX_IMAGE_SIZE = 5 * 1024 * 1024  # 5 MiB
ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif"}

# Normalization
IMAGE_MAX_SIZE = (1200, 900)
JPEG_QUALITY = 80

SEARCH_LIMIT = 10
