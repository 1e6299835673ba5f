"""Image persistence backends: local disk or an S3-compatible bucket."""

import io
import logging
import random
import re
import time
from abc import ABC, abstractmethod
from pathlib import Path

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from PIL import Image, UnidentifiedImageError

from bike_reviews.config import (
    IMAGE_MAX_SIZE,
    JPEG_QUALITY,
    S3_CONFIG,
    S3_FOLDER,
    STORAGE_BACKEND,
    UPLOAD_DIR,
    UPLOAD_URL_PREFIX,
)
from bike_reviews.errors import StorageError, ValidationError

logger = logging.getLogger(__name__)

WHITESPACE = re.compile(r"\s+")


def grouping_key(bike_name: str | None, model_name: str | None) -> str:
    """Storage namespace for a review's images, e.g. "RoyalEnfield-Himalayan"."""
    if not bike_name or not model_name:
        raise ValidationError("Bike name and model are required")
    parts = [WHITESPACE.sub("", bike_name), WHITESPACE.sub("", model_name)]
    for part in parts:
        # The key becomes a single directory name under the uploads root
        if "/" in part or "\\" in part or part in (".", ".."):
            raise ValidationError("Bike name and model must not contain path separators")
    return "-".join(parts)


def unique_name(extension: str = "") -> str:
    return f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}{extension}"


def normalize_image(raw: bytes) -> bytes:
    """
    Shrink an image to fit IMAGE_MAX_SIZE and re-encode it as JPEG.

    Aspect ratio is kept and smaller images are never enlarged.
    """
    try:
        with Image.open(io.BytesIO(raw)) as img:
            img.thumbnail(IMAGE_MAX_SIZE)
            if img.mode != "RGB":
                img = img.convert("RGB")
            out = io.BytesIO()
            img.save(out, format="JPEG", quality=JPEG_QUALITY)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        logger.error(f"Error normalizing image: {e}")
        raise StorageError() from e
    return out.getvalue()


class ImageStore(ABC):
    @abstractmethod
    def store(self, group: str, raw: bytes, extension: str) -> str:
        """Persist one image under a grouping key and return where it can be fetched."""


class LocalImageStore(ImageStore):
    def __init__(self, root_dir: Path = UPLOAD_DIR, url_prefix: str = UPLOAD_URL_PREFIX):
        self.root_dir = Path(root_dir)
        self.url_prefix = url_prefix.rstrip("/")
        self.root_dir.mkdir(parents=True, exist_ok=True)

    def store(self, group: str, raw: bytes, extension: str) -> str:
        filename = unique_name(extension)
        compressed_name = f"compressed-{filename}"
        group_dir = self.root_dir / group
        if group_dir.resolve().parent != self.root_dir.resolve():
            raise ValidationError(f"Invalid image group: {group}")

        try:
            group_dir.mkdir(parents=True, exist_ok=True)
            original_path = group_dir / filename
            original_path.write_bytes(raw)
            (group_dir / compressed_name).write_bytes(normalize_image(original_path.read_bytes()))
            original_path.unlink()
        except OSError as e:
            logger.error(f"Error writing image to {group_dir}: {e}")
            raise StorageError() from e

        logger.info(f"Stored image {compressed_name} in {group_dir}")
        return f"{self.url_prefix}/{group}/{compressed_name}"


class S3ImageStore(ImageStore):
    def __init__(
        self,
        bucket_name: str,
        access_key: str | None = None,
        secret_key: str | None = None,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        folder: str = S3_FOLDER,
        client=None,
    ):
        self.bucket_name = bucket_name
        self.region = region
        self.endpoint_url = endpoint_url.rstrip("/") if endpoint_url else None
        self.folder = folder
        self.client = client or boto3.client(
            "s3",
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
            endpoint_url=endpoint_url,
        )

    def object_url(self, key: str) -> str:
        if self.endpoint_url:
            return f"{self.endpoint_url}/{self.bucket_name}/{key}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{key}"

    def store(self, group: str, raw: bytes, extension: str) -> str:
        # The bucket always receives JPEG, whatever the upload format was
        key = f"{self.folder}/{group}/{unique_name('.jpg')}"
        body = normalize_image(raw)

        try:
            self.client.put_object(Bucket=self.bucket_name, Key=key, Body=body, ContentType="image/jpeg")
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error uploading {key} to bucket {self.bucket_name}: {e}")
            raise StorageError() from e

        logger.info(f"Uploaded image {key} to bucket {self.bucket_name}")
        return self.object_url(key)

    def check_bucket(self) -> bool:
        self.client.head_bucket(Bucket=self.bucket_name)
        return True


def build_image_store(backend: str = STORAGE_BACKEND) -> ImageStore:
    """Pick the image backend named by configuration."""
    if backend == "local":
        return LocalImageStore()
    if backend == "s3":
        if not S3_CONFIG["bucket_name"]:
            raise RuntimeError("S3_BUCKET_NAME must be set when STORAGE_BACKEND=s3")
        return S3ImageStore(
            bucket_name=S3_CONFIG["bucket_name"],
            access_key=S3_CONFIG["access_key"],
            secret_key=S3_CONFIG["secret_key"],
            region=S3_CONFIG["region"],
            endpoint_url=S3_CONFIG["endpoint_url"],
        )
    raise RuntimeError(f"Unknown STORAGE_BACKEND: {backend}")
