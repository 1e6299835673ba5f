"""Shared fixtures for the bike reviews tests."""

import io
import os
import tempfile
from datetime import datetime, timezone

# Keep uploads from the app singletons out of the working tree
os.environ.setdefault("STORAGE_BACKEND", "local")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="bike-reviews-uploads-"))
os.environ.setdefault("MONGODB_TIMEOUT_MS", "100")

import pytest
from PIL import Image

from bike_reviews.models import Review, UploadedImage


def make_image_bytes(size=(64, 48), fmt="JPEG", mode="RGB") -> bytes:
    out = io.BytesIO()
    Image.new(mode, size, color="red" if mode == "RGB" else 0).save(out, format=fmt)
    return out.getvalue()


@pytest.fixture
def image_bytes():
    return make_image_bytes


@pytest.fixture
def jpeg_bytes():
    return make_image_bytes()


@pytest.fixture
def valid_fields():
    return {
        "riderName": "Asha",
        "bikeName": "Royal Enfield",
        "modelName": "Himalayan",
        "purchaseYear": "2020",
        "totalKM": "15000",
        "bikeCost": "250000",
        "costPerService": "3000",
        "review": "Reliable tourer",
        "rating": "5",
        "worthTheCost": "Definitely Yes",
    }


@pytest.fixture
def make_images(jpeg_bytes):
    def _make(count, content_type="image/jpeg"):
        return [
            UploadedImage(filename=f"photo{i}.jpg", content_type=content_type, data=jpeg_bytes) for i in range(count)
        ]

    return _make


@pytest.fixture
def sample_review():
    return Review(
        _id="65f1c0ffee65f1c0ffee65f1",
        riderName="Asha",
        bikeName="Royal Enfield",
        modelName="Himalayan",
        purchaseYear=2020,
        totalKM=15000,
        bikeCost=250000,
        costPerService=3000,
        review="Reliable tourer",
        rating=5,
        worthTheCost="Definitely Yes",
        images=[f"/uploads/RoyalEnfield-Himalayan/compressed-{i}.jpg" for i in range(3)],
        createdAt=datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc),
    )
