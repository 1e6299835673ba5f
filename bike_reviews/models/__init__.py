"""
Init file for the Pydantic models.
"""

from .reviews import Review, ReviewSubmission, UploadedImage, WorthTheCost

__all__ = [
    "Review",
    "ReviewSubmission",
    "UploadedImage",
    "WorthTheCost",
]
