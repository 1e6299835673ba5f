"""
Infrastructure Setup Script for Bike Reviews Backend
This script checks the database connection, creates indexes and verifies image storage.
"""

import logging

from bike_reviews.config import STORAGE_BACKEND
from bike_reviews.db.mongodb_client import REVIEWS_COLLECTION, mongo_client
from bike_reviews.services.image_store import LocalImageStore, S3ImageStore, build_image_store

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def check_database_connection():
    """Check that MongoDB answers and make sure the indexes exist."""
    logger.info("Checking database connection...")

    try:
        mongo_client.ping()
        logger.info("✅ MongoDB connection: OK")
        mongo_client.create_indexes()
        count = mongo_client.get_collection(REVIEWS_COLLECTION).count_documents({})
        logger.info(f"🏍️ Reviews in database: {count}")
    except Exception as e:
        logger.error(f"❌ MongoDB connection error: {e}")
        return False

    return True


def check_image_storage():
    """Check that the configured image backend is usable."""
    logger.info(f"Checking image storage ({STORAGE_BACKEND})...")

    try:
        store = build_image_store()
        if isinstance(store, LocalImageStore):
            probe = store.root_dir / ".write-check"
            probe.write_text("ok")
            probe.unlink()
            logger.info(f"✅ Upload directory writable: {store.root_dir}")
        elif isinstance(store, S3ImageStore):
            store.check_bucket()
            logger.info(f"✅ S3 bucket reachable: {store.bucket_name}")
    except Exception as e:
        logger.error(f"❌ Image storage error: {e}")
        return False

    return True


def main():
    """Main setup function."""
    logger.info("🚀 Setting up Bike Reviews Backend...")

    if not check_database_connection():
        logger.error("❌ Database connection check failed!")
        return False

    if not check_image_storage():
        logger.error("❌ Image storage check failed!")
        return False

    logger.info("✅ Setup complete! Ready to start the server.")
    return True


if __name__ == "__main__":
    main()
