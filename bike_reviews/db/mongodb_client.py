"""MongoDB connection and utilities."""

import logging

from pymongo import DESCENDING, TEXT, MongoClient
from pymongo.database import Database

from bike_reviews.config import MONGO_CONFIG

logger = logging.getLogger(__name__)

REVIEWS_COLLECTION = "bikes"


class MongoDBClient:
    def __init__(self):
        # MongoClient connects lazily, so building it here never blocks startup
        self.client = MongoClient(
            MONGO_CONFIG["uri"],
            tz_aware=True,
            serverSelectionTimeoutMS=MONGO_CONFIG["timeout_ms"],
        )
        self.db: Database = self.client[MONGO_CONFIG["database"]]

    def get_collection(self, name: str):
        """Get a MongoDB collection."""
        return self.db[name]

    def ping(self) -> bool:
        """Check that the server answers."""
        self.client.admin.command("ping")
        return True

    def create_indexes(self):
        """Create necessary indexes."""
        reviews = self.db.get_collection(REVIEWS_COLLECTION)
        reviews.create_index([("createdAt", DESCENDING)])
        reviews.create_index([("bikeName", TEXT), ("modelName", TEXT)])
        logger.info(f"Indexes ensured on '{REVIEWS_COLLECTION}'")


# Singleton instance
mongo_client = MongoDBClient()
