#!/usr/bin/env python3
"""
Bike Reviews Backend Startup Script
This script starts the FastAPI server with the review API and live updates.
"""

import logging

import uvicorn

from bike_reviews.config import PORT, STORAGE_BACKEND

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    logger.info("Starting Bike Reviews Backend...")
    logger.info(f"Image storage backend: {STORAGE_BACKEND}")
    logger.info("Available endpoints:")
    logger.info("  - Health Check: GET /health")
    logger.info("  - List Reviews: GET /api/bikes")
    logger.info("  - Search Reviews: GET /api/bikes/search?query=...")
    logger.info("  - Get Review: GET /api/bikes/{id}")
    logger.info("  - Add Review: POST /api/bikes/add (multipart, bikeImages)")
    logger.info("  - Live Updates: WS /ws (newReview events)")
    logger.info(f"  - API Docs: http://localhost:{PORT}/docs")

    uvicorn.run(
        "bike_reviews.main:app",
        host="0.0.0.0",
        port=PORT,
        reload=True,
        log_level="info"
    )
