"""FastAPI application for the bike reviews backend."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, Query, UploadFile, WebSocket, WebSocketDisconnect
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from bike_reviews.config import LOG_LEVEL, STORAGE_BACKEND, UPLOAD_DIR, UPLOAD_URL_PREFIX
from bike_reviews.db.mongodb_client import mongo_client
from bike_reviews.db.review_repository import review_repository
from bike_reviews.errors import BikeReviewError
from bike_reviews.models import Review, UploadedImage
from bike_reviews.services.notifications import connection_manager
from bike_reviews.services.review_service import check_upload_limits, review_service

# Configure logging
logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        mongo_client.create_indexes()
        logger.info("Connected to MongoDB")
    except Exception as e:
        logger.error(f"MongoDB connection error: {e}")
    yield


# Create FastAPI app
app = FastAPI(
    title="Bike Reviews API",
    description="Motorcycle ownership reviews with photo uploads and live updates",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

if STORAGE_BACKEND == "local":
    UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=UPLOAD_DIR), name="uploads")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request, exc: RequestValidationError):
    logger.warning(f"Malformed request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"message": "All required fields must be provided"})


def to_http_error(exc: Exception, context: str) -> HTTPException:
    """Log a failure and turn it into the HTTP error the client sees."""
    if isinstance(exc, BikeReviewError):
        if exc.status_code >= 500:
            logger.error(f"Error {context}: {exc.__cause__ or exc}")
        else:
            logger.warning(f"Rejected {context}: {exc.message}")
        return HTTPException(status_code=exc.status_code, detail=exc.message)
    logger.error(f"Error {context}: {exc}")
    return HTTPException(status_code=500, detail="Server error")


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "Bike Reviews API"}


# Review Endpoints
@app.get("/api/bikes", response_model=list[Review])
def list_bikes():
    """All reviews, newest first."""
    try:
        return review_repository.list_recent()
    except Exception as e:
        raise to_http_error(e, "fetching bikes")


@app.get("/api/bikes/search", response_model=list[Review])
def search_bikes(query: Optional[str] = Query(None)):
    """Search reviews by bike or model name."""
    try:
        return review_repository.search(query)
    except Exception as e:
        raise to_http_error(e, "searching bikes")


@app.get("/api/bikes/{bike_id}", response_model=Review)
def get_bike(bike_id: str):
    """Get a single review."""
    try:
        return review_repository.get_by_id(bike_id)
    except Exception as e:
        raise to_http_error(e, "fetching bike")


@app.post("/api/bikes/add", response_model=Review, status_code=201)
async def add_bike_review(
    rider_name: Optional[str] = Form(None, alias="riderName"),
    bike_name: Optional[str] = Form(None, alias="bikeName"),
    model_name: Optional[str] = Form(None, alias="modelName"),
    purchase_year: Optional[str] = Form(None, alias="purchaseYear"),
    total_km: Optional[str] = Form(None, alias="totalKM"),
    bike_cost: Optional[str] = Form(None, alias="bikeCost"),
    cost_per_service: Optional[str] = Form(None, alias="costPerService"),
    review: Optional[str] = Form(None),
    rating: Optional[str] = Form(None),
    worth_the_cost: Optional[str] = Form(None, alias="worthTheCost"),
    bike_images: Optional[list[UploadFile]] = File(None, alias="bikeImages"),
):
    """Submit a review with 3 to 5 photos."""
    fields = {
        "riderName": rider_name,
        "bikeName": bike_name,
        "modelName": model_name,
        "purchaseYear": purchase_year,
        "totalKM": total_km,
        "bikeCost": bike_cost,
        "costPerService": cost_per_service,
        "review": review,
        "rating": rating,
        "worthTheCost": worth_the_cost,
    }

    uploads = bike_images or []
    try:
        # Refuse oversized batches before any file body is read into memory
        check_upload_limits([upload.size for upload in uploads])
        images = [
            UploadedImage(filename=upload.filename or "", content_type=upload.content_type, data=await upload.read())
            for upload in uploads
        ]
        return await review_service.submit(fields, images)
    except Exception as e:
        raise to_http_error(e, "adding bike review")


# Live updates
@app.websocket("/ws")
async def live_updates(websocket: WebSocket):
    """Push newReview events to connected clients; inbound messages are ignored."""
    await connection_manager.connect(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        connection_manager.disconnect(websocket)


if __name__ == "__main__":
    import uvicorn

    from bike_reviews.config import PORT

    uvicorn.run(app, host="0.0.0.0", port=PORT)
