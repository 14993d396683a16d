from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError
import uvicorn
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
from errors import (
    StoreError,
    store_error_handler,
    http_error_handler,
    request_validation_handler,
    general_exception_handler,
)
from routers import students
from store import MongoStudentStore

logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
logger = logging.getLogger(__name__)


async def connect_store(client: AsyncIOMotorClient) -> MongoStudentStore:
    database = client.get_database(config.DATABASE_NAME)
    try:
        await database.command("ping")
    except PyMongoError as e:
        logger.critical(f"Cannot connect to MongoDB at {config.MONGODB_URL}: {e}")
        raise
    store = MongoStudentStore(database.get_collection(config.COLLECTION_NAME))
    await store.ensure_indexes()
    logger.info(f"MongoDB connected successfully at {datetime.now(timezone.utc).isoformat()}")
    return store


def create_app(store=None) -> FastAPI:
    """Build the record service.

    With ``store`` given the app serves from it as-is. Without one, the
    lifespan opens a single Motor client for the whole process and a failed
    connection aborts startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if store is not None:
            yield
            return
        client = AsyncIOMotorClient(config.MONGODB_URL, serverSelectionTimeoutMS=config.MONGODB_TIMEOUT_MS)
        try:
            app.state.store = await connect_store(client)
        except Exception:
            client.close()
            raise
        yield
        client.close()
        logger.info(f"MongoDB connection closed at {datetime.now(timezone.utc).isoformat()}")

    app = FastAPI(
        title="Student Records API",
        description="Backend API for student record management",
        version="1.0.0",
        lifespan=lifespan,
    )
    if store is not None:
        app.state.store = store

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(students.router, prefix="/students", tags=["students"])

    @app.get("/health")
    async def health_check():
        await app.state.store.ping()
        return {
            "status": "OK",
            "database": "connected",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.HOST,
        port=config.PORT,
    )
