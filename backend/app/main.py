from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from app.api.v1.api import api_router
from app.utils.exceptions import AppException
from app.utils.helpers import error_response
from core.logging import setup_logging
from db.engine import dispose_engine, is_configured
from db.safe_query import QueryExecutionError, check_connection

# Initialize logging
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if is_configured():
        try:
            await run_in_threadpool(check_connection)
            logger.info("Database connection successful")
        except QueryExecutionError as e:
            logger.error(f"Database connection failed: {e.message}")
    else:
        logger.warning("DATABASE_URL is not set; data questions will return database errors")
    yield
    dispose_engine()


app = FastAPI(
    title="Sales Insight Chat API",
    version="1.0.0",
    description="Conversational question answering over the sales warehouse",
    lifespan=lifespan,
)

# CORS Configuration
origins = ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    response = error_response(exc.message, status_code=exc.status_code, error_code=exc.error)
    return response
