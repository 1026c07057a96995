import logging

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request

from gyms_api import router as gyms_router
from logging_config import setup_logging
from profiles_api import router as profiles_router
from sync_api import router as sync_router
from workouts_api import router as workouts_router

# Load environment variables from .env file
load_dotenv()
setup_logging()

logger = logging.getLogger(__name__)

app = FastAPI(title="Lift Log Server", version="1.0.0")


@app.middleware("http")
async def log_internal_errors(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as e:
        if isinstance(e, HTTPException) and e.status_code < 500:
            raise
        logger.exception(
            "Unhandled exception during request: %s %s", request.method, request.url
        )
        raise


# Include routers
app.include_router(workouts_router)
app.include_router(sync_router)
app.include_router(gyms_router)
app.include_router(profiles_router)


@app.get("/")
async def root():
    return {"message": "Welcome to Lift Log Server"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
