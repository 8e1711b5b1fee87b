# app/main.py

import asyncio
import sys
import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import LOG_LEVEL, PROFILE_API_BASE_URL
from app.core.redis import redis_client

# --- Configure logging FIRST ---
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(name)s:%(levelname)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger("ascendify")
logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

for name in ("uvicorn.error", "uvicorn.access", "fastapi"):
    logging.getLogger(name).setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

logger.info(f"Logging configured at {LOG_LEVEL} level")

# --- Routers ---
from app.api.questionnaire import router as questionnaire_router

# --- Create FastAPI app ---
app = FastAPI(
    title       = "Ascendify Questionnaire API",
    version     = "1.0.0",
    description = "Guided climbing-training questionnaire backed by the Ascendify profile API"
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    logger.info(f"📥 Incoming request: {request.method} {request.url.path}")

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(f"✅ Request completed in {process_time:.3f}s with status {response.status_code}")
    return response


# --- Validation‐error handler ---
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.error(
        f"\n❗️ Validation error for {request.url.path}\n"
        f"Errors:\n{exc.errors()!r}"
    )
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError):
    # ctx can hold the raw exception object, which is not JSON serializable
    return [
        {key: value for key, value in error.items() if key != "ctx"}
        for error in exc.errors()
    ]


app.add_middleware(
    CORSMiddleware,
    allow_origins     = ["*"],
    allow_credentials = True,
    allow_methods     = ["*"],
    allow_headers     = ["*"],
)

app.include_router(questionnaire_router, tags=["Questionnaire"])


@app.on_event("startup")
async def startup_event():
    logger.info("🚀 Starting Ascendify Questionnaire API")
    logger.info(f"📋 Profile API: {PROFILE_API_BASE_URL}")

    try:
        logger.info("🔄 Testing Redis connection...")
        await asyncio.wait_for(redis_client.ping(), timeout=5.0)
        logger.info("✅ Redis connection OK")
    except asyncio.TimeoutError:
        logger.warning("⚠️  Redis connection timeout - questionnaire sessions will fail")
    except Exception as e:
        logger.warning(f"⚠️  Redis connection failed: {e} - questionnaire sessions will fail")

    logger.info("🎉 Application startup complete!")


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "Welcome to the Ascendify Questionnaire API",
        "status":  "online",
        "version": app.version,
        "docs":    "/docs"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "healthy"}
