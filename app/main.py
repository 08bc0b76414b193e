"""
FastAPI Application Entry Point.
Initializes the FastAPI app with middleware, error handlers, and routes.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.config import settings
from app.core.errors import CallableError, InvalidArgument
from app.core.firebase import get_firestore, init_firebase

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Initializes Firebase before serving requests.
    """
    init_firebase()
    yield


# Initialize FastAPI application
app = FastAPI(
    title="Chat Functions Server",
    description="Callable chat functions backed by Firestore and Cloud Storage",
    version="1.0.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

from app.api.v1 import chats, functions

# Rate limiter state and error handler
app.state.limiter = functions.limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(CallableError)
async def callable_error_handler(request: Request, exc: CallableError):
    """Render service errors in the callable error envelope."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed callable payloads surface as INVALID_ARGUMENT."""
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "Invalid request"
    return await callable_error_handler(request, InvalidArgument(message))


# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health Check Endpoints
@app.get("/health", tags=["Health"])
async def health_check():
    """Basic health check endpoint."""
    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "environment": settings.environment,
        }
    )


@app.get("/health/ready", tags=["Health"])
async def readiness_check():
    """
    Readiness check endpoint.
    Verifies Firestore connectivity.
    """
    checks = {"firestore": False}

    try:
        await get_firestore().collection("chat_rooms").limit(1).get()
        checks["firestore"] = True
    except Exception as e:
        logger.warning(f"Firestore readiness check failed: {e}")

    all_healthy = all(checks.values())
    return JSONResponse(
        status_code=200 if all_healthy else 503,
        content={
            "status": "ready" if all_healthy else "not ready",
            "checks": checks,
        }
    )


# Include API routers
app.include_router(
    functions.router,
    prefix="/api/v1/functions",
    tags=["Functions"]
)

app.include_router(
    chats.router,
    prefix="/api/v1/chats",
    tags=["Chats"]
)
