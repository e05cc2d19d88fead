"""
OrganiJob - FastAPI application entry point.

A personal job search tracker: networking contacts synchronized across
devices, plus message templates and directories of trainings and
support services.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from pathlib import Path
import logging

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.engine import make_url

from . import __version__
from .config import settings
from .rate_limit import limiter
from .storage import get_storage
from .routers import sync, tools
from .auth import router as auth_router

# --- Logging Configuration ---
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("organijob")

MSG_BAD_REQUEST = "Requete invalide."
MSG_SERVER_ERROR = "Erreur serveur."


def ensure_data_directories():
    """Create the parent directory of the SQLite database or JSON data file."""
    if settings.storage_backend == "file":
        Path(settings.data_file).parent.mkdir(parents=True, exist_ok=True)
        return
    url = make_url(settings.database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize storage on startup."""
    logger.info("Starting OrganiJob application...")
    ensure_data_directories()
    get_storage().init()
    logger.info("OrganiJob ready!")
    yield
    logger.info("Shutting down OrganiJob...")


app = FastAPI(
    title="OrganiJob",
    description="Personal job search tracker - networking contacts synchronized across devices",
    version=__version__,
    lifespan=lifespan
)

# --- Rate Limiting ---
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# --- Error Handlers ---
# Every API error is rendered as {"error": "<message>"} for the front-end.

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.debug(f"Invalid request on {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": MSG_BAD_REQUEST})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": MSG_SERVER_ERROR})


# --- Security Headers Middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


# --- Middleware ---
# Parse allowed origins from config
_allowed_origins = [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# Include routers
app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(sync.router, prefix="/api/sync", tags=["sync"])
app.include_router(tools.router, prefix="/api/tools", tags=["tools"])


# --- API Endpoints ---

@app.get("/api/health", tags=["system"])
async def health_check():
    """Health check endpoint for monitoring."""
    return {"ok": True}


# --- Static front-end ---
# Mounted last so every API route above takes precedence. StaticFiles keeps
# lookups inside public_dir and serves index.html for "/".
app.mount(
    "/",
    StaticFiles(directory=settings.public_dir, html=True, check_dir=False),
    name="public",
)
