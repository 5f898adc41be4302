from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pathlib import Path
import logging

from shop_admin.api.api import api_router
from shop_admin.core.config import settings
from shop_admin.core.exceptions import AppError
from shop_admin.schemas.image import UploadTransform
from shop_admin.services.admin_auth import AdminAuthService
from shop_admin.services.asset_store import build_asset_store
from shop_admin.services.email_service import EmailService
from shop_admin.services.image_upload import ImageUploadService
from shop_admin.services.product_images import ProductImageLifecycleManager
from shop_admin.services.upload_cache import DuplicateUploadCache

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

APP_DIR = Path(__file__).resolve().parent
BASE_DIR = APP_DIR.parent # This is backend/
STATIC_DIR = BASE_DIR / "static"
# The local asset store writes under STATIC_DIR / "uploads"

STATIC_DIR.mkdir(parents=True, exist_ok=True)


def build_services(app: FastAPI) -> DuplicateUploadCache:
    """Wire the process-wide services onto app.state and return the upload cache."""
    cache = DuplicateUploadCache(
        ttl_seconds=settings.UPLOAD_CACHE_TTL_SECONDS,
        sweep_interval_seconds=settings.UPLOAD_CACHE_SWEEP_INTERVAL_SECONDS,
    )
    asset_store = build_asset_store(settings, STATIC_DIR)
    upload_service = ImageUploadService(
        asset_store,
        cache,
        transform=UploadTransform(max_width=settings.IMAGE_MAX_WIDTH, max_height=settings.IMAGE_MAX_HEIGHT),
    )
    email_service = EmailService(settings.RESEND_API_KEY, settings.EMAIL_FROM, settings.FRONTEND_URL)

    app.state.upload_cache = cache
    app.state.asset_store = asset_store
    app.state.upload_service = upload_service
    app.state.product_images = ProductImageLifecycleManager(asset_store, upload_service)
    app.state.email_service = email_service
    app.state.admin_auth = AdminAuthService(email_service)
    return cache


@asynccontextmanager
async def lifespan(app: FastAPI):
    cache = build_services(app)
    cache.start()
    logger.info(
        "%s started (asset store: %s, namespace: %s)",
        settings.PROJECT_NAME, settings.ASSET_STORE_BACKEND, settings.ASSET_NAMESPACE,
    )

    yield

    await cache.stop()
    logger.info("Upload cache sweeper stopped")


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_STR}/openapi.json",
    version=settings.PROJECT_VERSION,
    lifespan=lifespan,
)


app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

# --- BEGIN CORS MIDDLEWARE SETUP ---
# The admin frontend origin(s) come from BACKEND_CORS_ORIGINS in .env
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
# --- END CORS MIDDLEWARE SETUP ---


# --- Error handlers ---
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies / params are a 400 with one entry per offending field."""
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())[1:]) or None,
            "message": error.get("msg", "Invalid value"),
        }
        for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"detail": errors})


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error("Unexpected error on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Include the main API router
app.include_router(api_router, prefix=settings.API_STR)

@app.get("/")
async def read_root():
    return {"message": f"Welcome to {settings.PROJECT_NAME}!"}

@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.
    """
    return {"status": "ok", "message": f"{settings.PROJECT_NAME} is healthy!"}
