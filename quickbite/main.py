"""
QuickBite food delivery - FastAPI application
"""
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from quickbite import __version__
from quickbite.api import admin, auth, orders, restaurants, users
from quickbite.core.config import settings
from quickbite.core.database import SessionLocal, create_tables
from quickbite.core.exceptions import AppError, InternalError, ValidationError
from quickbite.core.responses import error_body

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Food delivery backend: accounts, restaurant catalog and orders",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Error handlers

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.code, exc.field),
    )

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path", "header")]
    field = ".".join(location) or None
    message = f"Invalid value for {field}: {first.get('msg')}" if field else "Invalid request body"
    return JSONResponse(
        status_code=ValidationError.status_code,
        content=error_body(message, ValidationError.__name__, field),
    )

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    code = "NotFoundError" if exc.status_code == 404 else "HTTPError"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), code),
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Database error on {request.method} {request.url.path}")
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=error_body(error.message, error.code))

@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=error_body(error.message, error.code))

# Routers
app.include_router(auth.router, prefix=settings.API_PREFIX)
app.include_router(users.router, prefix=settings.API_PREFIX)
app.include_router(restaurants.router, prefix=settings.API_PREFIX)
app.include_router(orders.router, prefix=settings.API_PREFIX)
app.include_router(admin.router, prefix=settings.API_PREFIX)

@app.on_event("startup")
def on_startup():
    """Create tables, drop expired signups and optionally seed the catalog"""
    from quickbite.seed import seed_catalog
    from quickbite.services.accounts import purge_stale_pending_signups

    create_tables()
    db = SessionLocal()
    try:
        purge_stale_pending_signups(db)
        if settings.SEED_ON_STARTUP:
            seed_catalog(db)
    finally:
        db.close()
    logger.info(f"{settings.PROJECT_NAME} started")

# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "quickbite-api"}

# API version info
@app.get("/")
async def root():
    """API root endpoint"""
    return {
        "message": f"{settings.PROJECT_NAME} API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("quickbite.main:app", host="0.0.0.0", port=8000)
