"""
Aby FastAPI Main Application
Entry point for the Aby management REST and WebSocket API
"""
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
import logging

from aby_api.core.config import settings
from aby_api.core.database import check_db_connection, init_db
from aby_api.core.exceptions import AbyException
from aby_api.core.logging import setup_logging, setup_uvicorn_logging
from aby_api.api.v1.api_router import api_router
from aby_api.realtime import manager
from aby_api.realtime.endpoint import router as realtime_router

# Configure logging
setup_logging()

logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
    ## Aby Management API

    Back office for construction sites, stores and fish farming.

    ### Business Modules:
    - **Stock Requisition**: site requests, approval, issue from stock, receipt on site
    - **Stock**: categories, stock-in records and the movement journal
    - **Assets**: asset register, asset requests and procurement
    - **HR**: employees, departments, jobs, applicants and clients
    - **Sites & Stores**: sites with their staff and the stores holding stock
    - **Aquaculture**: cages, feeding, medication, medicines and ponds

    Live updates are pushed to dashboards over the `/ws` WebSocket.
    """,
    docs_url=settings.DOCS_URL,
    redoc_url=settings.REDOC_URL,
    openapi_url=settings.OPENAPI_URL,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add trusted host middleware for production
if not settings.DEBUG:
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=settings.ALLOWED_HOSTS
    )


# Health check endpoint
@app.get("/health", tags=["System"])
async def health_check():
    """
    Health check endpoint for monitoring and load balancers

    Returns system status and database connectivity
    """
    try:
        db_status = check_db_connection()

        return {
            "status": "healthy" if db_status else "degraded",
            "version": settings.APP_VERSION,
            "database": "connected" if db_status else "disconnected",
            "websocket_connections": manager.connection_count,
            "debug": settings.DEBUG
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(status_code=503, detail="Service unavailable")


# System information endpoint
@app.get("/info", tags=["System"])
async def system_info():
    """
    System information endpoint
    """
    return {
        "application": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "api_version": "v1",
        "docs_url": settings.DOCS_URL,
        "websocket_url": settings.WS_PATH,
        "business_modules": {
            "stock_requisition": "Site requests, approval, issue and receipt of materials",
            "stock": "Categories, stock-in records, movement history and export",
            "assets": "Asset register, asset requests and procurement",
            "hr": "Employees, departments, contracts, jobs, applicants and clients",
            "sites": "Sites, staff assignment and stores",
            "aquaculture": "Cages, feeding, medication, medicines and ponds",
            "hatchery": "Laboratory boxes, egg migrations, water changes, batch feeding and medication"
        }
    }


# Application startup event
@app.on_event("startup")
async def startup_event():
    """
    Application startup tasks

    Verify the database and create missing tables
    """
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    if not check_db_connection():
        logger.error("Failed to connect to database on startup")
        raise RuntimeError("Database connection failed")

    logger.info("Database connection established")
    init_db()
    logger.info("Application startup completed successfully")


# Application shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down application")


@app.exception_handler(AbyException)
async def aby_exception_handler(request: Request, exc: AbyException):
    """
    Domain errors raised by services, mapped to their HTTP status
    """
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler for unhandled errors

    Args:
        request: FastAPI request object
        exc: Exception that occurred

    Returns:
        JSON error response
    """
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "detail": str(exc) if settings.DEBUG else "An unexpected error occurred",
        }
    )


# Uploaded files
app.mount(
    settings.UPLOAD_URL_PREFIX,
    StaticFiles(directory=str(settings.UPLOAD_DIR)),
    name="uploads"
)

# Include API routers
app.include_router(api_router, prefix=settings.API_V1_STR)
app.include_router(realtime_router, tags=["Realtime"])


if __name__ == "__main__":
    import uvicorn

    setup_uvicorn_logging()
    uvicorn.run(
        "aby_api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
