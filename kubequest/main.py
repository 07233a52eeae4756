import logging
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware  # The visualizer is served from another origin
from kubequest.core.config import settings
from kubequest.core.exceptions import ClusterFullError, UnknownConceptError
from kubequest.core.logging_config import setup_logging
from kubequest.api.v1.api import api_router as api_v1_router
from kubequest.services.cluster_service import cluster_service

# Setup logging FIRST
setup_logging()
logger = logging.getLogger(__name__)

# Create FastAPI app instance
app = FastAPI(
    title=settings.APP_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    version="0.1.0"
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins
    allow_credentials=True,
    allow_methods=["*"],  # Allow all methods
    allow_headers=["*"],  # Allow all headers
)
# Include API router
app.include_router(api_v1_router, prefix=settings.API_V1_STR)

# Root endpoint
@app.get("/", tags=["Root"], summary="Root endpoint for service status")
async def read_root():
    """Returns a welcome message indicating the service is running."""
    return {"message": f"Welcome to the {settings.APP_NAME}"}

# --- Exception handlers ---
@app.exception_handler(ClusterFullError)
async def cluster_full_exception_handler(request: Request, exc: ClusterFullError):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": str(exc), "error": "ClusterFull", "node_count": exc.node_count},
    )

@app.exception_handler(UnknownConceptError)
async def unknown_concept_exception_handler(request: Request, exc: UnknownConceptError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.error(f"Request validation error: {exc.errors()}", exc_info=False) # Don't need full stack trace usually
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.errors()},
    )

@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception during request to {request.url}: {exc}", exc_info=True) # Log full trace for unexpected errors
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred."},
    )

# --- Startup/Shutdown Events ---
@app.on_event("startup")
async def startup_event():
    logger.info("Application startup...")
    snapshot = cluster_service.snapshot()
    logger.info(f"Application '{settings.APP_NAME}' started successfully.")
    logger.info(f"Initial cluster: {len(snapshot.nodes)} node(s), capacity {settings.MAX_PODS_PER_NODE} pods each")
    logger.info(f"Recovery delay: {settings.RECOVERY_DELAY_MS} ms")
    logger.info(f"Clock mode: {settings.CLOCK_MODE}")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown...")
    pending = cluster_service.pending_recoveries
    if pending:
        logger.info(f"{pending} pending self-healing task(s) discarded with the process.")
    logger.info("Application shutdown complete.")

# --- Run with Uvicorn (for local development) ---
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "kubequest.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True, # Enable reload for development
        log_level=settings.LOG_LEVEL.lower()
     )
