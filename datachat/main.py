"""
Main FastAPI Application
Entry point for DataChat Backend
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from datachat.core.config import settings, is_production
from datachat.core.logger import get_logger
from datachat.core.query_bridge import QueryBridge
from datachat.db.session import Store
from datachat.api.v1 import chat, datasets

logger = get_logger(__name__)


def create_app(store: Store = None, bridge: QueryBridge = None) -> FastAPI:
    """
    Build the application

    Args:
        store: In-memory store (a fresh one by default)
        bridge: Question -> query bridge (configured from settings by default)
    """

    # ==========================================
    # CREATE APP
    # ==========================================

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Ask questions about your uploaded data",
        docs_url=None if is_production() else "/docs",
        redoc_url=None if is_production() else "/redoc"
    )
    app.state.store = store if store is not None else Store()
    app.state.bridge = bridge if bridge is not None else QueryBridge.from_settings()

    # ==========================================
    # CORS MIDDLEWARE
    # ==========================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ==========================================
    # ROUTERS
    # ==========================================

    # API v1
    app.include_router(datasets.router, prefix="/api/v1")
    app.include_router(chat.router, prefix="/api/v1")

    # ==========================================
    # ROOT ENDPOINT
    # ==========================================

    @app.get("/")
    def root():
        """API root endpoint"""
        return {
            "message": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs": "/docs",
            "health": "/health"
        }

    # ==========================================
    # HEALTH CHECK
    # ==========================================

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "environment": settings.ENVIRONMENT,
            "version": settings.APP_VERSION,
            "datasets": len(app.state.store.datasets),
            "language_model": app.state.bridge.claude is not None
        }

    # ==========================================
    # EXCEPTION HANDLERS
    # ==========================================

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """Global exception handler"""
        logger.error(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "error": str(exc) if settings.DEBUG else "An error occurred"
            }
        )

    # ==========================================
    # STARTUP / SHUTDOWN
    # ==========================================

    @app.on_event("startup")
    async def startup_event():
        """Run on application startup"""
        logger.info(f"🚀 Starting {settings.APP_NAME} v{settings.APP_VERSION}")
        logger.info(f"📊 Environment: {settings.ENVIRONMENT}")
        logger.info(f"🔗 Docs: http://localhost:8000/docs")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Run on application shutdown"""
        logger.info(f"👋 Shutting down {settings.APP_NAME}")

    return app


app = create_app()


# ==========================================
# DEVELOPMENT
# ==========================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "datachat.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
