from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import logging

from config.settings import Settings, settings
from core.state import SessionStore
from routes import recordings, session
from signaling.handler import SignalingHandler

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

def create_app(app_settings: Settings = settings) -> FastAPI:
    """
    Build the application around its own session store.
    Every app gets independent state, so tests can create as many as they need.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            Path(app_settings.RECORDINGS_DIR).mkdir(parents=True, exist_ok=True)
            logger.info("✅ Application started successfully")
            logger.info(f"🔒 Host role enforcement: {app_settings.ENFORCE_HOST_ROLE}")
        except Exception as e:
            logger.error(f"❌ Failed to start application: {str(e)}")
            raise
        yield
        logger.info("❌ Application shutdown")

    app = FastAPI(
        title=app_settings.API_TITLE,
        version=app_settings.API_VERSION,
        description="Interview queue and WebRTC signaling server",
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    store = SessionStore(
        code_length=app_settings.SESSION_CODE_LENGTH,
        alphabet=app_settings.SESSION_CODE_ALPHABET,
        max_attempts=app_settings.SESSION_CODE_MAX_ATTEMPTS
    )
    app.state.settings = app_settings
    app.state.signaling = SignalingHandler(store, enforce_host_role=app_settings.ENFORCE_HOST_ROLE)

    # ============ CORS Middleware ============

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ============ Health Check ============

    @app.get("/health", tags=["health"])
    async def health_check(request: Request):
        """
        Health check endpoint.
        Returns application status and the number of live sessions.
        """
        return {
            "status": "healthy",
            "service": app_settings.API_TITLE,
            "version": app_settings.API_VERSION,
            "sessions": len(request.app.state.signaling.store)
        }

    # ============ Include Routers ============

    app.include_router(session.router)
    app.include_router(recordings.router)

    # ============ Front-end ============

    static_dir = Path(app_settings.STATIC_DIR)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
        logger.info(f"Serving front-end from {static_dir}")
    else:
        @app.get("/", tags=["root"])
        async def root():
            """
            Root endpoint.
            Returns API information.
            """
            return {
                "message": app_settings.API_TITLE,
                "version": app_settings.API_VERSION,
                "docs": "/docs",
                "health": "/health"
            }

    return app

app = create_app()

# ============ Run Application ============

if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting server on {settings.HOST}:{settings.PORT}")

    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )
