import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from director.api.v1.api import router
from director.core.config import settings
from director.core.gateway import ModelGateway, OpenAIGateway
from director.core.registry import SessionRegistry

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(gateway: ModelGateway | None = None) -> FastAPI:
    """Build the API.  Tests pass a fake *gateway*; production builds the OpenAI one at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup: build the model gateway and session registry."""
        app.state.registry = SessionRegistry(gateway or OpenAIGateway(settings), settings)
        logger.info("%s started in %s mode", settings.PROJECT_NAME, settings.MODE.value)
        yield
        logger.info("Shutting down with %d live sessions", len(app.state.registry))

    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        lifespan=lifespan,
    )

    # ── Global Exception Handler (ensures 500s return JSON through CORS) ──

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception: %s", exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # ── Middleware ────────────────────────────────────────────

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routers ───────────────────────────────────────────────

    app.include_router(router, prefix=settings.API_V1_STR)

    # ── Health / Root ─────────────────────────────────────────

    @app.get("/")
    def read_root():
        return {"message": "Welcome to the Startup Director API"}

    @app.get("/health")
    def health(request: Request):
        return {"status": "healthy", "sessions": len(request.app.state.registry)}

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("director.main:app", host="0.0.0.0", port=8000, reload=settings.MODE.value == "development")
