from contextlib import asynccontextmanager
from pathlib import Path
import os
import sys

import httpx
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

# Load .env before settings are read
load_dotenv()

from app.analytics.api.route import analytics_router  # noqa: E402
from app.analytics.repository.access_log_repository import AccessLogRepository  # noqa: E402
from app.analytics.service.service import AnalyticsService  # noqa: E402
from app.chat.api.route import chat_router  # noqa: E402
from app.chat.repository.chat_repository import ChatHistoryRepository  # noqa: E402
from app.core.config import settings  # noqa: E402
from app.core.errors import GENERIC_ERROR_MESSAGE  # noqa: E402
from app.core.logger import get_logger  # noqa: E402
from app.llm.service.llm_service import ConversationService  # noqa: E402
from app.llm.service.provider.gemini import GeminiProvider  # noqa: E402
from app.llm.service.tools import LocalTools  # noqa: E402
from pkg.db_util.mongo_conn import MongoConnection  # noqa: E402
from pkg.db_util.types import MongoConfig  # noqa: E402
from pkg.geoip_client.client import GeoIPClient  # noqa: E402

logger = get_logger("topizio-bot")

BASE_DIR = Path(__file__).resolve().parent


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build shared clients once; abort startup when required config is missing."""
    logger.info(f"{settings.APP_NAME} starting up...")
    logger.info(f"Python: {sys.version}")
    logger.info(f"Working directory: {os.getcwd()}")

    missing_vars = settings.missing_required()
    if missing_vars:
        error_msg = f"Missing required environment variables: {', '.join(missing_vars)}"
        logger.error(error_msg)
        raise RuntimeError(error_msg)

    http_client = httpx.AsyncClient(timeout=settings.REQUEST_TIMEOUT_MS / 1000)

    tools = LocalTools(timezone=settings.BOT_TIMEZONE) if settings.ENABLE_TIME_TOOL else None
    provider = GeminiProvider(
        api_key=settings.GEMINI_API_KEY,
        http_client=http_client,
        model=settings.GEMINI_MODEL,
        endpoint=settings.GEMINI_ENDPOINT,
        tools=tools,
    )

    mongo = MongoConnection(
        MongoConfig(
            uri=settings.MONGO_URI,
            database=settings.MONGO_DB_NAME,
            server_selection_timeout_ms=settings.MONGO_TIMEOUT_MS,
        )
    )
    # Warm the connection; a failure here is retried on first use
    try:
        await mongo.get_database()
    except ConnectionError as e:
        logger.warning(f"MongoDB not reachable at startup: {e}. Will retry on first request.")

    app.state.logger = logger
    app.state.http_client = http_client
    app.state.mongo = mongo
    app.state.provider = provider
    app.state.conversation_service = ConversationService(provider)
    app.state.chat_history_repository = ChatHistoryRepository(mongo, settings.SESSIONS_COLLECTION)
    app.state.analytics_service = AnalyticsService(
        AccessLogRepository(mongo, settings.ACCESS_LOGS_COLLECTION),
        GeoIPClient(http_client, settings.GEO_LOOKUP_URL),
    )
    logger.info("Startup complete - application is ready!")

    yield

    logger.info(f"{settings.APP_NAME} shutting down...")
    await http_client.aclose()
    await mongo.close()


app = FastAPI(
    title=settings.APP_NAME,
    description="Fashion stylist chat bot backed by Gemini",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Convert HTTPException to the {"error": ...} body the frontend reads"""
    content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Invalid request body on {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body."})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc!s}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": GENERIC_ERROR_MESSAGE})


# Routers
app.include_router(chat_router)
app.include_router(analytics_router)


@app.get("/health")
async def health():
    """Shows whether the database handle and the provider are ready"""
    checks = {}
    all_healthy = True

    mongo = getattr(app.state, "mongo", None)
    if mongo is not None and mongo.is_connected:
        checks["database"] = "connected"
    else:
        checks["database"] = "not_initialized"
        all_healthy = False

    provider = getattr(app.state, "provider", None)
    if provider is not None and provider.is_enabled():
        checks["provider"] = "ready"
    else:
        checks["provider"] = "not_ready"
        all_healthy = False

    return {
        "status": "ok" if all_healthy else "degraded",
        "service": "topizio-bot",
        "checks": checks,
    }


# Static frontend; mounted last so API routes take precedence
static_dir = Path(settings.STATIC_DIR)
if not static_dir.is_absolute():
    static_dir = BASE_DIR / static_dir
app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")


if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
