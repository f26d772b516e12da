import logging
import json
import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from pokerboard.core.database import Database
from pokerboard.core.config import settings
from pokerboard.core.limiter import limiter
from pokerboard.routes import game, leaderboard, players, sessions

SERVICE_NAME = "poker-leaderboard-api"
VERSION = "1.0.0"

# Configure structured JSON logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(message)s",
)
logger = logging.getLogger(__name__)

_OPTIONAL_LOG_FIELDS = (
    "player_name",
    "game_result",
    "amount",
    "game_type",
    "leaderboard_updated",
    "request_path",
    "status_code",
    "response_time",
)


class JSONFormatter(logging.Formatter):
    def format(self, record):
        log_data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "message": record.getMessage(),
            "module": record.module,
        }
        for field in _OPTIONAL_LOG_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


# Apply JSON formatter to root logger
handler = logging.StreamHandler()
handler.setFormatter(JSONFormatter())
logging.getLogger().handlers = [handler]


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting Poker Leaderboard API")
    owns_database = getattr(app.state, "database", None) is None
    if owns_database:
        app.state.database = Database.from_settings(settings)
    database = app.state.database

    if settings.is_dev_environment():
        # NOTE: create_all is acceptable for local and test workflows.
        database.create_all()
    else:
        logger.info(
            "Skipping schema auto-creation in non-dev environment; run migrations instead"
        )
    yield
    # Shutdown
    logger.info("Shutting down Poker Leaderboard API")
    if owns_database:
        database.dispose()
        app.state.database = None


app = FastAPI(
    title="Poker Leaderboard API",
    description="Records poker results and serves per-player statistics and a ranked leaderboard",
    version=VERSION,
    lifespan=lifespan,
)

# Rate limiting: per-client throttle on game submissions
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS middleware: origins driven by CORS_ORIGINS env var
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    process_time = time.time() - start_time

    log_record = logging.LogRecord(
        name="api",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=f"{request.method} {request.url.path}",
        args=(),
        exc_info=None,
    )
    log_record.request_path = str(request.url.path)
    log_record.status_code = response.status_code
    log_record.response_time = f"{process_time:.3f}s"

    logger.handle(log_record)

    return response


# Include routers
app.include_router(players.router, prefix="/api", tags=["Players"])
app.include_router(sessions.router, prefix="/api", tags=["Sessions"])
app.include_router(game.router, prefix="/api", tags=["Game"])
app.include_router(leaderboard.router, prefix="/api", tags=["Leaderboard"])


@app.get("/", response_class=PlainTextResponse)
async def liveness():
    return "Poker Leaderboard API is running!"


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": VERSION,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/ready")
def readiness_check(request: Request):
    try:
        request.app.state.database.ping()
        return {
            "status": "ready",
            "service": SERVICE_NAME,
            "environment": settings.ENVIRONMENT,
        }
    except Exception:
        logger.warning("Readiness check failed", exc_info=True)
        return JSONResponse(status_code=503, content={"status": "not_ready"})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies are client errors like missing fields: 400, not 422
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
