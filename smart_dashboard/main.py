# smart_dashboard/main.py

import logging
import os
import random
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv

# ---------------- ENV ----------------
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), ".env"))

from smart_dashboard.database import Base, make_engine, make_session_factory, utcnow  # noqa: E402
from smart_dashboard.models import analytics_event, chat_message, task, user, user_settings  # noqa: E402,F401
from smart_dashboard.schemas.common_schema import ErrorResponse  # noqa: E402
from smart_dashboard.seed import ensure_demo_user, seed_demo_data  # noqa: E402

# ---------------- ROUTERS ----------------
from smart_dashboard.analytics.analytics_router import router as analytics_router  # noqa: E402
from smart_dashboard.chat.chat_router import router as chat_router  # noqa: E402
from smart_dashboard.chat.socket_router import ConnectionManager, router as socket_router  # noqa: E402
from smart_dashboard.settings.settings_router import router as settings_router  # noqa: E402
from smart_dashboard.task.task_router import router as task_router  # noqa: E402
from smart_dashboard.weather.weather_router import router as weather_router  # noqa: E402

VERSION = "1.0.0"

logger = logging.getLogger("smart_dashboard")
http_logger = logging.getLogger("smart_dashboard.http")

# ---------------- CORS ----------------
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

frontend_origin = os.getenv("FRONTEND_ORIGIN")
if frontend_origin:
    origins.append(frontend_origin)


def configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_delay() -> tuple[float, float]:
    return (
        float(os.getenv("CHAT_REPLY_DELAY_MIN", "0.5")),
        float(os.getenv("CHAT_REPLY_DELAY_MAX", "2.0")),
    )


# ---------------- ERRORS ----------------
def _error(status_code: int, message: str, error: str | None = None) -> JSONResponse:
    body = ErrorResponse(message=message, error=error)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _validation_message(exc: RequestValidationError) -> str:
    messages = []
    for err in exc.errors():
        field = str(err["loc"][-1]) if err.get("loc") else "body"
        if err.get("type") == "missing":
            messages.append(f"{field.replace('_', ' ').capitalize()} is required")
        elif err.get("type") == "value_error" and err.get("ctx", {}).get("error"):
            messages.append(str(err["ctx"]["error"]))
        else:
            messages.append(f"{field}: {err.get('msg')}")
    return "; ".join(messages) or "Invalid request"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        message = exc.detail if exc.status_code != 404 or exc.detail != "Not Found" else "Route not found"
        return _error(exc.status_code, str(message))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return _error(400, _validation_message(exc))

    @app.exception_handler(SQLAlchemyError)
    async def storage_error(request: Request, exc: SQLAlchemyError):
        logger.exception("storage_error", extra={"path": request.url.path})
        return _error(500, "Something went wrong!", str(exc) if app.state.debug else None)

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception("unhandled_error", extra={"path": request.url.path})
        return _error(500, "Something went wrong!", str(exc) if app.state.debug else None)


# ---------------- APP ----------------
def create_app(
    database_url: str | None = None,
    reply_delay: tuple[float, float] | None = None,
    seed_demo: bool | None = None,
    rng: random.Random | None = None,
) -> FastAPI:
    engine = make_engine(database_url)
    session_factory = make_session_factory(engine)
    seed = _env_flag("SEED_DEMO_DATA", "true") if seed_demo is None else seed_demo

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🔧 Checking database models...")
        Base.metadata.create_all(bind=engine)
        with session_factory() as db:
            ensure_demo_user(db)
            if seed:
                seed_demo_data(db, app.state.rng)
        logger.info("✅ Database ready.")
        app.state.started_at = time.time()

        yield

        engine.dispose()
        logger.info("✅ Database connection closed")

    app = FastAPI(title="Smart Assistant Dashboard", version=VERSION, lifespan=lifespan)
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.reply_delay = reply_delay if reply_delay is not None else _env_delay()
    app.state.rng = rng or random.Random()
    app.state.debug = os.getenv("APP_ENV", "production").lower() == "development"
    app.state.started_at = time.time()

    app.state.connections = ConnectionManager()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        http_logger.info(
            "http_request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "elapsed_seconds": round(time.time() - start, 3),
            },
        )
        return response

    register_error_handlers(app)

    app.include_router(task_router, prefix="/api")
    app.include_router(chat_router, prefix="/api")
    app.include_router(analytics_router, prefix="/api")
    app.include_router(weather_router, prefix="/api")
    app.include_router(settings_router, prefix="/api")
    app.include_router(socket_router)

    # ---------------- HEALTH ----------------
    @app.get("/api/health")
    def health():
        return {
            "status": "OK",
            "timestamp": utcnow().isoformat(),
            "uptime": round(time.time() - app.state.started_at, 3),
            "version": VERSION,
        }

    return app


def run() -> None:
    import uvicorn

    configure_logging()
    uvicorn.run(
        create_app(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5000")),
    )


if __name__ == "__main__":
    run()
