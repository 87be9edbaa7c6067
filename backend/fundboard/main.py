import logging
import time
from pathlib import Path
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from .config import Settings, get_settings
from .database import init_db, make_engine, make_session_factory
from .errors import FundboardError, StoreError
from .logging_config import configure_logging
from .routes import router

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / 'static'


def register_error_handlers(app: FastAPI):
    @app.exception_handler(FundboardError)
    async def fundboard_error_handler(request: Request, exc: FundboardError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "invalid request body"})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail},
                            headers=getattr(exc, "headers", None))

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Store failure on %s %s", request.method, request.url.path)
        err = StoreError()
        return JSONResponse(status_code=err.status_code, content=err.to_dict())


def create_app(settings: Optional[Settings] = None, configure_logs: bool = True) -> FastAPI:
    settings = settings or get_settings()
    if configure_logs:
        configure_logging(settings)

    engine = make_engine(settings.DATABASE_URL)
    session_factory = make_session_factory(engine)
    init_db(engine, session_factory, settings)

    app = FastAPI(title="Fundboard API")
    app.state.settings = settings
    app.state.session_factory = session_factory

    @app.middleware("http")
    async def access_log_middleware(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms,
            extra={"method": request.method, "path": request.url.path,
                   "status": response.status_code, "duration_ms": round(elapsed_ms, 1)},
        )
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(router)

    index_html = STATIC_DIR / 'index.html'

    @app.get('/', include_in_schema=False)
    def root_index():
        return FileResponse(str(index_html), media_type='text/html')

    logger.info("Fundboard ready (database=%s, forwarding=%s)",
                engine.url.render_as_string(hide_password=True),
                bool(settings.FORWARD_TO_APPSCRIPT_URL))
    return app
