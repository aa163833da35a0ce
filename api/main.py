from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

load_dotenv()

from core import config, db  # noqa: E402
from core.logging import configure_logging  # noqa: E402
from importer import router as importer_router  # noqa: E402
from places import router as places_router  # noqa: E402

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # One pool per process; handlers get it through db.get_pool.
    app.state.db_pool = await db.create_pool()
    logger.info("db_pool_opened environment=%s", config.environment())
    try:
        yield
    finally:
        await db.close_pool(app.state.db_pool)
        app.state.db_pool = None
        logger.info("db_pool_closed")


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _format_validation_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = str(error.get("msg", "Invalid value"))
    return f"{location}: {message}" if location else message


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [_format_validation_error(error) for error in exc.errors()]
    logger.info("request_invalid method=%s path=%s errors=%s", request.method, request.url.path, errors)
    return JSONResponse(status_code=400, content={"detail": errors})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request_failed method=%s path=%s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error."})


app.include_router(importer_router.router, tags=["import"])
app.include_router(places_router.router, tags=["places"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/")
def root() -> dict:
    return {"message": "places api"}


def run() -> None:
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=config.port(), reload=config.is_development())
