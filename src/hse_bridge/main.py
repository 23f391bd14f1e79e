import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from hse_bridge.config import settings
from hse_bridge.contracts.errors import ErrorResponse
from hse_bridge.exceptions import BridgeError
from hse_bridge.middleware.correlation import correlation_middleware, setup_logging
from hse_bridge.routers.summary import router as summary_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _app_lifespan(application: FastAPI):
    application.state.is_draining = False
    logger.info("SN_INSTANCE: %s", settings.sn_instance)
    logger.info("SN_USERNAME: %s", settings.sn_username)
    logger.info("SN_PASSWORD loaded: %s", bool(settings.sn_password))
    logger.info("OPENAI_MODEL: %s", settings.openai_model)
    yield
    application.state.is_draining = True


app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=_app_lifespan)
setup_logging()
app.middleware("http")(correlation_middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)
Instrumentator().instrument(app).expose(app)
app.include_router(summary_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/health/live")
async def health_live() -> dict[str, str]:
    return {"status": "live"}


@app.get("/health/ready")
async def health_ready(response: Response) -> dict[str, str]:
    if bool(getattr(app.state, "is_draining", False)):
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "draining"}
    return {"status": "ready"}


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@app.exception_handler(BridgeError)
async def bridge_error_handler(request: Request, exc: BridgeError) -> JSONResponse:
    logger.error("ERROR IN %s: %s", request.url.path, exc.message)
    return _error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Rejected body on %s: %s", request.url.path, exc.errors())
    return _error_response(status.HTTP_400_BAD_REQUEST, "request body must be a JSON object")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error in %s", request.url.path)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred.")
