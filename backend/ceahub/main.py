import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ceahub.core.config import settings
from ceahub.core.errors import AppError, InvalidInput, UpstreamError
from ceahub.core.logging_setup import configure_logging
import ceahub.models  # noqa: F401  # force model registration

from ceahub.api.v1.public import router as public_router
from ceahub.api.v1.agents import router as agents_router
from ceahub.api.v1.sales import router as sales_router
from ceahub.api.v1.payouts import router as payouts_router
from ceahub.api.v1.admin import router as admin_router

logger = logging.getLogger(__name__)


def _validation_details(exc: RequestValidationError) -> list[dict]:
    details = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in {"body", "query", "path"}]
        details.append({"field": ".".join(loc) or None, "message": err.get("msg", "invalid value")})
    return details


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        err = InvalidInput(details=_validation_details(exc))
        return JSONResponse(status_code=err.status_code, content=err.to_body())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail), "details": "http_error"},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        # Full detail stays in the server log only.
        logger.exception("data store error on %s %s", request.method, request.url.path, exc_info=exc)
        err = UpstreamError()
        return JSONResponse(status_code=err.status_code, content=err.to_body())


def create_application() -> FastAPI:
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title="CEA Hub API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_exception_handlers(app)

    @app.get("/")
    def root():
        return {"status": "ok", "service": "cea-hub"}

    # Routers
    app.include_router(public_router, prefix="/api")
    app.include_router(agents_router, prefix="/api")
    app.include_router(sales_router, prefix="/api")
    app.include_router(payouts_router, prefix="/api")
    app.include_router(admin_router, prefix="/api")

    return app


app = create_application()
