import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from contact_api.api.routes import api_router
from contact_api.features.contact.routes import SEND_FAILED_MESSAGE
from contact_api.platform.config import Settings, settings as default_settings
from contact_api.platform.mailer import MailConfigurationError, build_mailer
from contact_api.platform.rate_limit import limiter
from contact_api.platform.security import BodySizeLimitMiddleware, OriginGuardMiddleware, SecurityHeadersMiddleware

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Missing SMTP settings abort startup here instead of on the first submission.
    if getattr(app.state, "mailer", None) is None:
        app.state.mailer = build_mailer(app.state.settings)
    logger.info(
        "Contact API ready on port %d, allowed origins: %s",
        app.state.settings.port,
        ", ".join(app.state.settings.allowed_origin_list) or "*",
    )
    yield


async def _mail_configuration_error_handler(request: Request, exc: MailConfigurationError) -> JSONResponse:
    logger.critical("Mail transport is not configured: %s", exc)
    return JSONResponse(status_code=500, content={"error": SEND_FAILED_MESSAGE})


def create_app(settings: Settings | None = None) -> FastAPI:
    if settings is None:
        settings = default_settings
    configure_logging(settings.log_level)

    app = FastAPI(title="Portfolio Contact API", lifespan=lifespan)
    app.state.settings = settings
    app.state.mailer = None

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(MailConfigurationError, _mail_configuration_error_handler)

    allowed_origins = settings.allowed_origin_list

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins or ["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_body_bytes)
    app.add_middleware(OriginGuardMiddleware, allowed_origins=allowed_origins)
    app.add_middleware(SecurityHeadersMiddleware)

    app.include_router(api_router)
    return app


app = create_app()
