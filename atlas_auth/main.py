from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from atlas_auth.core.cors import add_cors_middleware
from atlas_auth.core.email import init_resend
from atlas_auth.core.exception_handlers import register_exception_handlers
from atlas_auth.core.firebase import init_firebase
from atlas_auth.core.logging import configure_logging
from atlas_auth.core.request_logging import add_request_logging_middleware
from atlas_auth.core.settings import Settings, get_settings
from atlas_auth.db.engine import init_database
from atlas_auth.router import api_router

configure_logging()

SESSION_COOKIE_NAME = "atlas_session"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = getattr(app.state, "settings", None) or get_settings()
    init_firebase(settings)
    init_resend(settings)
    app.state.database = init_database(settings)
    yield
    app.state.database.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title="Atlas Auth", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.include_router(api_router)

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret_key,
        session_cookie=SESSION_COOKIE_NAME,
        max_age=settings.session_max_age,
        same_site="lax",
        https_only=settings.is_secure_cookie,
    )
    add_request_logging_middleware(app)
    add_cors_middleware(app, settings)
    register_exception_handlers(app)
    return app


app = create_app()
