"""FastAPI application factory for the support chat service."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi_pagination import add_pagination
from fastapi_pagination.utils import disable_installed_extensions_check

from app.config import get_settings
from app.exceptions import ChatError
from app.infra.logging_config import LoggingConfig, get_logger
from app.routers.chat_admin_router import chat_admin_router
from app.routers.chat_router import chat_router
from app.routers.system import router as system_router

logger = get_logger("api")


async def chat_error_handler(request: Request, exc: ChatError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Chat error on %s: %s", request.url.path, exc.message)
    else:
        logger.info(
            "Rejected %s %s: %s", request.method, request.url.path, exc.code
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


def create_app(testing: bool = False) -> FastAPI:
    """Build the app. testing=True leaves logging to the test runner."""
    settings = get_settings()
    if not testing:
        LoggingConfig()

    app = FastAPI(title=settings.app_name)
    app.add_exception_handler(ChatError, chat_error_handler)

    app.include_router(chat_router)
    app.include_router(chat_admin_router)
    app.include_router(system_router)

    @app.get("/health", tags=["system"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    add_pagination(app)
    # The inbox is assembled in Python, so list pagination is intended
    disable_installed_extensions_check()
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=get_settings().port)
