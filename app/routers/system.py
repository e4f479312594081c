from fastapi import APIRouter, Depends
from sqlalchemy.exc import ArgumentError

from app.auth.identity import get_identity
from app.config import get_settings
from app.exceptions import ForbiddenError
from app.schemas.chat import Identity
from app.schemas.system import (
    AppGroup,
    ChatGroup,
    DatabaseGroup,
    GeneralGroup,
    PollingGroup,
    SystemSettingsGrouped,
)

router = APIRouter(
    prefix="/system",
    tags=["system"],
    responses={404: {"description": "Not found"}},
)


def _polling_group() -> PollingGroup:
    s = get_settings()
    return PollingGroup(
        transcript_poll_seconds=s.chat_transcript_poll_seconds,
        badge_poll_seconds=s.chat_badge_poll_seconds,
    )


@router.get("/settings", response_model=SystemSettingsGrouped)
def get_system_settings(
    identity: Identity = Depends(get_identity),
) -> SystemSettingsGrouped:
    """Return grouped, non-sensitive system configuration settings for troubleshooting."""
    if not identity.is_staff:
        raise ForbiddenError()
    s = get_settings()

    app_group = AppGroup(
        name=s.app_name,
        environment=s.environment,
        log_level=s.log_level,
        port=s.port,
    )

    # Extract safe database info only (no credentials)
    database_host = None
    database_driver = None
    try:
        url_obj = s.database_url_obj
        database_host = url_obj.host
        database_driver = url_obj.get_backend_name()
    except (ValueError, ArgumentError):
        pass

    database_group = DatabaseGroup(
        database_host=database_host,
        database_driver=database_driver,
        pool_size=s.database_pool_size,
        max_overflow=s.database_max_overflow,
    )

    general_group = GeneralGroup(
        is_production=s.is_production,
    )

    chat_group = ChatGroup(
        message_max_length=s.chat_message_max_length,
        customer_history_limit=s.chat_customer_history_limit,
        staff_history_limit=s.chat_staff_history_limit,
        trust_forwarded_for=s.chat_trust_forwarded_for,
    )

    return SystemSettingsGrouped(
        app=app_group,
        database=database_group,
        general=general_group,
        chat=chat_group,
        polling=_polling_group(),
    )


@router.get("/polling", response_model=PollingGroup)
def get_polling_settings() -> PollingGroup:
    """Polling intervals for chat clients. Public: the storefront widget reads it."""
    return _polling_group()
