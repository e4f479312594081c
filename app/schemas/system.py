"""Pydantic schemas for the system settings endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class AppGroup(BaseModel):
    name: str
    environment: str
    log_level: str
    port: int


class DatabaseGroup(BaseModel):
    database_host: Optional[str] = None
    database_driver: Optional[str] = None
    pool_size: int
    max_overflow: int


class GeneralGroup(BaseModel):
    is_production: bool


class ChatGroup(BaseModel):
    message_max_length: int
    customer_history_limit: int
    staff_history_limit: int
    trust_forwarded_for: bool


class PollingGroup(BaseModel):
    """Refetch intervals the widget and back office are expected to use."""

    transcript_poll_seconds: int
    badge_poll_seconds: int


class SystemSettingsGrouped(BaseModel):
    app: AppGroup
    database: DatabaseGroup
    general: GeneralGroup
    chat: ChatGroup
    polling: PollingGroup
