"""Configuration Pydantic models — pure schema, no infrastructure defaults."""

from __future__ import annotations

from pydantic import BaseModel, Field


class RetryConfig(BaseModel):
    max_attempts: int = Field(ge=1)
    initial_delay: float = Field(ge=0)  # seconds; doubles before each retry


class CoachConfig(BaseModel):
    model: str
    history_window: int = Field(ge=1)
    retry: RetryConfig


class LoggingConfig(BaseModel):
    directory: str
    level: str


class AppConfig(BaseModel):
    coach: CoachConfig
    logging: LoggingConfig
