"""Infrastructure provider configs — lives in L4, not domain."""

from __future__ import annotations

import copy

from pydantic import BaseModel, Field

from nutripal.l1_entities.config import AppConfig
from nutripal.l3_interface_adapters.gateways.gemini_llm_client import DEFAULT_GEMINI_BASE
from nutripal.l3_interface_adapters.gateways.paths import LOG_DIR
from nutripal.l3_interface_adapters.gateways.yaml_config_loader import deep_merge

APP_CONFIG_DEFAULTS: dict = {
    'coach': {
        'model': 'gemini-2.5-flash',
        'history_window': 10,
        'retry': {
            'max_attempts': 5,
            'initial_delay': 1.0,
        },
    },
    'logging': {
        'directory': str(LOG_DIR),
        'level': 'DEBUG',
    },
}


def build_app_config(raw: dict) -> AppConfig:
    """Merge *raw* user overrides on top of defaults, then validate."""
    merged = copy.deepcopy(APP_CONFIG_DEFAULTS)
    deep_merge(merged, raw)
    return AppConfig.model_validate(merged)


class GeminiProviderConfig(BaseModel):
    api_key: str | None = None  # None → GEMINI_API_KEY env
    base_url: str = DEFAULT_GEMINI_BASE
    timeout: float = 60.0


class BackendProviderConfig(BaseModel):
    base_url: str = 'http://localhost:3001'
    timeout: float = 30.0


class InfraConfig(BaseModel):
    """Groups all provider-specific settings outside the domain layer."""

    gemini: GeminiProviderConfig = Field(default_factory=GeminiProviderConfig)
    backend: BackendProviderConfig = Field(default_factory=BackendProviderConfig)
