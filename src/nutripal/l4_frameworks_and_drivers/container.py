"""Dependency container — composition root for wiring all layers together."""

from __future__ import annotations

from nutripal.l1_entities.config import AppConfig
from nutripal.l2_use_cases.ports.llm_client import LLMClient
from nutripal.l2_use_cases.ports.nutrition_backend import NutritionBackend
from nutripal.l3_interface_adapters.controllers.session_controller import NutritionSessionController
from nutripal.l3_interface_adapters.gateways.gemini_llm_client import GeminiLLMClient
from nutripal.l3_interface_adapters.gateways.http_nutrition_backend import HttpNutritionBackend
from nutripal.l3_interface_adapters.gateways.in_memory_backend import InMemoryNutritionBackend
from nutripal.l4_frameworks_and_drivers.infra_config import InfraConfig


class DependencyContainer:
    """Creates and wires all concrete instances. Easy to override for testing."""

    def __init__(
        self,
        config: AppConfig,
        infra: InfraConfig | None = None,
        *,
        demo: bool = False,
    ) -> None:
        self.config = config
        _infra = infra or InfraConfig()

        self.llm_client: LLMClient = GeminiLLMClient(
            api_key=_infra.gemini.api_key,
            base_url=_infra.gemini.base_url,
            timeout=_infra.gemini.timeout,
        )
        self.backend: NutritionBackend = (
            InMemoryNutritionBackend()
            if demo
            else HttpNutritionBackend(base_url=_infra.backend.base_url, timeout=_infra.backend.timeout)
        )
        self.controller = NutritionSessionController(
            config=config,
            llm_client=self.llm_client,
            backend=self.backend,
        )
