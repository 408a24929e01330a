"""Tests for the dependency container wiring."""

from nutripal.l3_interface_adapters.gateways.gemini_llm_client import GeminiLLMClient
from nutripal.l3_interface_adapters.gateways.http_nutrition_backend import HttpNutritionBackend
from nutripal.l3_interface_adapters.gateways.in_memory_backend import InMemoryNutritionBackend
from nutripal.l4_frameworks_and_drivers.container import DependencyContainer
from nutripal.l4_frameworks_and_drivers.infra_config import InfraConfig, build_app_config


class TestDependencyContainer:
    def test_default_wiring(self):
        container = DependencyContainer(build_app_config({}))
        assert isinstance(container.llm_client, GeminiLLMClient)
        assert isinstance(container.backend, HttpNutritionBackend)
        assert container.controller.model_name == 'gemini-2.5-flash'

    def test_demo_uses_in_memory_backend(self):
        container = DependencyContainer(build_app_config({}), demo=True)
        assert isinstance(container.backend, InMemoryNutritionBackend)

    def test_infra_settings_applied(self):
        infra = InfraConfig.model_validate({'backend': {'base_url': 'http://api.test/'}})
        container = DependencyContainer(build_app_config({}), infra)
        assert container.backend._base_url == 'http://api.test'  # noqa: SLF001 -- checking wiring
