from abc import ABC, abstractmethod
from typing import Any

from food_vision_relay.config import Settings
from food_vision_relay.core.types import ImageUpload, VisionResult


class VisionProvider(ABC):
    @abstractmethod
    def describe(self, image: ImageUpload) -> VisionResult:
        raise NotImplementedError

    @property
    @abstractmethod
    def model_id(self) -> str:
        raise NotImplementedError

    def status(self) -> dict[str, Any]:
        return {'available': True, 'message': None}


def create_vision_provider(settings: Settings) -> VisionProvider:
    provider = settings.provider.strip().lower()
    if provider == 'dummy':
        from food_vision_relay.providers.dummy_provider import DummyProvider

        return DummyProvider(model_id='dummy-v1')
    if provider == 'openai':
        from food_vision_relay.providers.openai_provider import OpenAIVisionProvider

        return OpenAIVisionProvider(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            model=settings.vision_model,
            timeout_ms=settings.upstream_timeout_ms,
        )
    raise ValueError(f'Unsupported PROVIDER={settings.provider!r}')
