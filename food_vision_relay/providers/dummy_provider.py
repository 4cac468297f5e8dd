import json
import time

from food_vision_relay.core.types import ImageUpload, VisionResult
from food_vision_relay.core.vision import VisionProvider


class DummyProvider(VisionProvider):
    def __init__(self, model_id: str = 'dummy-v1') -> None:
        self._model_id = model_id

    @property
    def model_id(self) -> str:
        return self._model_id

    def describe(self, image: ImageUpload) -> VisionResult:
        start = time.perf_counter()
        payload = {
            'items': [
                {'label': 'Spaghetti', 'confidence': 0.91, 'canonical': 'spaghetti'},
                {'label': 'salad', 'confidence': 0.62, 'canonical': 'salad'},
                {'label': 'fries', 'confidence': 0.54, 'canonical': ''},
            ]
        }
        latency_ms = int((time.perf_counter() - start) * 1000)
        return VisionResult(
            text=json.dumps(payload),
            model_id=self.model_id,
            latency_ms=max(latency_ms, 1),
        )
