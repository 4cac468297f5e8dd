import base64
import logging
from typing import Any

import httpx

from food_vision_relay.core.errors import NoOutputText, RelayError, UpstreamFailure, UpstreamTimeout
from food_vision_relay.core.types import ImageUpload, VisionResult
from food_vision_relay.core.vision import VisionProvider
from food_vision_relay.prompts import FOOD_LABELS_SCHEMA, SYSTEM_PROMPT, USER_PROMPT
from food_vision_relay.utils.timings import measure_ms

logger = logging.getLogger(__name__)


def _join_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def _build_request(model: str, image: ImageUpload) -> dict[str, Any]:
    encoded = base64.b64encode(image.data).decode('ascii')
    return {
        'model': model,
        'input': [
            {'role': 'system', 'content': SYSTEM_PROMPT},
            {
                'role': 'user',
                'content': [
                    {'type': 'input_text', 'text': USER_PROMPT},
                    {'type': 'input_image', 'image_url': f'data:{image.mime_type};base64,{encoded}'},
                ],
            },
        ],
        'text': {
            'format': {
                'type': 'json_schema',
                'name': 'food_labels',
                'schema': FOOD_LABELS_SCHEMA,
            },
        },
    }


def extract_output_text(body: dict[str, Any]) -> str:
    if isinstance(body.get('output_text'), str):
        return body['output_text']
    parts: list[str] = []
    for output in body.get('output') or []:
        if not isinstance(output, dict) or output.get('type') != 'message':
            continue
        for content in output.get('content') or []:
            if isinstance(content, dict) and content.get('type') == 'output_text':
                parts.append(str(content.get('text') or ''))
    return ''.join(parts)


class OpenAIVisionProvider(VisionProvider):
    def __init__(
        self,
        api_key: str,
        base_url: str = 'https://api.openai.com/v1',
        model: str = 'gpt-4o',
        timeout_ms: int = 60000,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._model = model
        self._timeout_ms = max(int(timeout_ms), 1000)

    @property
    def model_id(self) -> str:
        return self._model

    def status(self) -> dict[str, Any]:
        if not self._api_key:
            return {'available': False, 'message': 'OPENAI_API_KEY is not set'}
        return {'available': True, 'message': None}

    def describe(self, image: ImageUpload) -> VisionResult:
        if not self._api_key:
            raise RelayError('MISSING_OPENAI_KEY', 'OPENAI_API_KEY is not set.', status_code=500)

        with measure_ms() as elapsed_ms:
            try:
                with httpx.Client(timeout=self._timeout_ms / 1000.0) as client:
                    response = client.post(
                        _join_url(self._base_url, '/responses'),
                        headers={'Authorization': f'Bearer {self._api_key}'},
                        json=_build_request(self._model, image),
                    )
                response.raise_for_status()
                body = response.json()
            except httpx.TimeoutException as exc:
                raise UpstreamTimeout(self._timeout_ms) from exc
            except httpx.HTTPStatusError as exc:
                logger.error('Upstream rejected request status=%s model=%s', exc.response.status_code, self._model)
                raise UpstreamFailure(
                    'Upstream vision call failed.',
                    details={'upstream_status': exc.response.status_code},
                ) from exc
            except httpx.HTTPError as exc:
                logger.error('Upstream transport error model=%s error=%s', self._model, exc)
                raise UpstreamFailure('Upstream vision call failed.') from exc
            except ValueError as exc:
                raise UpstreamFailure('Upstream returned a non-JSON envelope.') from exc
            latency_ms = elapsed_ms()

        if not isinstance(body, dict):
            raise UpstreamFailure('Upstream returned an unexpected envelope.')
        text = extract_output_text(body)
        if not text:
            raise NoOutputText()

        logger.info('Upstream answered model=%s latency_ms=%s chars=%s', self._model, latency_ms, len(text))
        return VisionResult(text=text, model_id=str(body.get('model') or self._model), latency_ms=max(latency_ms, 1))
