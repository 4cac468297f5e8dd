import json

import httpx
import pytest

from food_vision_relay.core.errors import NoOutputText, RelayError, UpstreamFailure, UpstreamTimeout
from food_vision_relay.core.types import ImageUpload
from food_vision_relay.providers.openai_provider import OpenAIVisionProvider, extract_output_text

IMAGE = ImageUpload(data=b'\xff\xd8fake', mime_type='image/png', size=(10, 10))


def install_transport(monkeypatch, handler):
    transport = httpx.MockTransport(handler)

    class MockClient(httpx.Client):
        def __init__(self, *args, **kwargs):
            kwargs['transport'] = transport
            super().__init__(*args, **kwargs)

    monkeypatch.setattr(httpx, 'Client', MockClient)


def test_describe_posts_structured_request_and_reads_output_text(monkeypatch):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen['path'] = request.url.path
        seen['auth'] = request.headers.get('authorization')
        seen['body'] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                'model': 'gpt-4o-2024-08-06',
                'output': [
                    {'type': 'reasoning', 'summary': []},
                    {
                        'type': 'message',
                        'content': [
                            {'type': 'output_text', 'text': '{"items":'},
                            {'type': 'output_text', 'text': '[]}'},
                        ],
                    },
                ],
            },
        )

    install_transport(monkeypatch, handler)
    provider = OpenAIVisionProvider(api_key='sk-test', base_url='http://openai.local/v1/')

    result = provider.describe(IMAGE)

    assert seen['path'] == '/v1/responses'
    assert seen['auth'] == 'Bearer sk-test'
    assert seen['body']['model'] == 'gpt-4o'
    assert seen['body']['text']['format']['name'] == 'food_labels'
    image_part = seen['body']['input'][1]['content'][1]
    assert image_part['image_url'].startswith('data:image/png;base64,')
    assert result.text == '{"items":[]}'
    assert result.model_id == 'gpt-4o-2024-08-06'
    assert result.latency_ms >= 1


def test_describe_without_output_text_raises(monkeypatch):
    install_transport(monkeypatch, lambda request: httpx.Response(200, json={'output': []}))
    provider = OpenAIVisionProvider(api_key='sk-test')

    with pytest.raises(NoOutputText):
        provider.describe(IMAGE)


def test_describe_maps_http_errors_to_upstream_failure(monkeypatch):
    install_transport(monkeypatch, lambda request: httpx.Response(401, json={'error': {'message': 'bad key'}}))
    provider = OpenAIVisionProvider(api_key='sk-test')

    with pytest.raises(UpstreamFailure) as exc_info:
        provider.describe(IMAGE)

    assert exc_info.value.status_code == 500
    assert exc_info.value.details == {'upstream_status': 401}


def test_describe_maps_read_timeout_to_upstream_timeout(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout('timed out', request=request)

    install_transport(monkeypatch, handler)
    provider = OpenAIVisionProvider(api_key='sk-test', timeout_ms=2500)

    with pytest.raises(UpstreamTimeout) as exc_info:
        provider.describe(IMAGE)

    assert exc_info.value.status_code == 504
    assert exc_info.value.details == {'timeout_ms': 2500}


def test_describe_without_api_key_is_unavailable():
    provider = OpenAIVisionProvider(api_key='')

    assert provider.status()['available'] is False
    with pytest.raises(RelayError) as exc_info:
        provider.describe(IMAGE)
    assert exc_info.value.code == 'MISSING_OPENAI_KEY'


def test_extract_output_text_prefers_convenience_field():
    assert extract_output_text({'output_text': 'abc', 'output': []}) == 'abc'
    assert extract_output_text({'output': [{'type': 'message', 'content': [{'type': 'refusal'}]}]}) == ''
