import logging
import time
import uuid
from dataclasses import asdict

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.responses import JSONResponse

from food_vision_relay.config import get_settings
from food_vision_relay.core.errors import RelayError
from food_vision_relay.core.normalizer import NormalizerConfig, normalize
from food_vision_relay.core.vision import VisionProvider, create_vision_provider
from food_vision_relay.logging_setup import setup_logging
from food_vision_relay.schemas import ErrorResponse, HealthResponse, RecognizedItemOut
from food_vision_relay.utils.deadline import run_with_deadline
from food_vision_relay.utils.image_io import read_image_upload

settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger('food_vision_relay')

app = FastAPI(title='Food Vision Relay', version=settings.version)
started_at = time.time()


def _parse_term_set(raw: str | None) -> set[str]:
    if not raw:
        return set()
    return set(raw.split(','))


def _request_id(request: Request) -> str:
    return request.headers.get('x-request-id') or str(uuid.uuid4())


@app.on_event('startup')
def startup_event() -> None:
    provider = create_vision_provider(settings)
    app.state.vision_provider = provider
    app.state.normalizer_config = NormalizerConfig(
        max_items=settings.max_items,
        excerpt_chars=settings.parse_excerpt_chars,
    ).with_extra_banned_terms(_parse_term_set(settings.extra_banned_terms))
    app.state.upstream_timeout_ms = settings.upstream_timeout_ms
    status = provider.status()
    logger.info(
        'Vision provider initialized provider=%s model=%s available=%s message=%s timeout_ms=%s',
        settings.provider,
        provider.model_id,
        status.get('available'),
        status.get('message'),
        settings.upstream_timeout_ms,
    )


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError):
    request_id = _request_id(request)
    logger.warning('Request failed request_id=%s error=%s status=%s', request_id, exc.code, exc.status_code)
    payload = ErrorResponse(
        error=exc.code,
        message=exc.message,
        request_id=request_id,
        text=exc.details.get('text'),
    )
    return JSONResponse(status_code=exc.status_code, content=payload.model_dump(exclude_none=True))


@app.exception_handler(Exception)
async def generic_error_handler(request: Request, exc: Exception):
    request_id = _request_id(request)
    logger.exception('Unhandled exception request_id=%s', request_id)
    payload = ErrorResponse(
        error='UNEXPECTED_SERVER_ERROR',
        message='Unexpected server error.',
        request_id=request_id,
    )
    return JSONResponse(status_code=500, content=payload.model_dump(exclude_none=True))


@app.get('/health', response_model=HealthResponse)
def health():
    provider: VisionProvider = app.state.vision_provider
    return HealthResponse(
        ok=True,
        version=settings.version,
        provider=settings.provider,
        model=provider.model_id,
        provider_available=bool(provider.status().get('available')),
        uptime_s=round(time.time() - started_at, 3),
    )


@app.post('/recognize', response_model=list[RecognizedItemOut])
async def recognize(request: Request, image: UploadFile | None = File(default=None)):
    request_id = _request_id(request)
    provider: VisionProvider = app.state.vision_provider

    status = provider.status()
    if not status.get('available'):
        raise RelayError('MISSING_OPENAI_KEY', status.get('message') or 'Vision provider unavailable.', status_code=500)

    image_bytes = await image.read() if image is not None else b''
    upload = read_image_upload(image_bytes, settings.max_image_bytes, image.content_type if image else None)

    result = await run_with_deadline(provider.describe, upload, timeout_ms=app.state.upstream_timeout_ms)
    items = normalize(result.text, app.state.normalizer_config)

    logger.info(
        'recognize request_id=%s bytes=%s mime=%s model=%s latency_ms=%s items=%s',
        request_id,
        len(image_bytes),
        upload.mime_type,
        result.model_id,
        result.latency_ms,
        len(items),
    )
    return [asdict(item) for item in items]
