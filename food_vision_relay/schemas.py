from pydantic import BaseModel, ConfigDict, Field


class UpstreamItemIn(BaseModel):
    model_config = ConfigDict(strict=True, extra='ignore')

    label: str
    confidence: float
    canonical: str


class UpstreamPayloadIn(BaseModel):
    model_config = ConfigDict(strict=True, extra='forbid')

    items: list[UpstreamItemIn]


class RecognizedItemOut(BaseModel):
    label: str
    canonical: str
    confidence: float = Field(ge=0.0, le=1.0)


class HealthResponse(BaseModel):
    ok: bool
    version: str
    provider: str
    model: str | None = None
    provider_available: bool
    uptime_s: float


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str
    message: str
    request_id: str | None = None
    text: str | None = None
