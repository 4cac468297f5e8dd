from dataclasses import dataclass


@dataclass(frozen=True)
class RecognizedItem:
    label: str
    canonical: str
    confidence: float


@dataclass
class VisionResult:
    text: str
    model_id: str
    latency_ms: int


@dataclass
class ImageUpload:
    data: bytes
    mime_type: str
    size: tuple[int, int]
