from io import BytesIO

from PIL import Image

from food_vision_relay.core.errors import RelayError
from food_vision_relay.core.types import ImageUpload


def read_image_upload(image_bytes: bytes | None, max_bytes: int, content_type: str | None = None) -> ImageUpload:
    if not image_bytes:
        raise RelayError('MISSING_IMAGE', 'Missing image upload (field name: image).', status_code=400)
    if len(image_bytes) > max_bytes:
        raise RelayError('IMAGE_TOO_LARGE', f'Image too large. Max {max_bytes} bytes.', status_code=413)

    try:
        with Image.open(BytesIO(image_bytes)) as image:
            image.verify()
            image_format = image.format
            size = image.size
    except Exception as exc:
        raise RelayError('IMAGE_DECODE_FAILED', 'Could not decode image.', status_code=400) from exc

    mime_type = Image.MIME.get(image_format or '') or content_type or 'image/jpeg'
    return ImageUpload(data=image_bytes, mime_type=mime_type, size=size)
