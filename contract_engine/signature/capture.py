"""
Signature Capture

Signature fields hold a raster image of a hand-drawn signature, stored as a
PNG data URL string. An empty string means the signature has not been
captured yet. There is no cryptographic signing.
"""

import base64
import binascii
import logging
from io import BytesIO
from typing import Iterable, Sequence, Tuple

from PIL import Image, ImageDraw, UnidentifiedImageError

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = "data:image/png;base64,"

CANVAS_WIDTH = 400
CANVAS_HEIGHT = 150
STROKE_COLOR = "#2B8A7E"
STROKE_WIDTH = 2

Point = Tuple[float, float]


class SignatureError(ValueError):
    """Raised when a signature value is not a decodable PNG data URL."""


def render_signature(
    strokes: Iterable[Sequence[Point]],
    width: int = CANVAS_WIDTH,
    height: int = CANVAS_HEIGHT
) -> Image.Image:
    """
    Draw pen strokes onto a transparent signature canvas.

    Args:
        strokes: One sequence of (x, y) points per pen-down/pen-up gesture
        width: Canvas width in pixels
        height: Canvas height in pixels

    Returns:
        RGBA image of the signature
    """
    img = Image.new('RGBA', (width, height), color=(0, 0, 0, 0))
    draw = ImageDraw.Draw(img)

    stroke_count = 0
    for stroke in strokes:
        points = [(float(x), float(y)) for x, y in stroke]
        if not points:
            continue
        if len(points) == 1:
            # A tap leaves a dot
            x, y = points[0]
            r = STROKE_WIDTH / 2
            draw.ellipse([(x - r, y - r), (x + r, y + r)], fill=STROKE_COLOR)
        else:
            draw.line(points, fill=STROKE_COLOR, width=STROKE_WIDTH, joint='curve')
        stroke_count += 1

    logger.debug(f"Rendered signature with {stroke_count} strokes ({width}x{height}px)")
    return img


def encode_signature(image: Image.Image) -> str:
    """
    Encode an image as the string stored in a signature field value.

    Args:
        image: Captured signature image

    Returns:
        'data:image/png;base64,...' string
    """
    buffer = BytesIO()
    image.save(buffer, format='PNG')
    return DATA_URL_PREFIX + base64.b64encode(buffer.getvalue()).decode('ascii')


def decode_signature(value: str) -> Image.Image:
    """
    Decode a signature field value back into an image.

    Raises:
        SignatureError: If the value is empty or not a PNG data URL
    """
    if not is_signature_captured(value):
        raise SignatureError("Signature has not been captured")
    if not value.startswith(DATA_URL_PREFIX):
        raise SignatureError("Signature value is not a PNG data URL")

    try:
        raw = base64.b64decode(value[len(DATA_URL_PREFIX):], validate=True)
        img = Image.open(BytesIO(raw))
        img.load()
    except (binascii.Error, UnidentifiedImageError, OSError) as e:
        raise SignatureError(f"Invalid signature image: {e}") from e

    return img


def is_signature_captured(value) -> bool:
    return isinstance(value, str) and value != ""


def clear_signature() -> str:
    """Value to write when a signature is cleared."""
    return ""
