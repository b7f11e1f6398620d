from __future__ import annotations
from pathlib import Path
import base64
import logging
import mimetypes
from typing import Tuple

import cv2
import numpy as np

logger = logging.getLogger(__name__)


def strip_data_uri(image: str) -> str:
    """Drop a leading ``data:<mime>;base64,`` prefix. Bare base64 passes through."""
    if image.startswith("data:") and "," in image:
        return image.split(",", 1)[1]
    return image


def decode_data_uri(image: str) -> bytes:
    return base64.b64decode(strip_data_uri(image))


def to_data_uri(data: bytes, mime_type: str = "image/jpeg") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('utf-8')}"


def file_to_data_uri(path: str | Path) -> str:
    path = Path(path)
    mime_type = mimetypes.guess_type(path.name)[0] or "image/jpeg"
    return to_data_uri(path.read_bytes(), mime_type)


def prepare_image_bytes(data: bytes, max_image_size: Tuple[int, int] = (1024, 1024)) -> bytes:
    """Downscale to fit ``max_image_size`` and re-encode as JPEG.

    Bytes OpenCV cannot decode are returned unchanged.
    """
    buf = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buf, cv2.IMREAD_COLOR) if buf.size else None
    if image is None:
        logger.warning("Could not decode image (%d bytes); sending as-is", len(data))
        return data

    height, width = image.shape[:2]
    scale = min(max_image_size[0] / width, max_image_size[1] / height)
    if scale < 1.0:
        new_width, new_height = int(width * scale), int(height * scale)
        image = cv2.resize(image, (new_width, new_height), interpolation=cv2.INTER_AREA)

    ok, encoded = cv2.imencode(".jpg", image)
    if not ok:
        return data
    return encoded.tobytes()
