"""
ImageFormat value object

Closed set of web-displayable raster formats produced by the converter.
"""
from __future__ import annotations

from enum import Enum


class ImageFormat(str, Enum):
    """Target raster formats."""
    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"

    @property
    def mime_type(self) -> str:
        return _MIME_TYPES[self]

    @property
    def extension(self) -> str:
        """File extension including the leading dot."""
        return _EXTENSIONS[self]

    @property
    def codec_name(self) -> str:
        """Format name understood by the imaging codec."""
        return _CODEC_NAMES[self]


_MIME_TYPES = {
    ImageFormat.PNG: "image/png",
    ImageFormat.JPEG: "image/jpeg",
    ImageFormat.WEBP: "image/webp",
}

_EXTENSIONS = {
    ImageFormat.PNG: ".png",
    ImageFormat.JPEG: ".jpg",
    ImageFormat.WEBP: ".webp",
}

_CODEC_NAMES = {
    ImageFormat.PNG: "PNG",
    ImageFormat.JPEG: "JPEG",
    ImageFormat.WEBP: "WEBP",
}
