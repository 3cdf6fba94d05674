"""
FormatPolicy domain service.

Maps a source file extension to the raster format pages are encoded to.
PDFs always rasterize to PNG so text and line work stay exact; JPEG, PNG
and WebP sources keep their family; every other extension, known or not,
falls back to PNG so the output is always browser-displayable.
"""
from __future__ import annotations

from typing import Mapping

from pagerender.domain.value_objects.image_format import ImageFormat

PDF_EXTENSIONS = frozenset({".pdf"})
JPEG_EXTENSIONS = frozenset({".jpg", ".jpeg"})
PNG_EXTENSIONS = frozenset({".png"})
WEBP_EXTENSIONS = frozenset({".webp"})

# Sources converted to PNG because browsers display them poorly or not at all.
NORMALIZED_TO_PNG_EXTENSIONS = frozenset({".tif", ".tiff", ".gif", ".heic", ".heif", ".bmp"})

DEFAULT_FORMAT = ImageFormat.PNG

_FORMAT_BY_EXTENSION: Mapping[str, ImageFormat] = {
    **{ext: ImageFormat.JPEG for ext in JPEG_EXTENSIONS},
    **{ext: ImageFormat.PNG for ext in PNG_EXTENSIONS},
    **{ext: ImageFormat.WEBP for ext in WEBP_EXTENSIONS},
    **{ext: ImageFormat.PNG for ext in NORMALIZED_TO_PNG_EXTENSIONS},
}


def normalize_extension(extension: str | None) -> str:
    """Lower-case an extension and ensure it starts with a dot."""
    ext = (extension or "").strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext


def target_format(extension: str | None, is_pdf: bool) -> ImageFormat:
    """Return the preferred output format; never raises."""
    if is_pdf:
        return ImageFormat.PNG
    return _FORMAT_BY_EXTENSION.get(normalize_extension(extension), DEFAULT_FORMAT)


def source_format(extension: str | None) -> ImageFormat | None:
    """Return the web format a source already is, or ``None`` when it is none of them."""
    ext = normalize_extension(extension)
    if ext in JPEG_EXTENSIONS:
        return ImageFormat.JPEG
    if ext in PNG_EXTENSIONS:
        return ImageFormat.PNG
    if ext in WEBP_EXTENSIONS:
        return ImageFormat.WEBP
    return None
