"""
Domain Value Objects

Immutable value objects describing formats, modes and encoder settings.
"""
from .encoding_params import EncodingParams, JpegParams, PngParams, WebpParams, validate_params
from .image_format import ImageFormat
from .processing_mode import ProcessingMode

__all__ = [
    'EncodingParams',
    'ImageFormat',
    'JpegParams',
    'PngParams',
    'ProcessingMode',
    'WebpParams',
    'validate_params',
]
