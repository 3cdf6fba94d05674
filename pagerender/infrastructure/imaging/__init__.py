"""Imaging adapters: decoding, normalization and encoding with Pillow."""

from .frame_decoder import FrameDecoder
from .frame_normalizer import FrameNormalizer
from .pillow_codec import PillowImageCodec
from .raster_decoder import RasterDecoder

__all__ = ["FrameDecoder", "FrameNormalizer", "PillowImageCodec", "RasterDecoder"]
