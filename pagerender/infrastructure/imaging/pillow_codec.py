"""Encode collaborator backed by Pillow."""
from __future__ import annotations

import logging
from io import BytesIO
from typing import Any, Dict

from PIL import Image

from pagerender import constants
from pagerender.domain.entities.encoding_candidate import EncodingCandidate
from pagerender.domain.exceptions import EncodeError
from pagerender.domain.value_objects.encoding_params import (
    EncodingParams,
    JpegParams,
    PngParams,
    WebpParams,
    validate_params,
)
from pagerender.domain.value_objects.image_format import ImageFormat
from pagerender.infrastructure.imaging.color_quantizer import quantize_colors

logger = logging.getLogger(__name__)


class PillowImageCodec:
    """Encodes frames to PNG, JPEG or WebP bytes."""

    def encode(self, image: Image.Image, params: EncodingParams, *, label: str = "") -> EncodingCandidate:
        validate_params(params)

        if isinstance(params, PngParams) and params.quantize_colors is not None:
            image = quantize_colors(image, params.quantize_colors)

        options = self._save_options(params)
        data = self._save(image, params.format, options)
        logger.debug(
            "Encoded %s candidate",
            params.format.value,
            extra={"format": params.format.value, "quality": getattr(params, "quality", None), "bytes": len(data)},
        )
        return EncodingCandidate(
            format=params.format,
            data=data,
            width=image.width,
            height=image.height,
            params=params,
            label=label or params.format.value,
        )

    def repack_png(self, image: Image.Image) -> EncodingCandidate:
        """Recompress a PNG frame as-is; transparency and ICC data are kept."""
        options = {"compress_level": constants.PNG_COMPRESSION_LEVEL}
        if "transparency" in image.info:
            options["transparency"] = image.info["transparency"]
        if image.info.get("icc_profile"):
            options["icc_profile"] = image.info["icc_profile"]
        data = self._save(image, ImageFormat.PNG, options)
        return EncodingCandidate(
            format=ImageFormat.PNG,
            data=data,
            width=image.width,
            height=image.height,
            params=PngParams(),
            label="repacked",
        )

    @staticmethod
    def _save_options(params: EncodingParams) -> Dict[str, Any]:
        if isinstance(params, PngParams):
            # Pillow picks the best per-row filter adaptively for 8-bit truecolor.
            return {"compress_level": params.compress_level}
        if isinstance(params, JpegParams):
            return {
                "quality": params.quality,
                "optimize": params.optimize_coding,
                "subsampling": params.subsampling,
                "progressive": False,
            }
        if isinstance(params, WebpParams):
            return {"quality": params.quality, "method": params.method, "lossless": False}
        raise EncodeError(f"Unsupported encoding parameters: {type(params).__name__}")

    @staticmethod
    def _save(image: Image.Image, image_format: ImageFormat, options: Dict[str, Any]) -> bytes:
        buffer = BytesIO()
        try:
            image.save(buffer, format=image_format.codec_name, **options)
        except (OSError, ValueError, KeyError) as exc:
            raise EncodeError(f"{image_format.value} encoding failed: {exc}", cause=exc) from exc
        return buffer.getvalue()
