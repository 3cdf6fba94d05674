"""Raster image decoding into per-frame handles."""
from __future__ import annotations

import logging
from io import BytesIO
from itertools import islice
from typing import List

from PIL import Image, ImageSequence, UnidentifiedImageError

from pagerender.domain.entities.decoded_frame import DecodedFrame
from pagerender.domain.exceptions import DecodeError

logger = logging.getLogger(__name__)

_ALPHA_MODES = frozenset({"RGBA", "RGBa", "LA", "La", "PA"})

# Pillow opens JPEGs carrying an MPF index as MPO; the trailing images are
# previews or alternate views, not pages.
_PRIMARY_IMAGE_ONLY = {"MPO": "JPEG"}


def image_has_alpha(image: Image.Image) -> bool:
    """Check for an alpha band or a palette/colour-key transparency entry."""
    return image.mode in _ALPHA_MODES or "transparency" in image.info


class RasterDecoder:
    """Decodes every frame of a raster upload with Pillow."""

    def decode(self, content: bytes, *, filename: str | None = None) -> List[DecodedFrame]:
        if not content:
            raise DecodeError("Image is empty", filename=filename)

        try:
            with Image.open(BytesIO(content)) as image:
                codec_format = _PRIMARY_IMAGE_ONLY.get(image.format, image.format)
                icc_profile = image.info.get("icc_profile")
                sequence = ImageSequence.Iterator(image)
                if image.format in _PRIMARY_IMAGE_ONLY:
                    sequence = islice(sequence, 1)
                frames: List[DecodedFrame] = []
                for index, frame in enumerate(sequence, start=1):
                    # copy() forces the pixel data to load while the file is open.
                    pixels = frame.copy()
                    frames.append(
                        DecodedFrame(
                            image=pixels,
                            index=index,
                            width=pixels.width,
                            height=pixels.height,
                            has_alpha=image_has_alpha(pixels),
                            codec_format=codec_format,
                            icc_profile=pixels.info.get("icc_profile", icc_profile),
                        )
                    )
        except UnidentifiedImageError as exc:
            raise DecodeError("Unrecognized image format", filename=filename, cause=exc) from exc
        except Image.DecompressionBombError as exc:
            raise DecodeError(f"Image is too large to decode: {exc}", filename=filename, cause=exc) from exc
        except (OSError, SyntaxError, ValueError, EOFError) as exc:
            raise DecodeError(f"Corrupt image data: {exc}", filename=filename, cause=exc) from exc

        if not frames:
            raise DecodeError("Image contains no frames", filename=filename)

        logger.debug("Decoded %s frame(s) of %s from %s", len(frames), codec_format, filename)
        return frames
