"""Visual normalization applied to every frame that is re-encoded.

The pipeline is a sequence of pure steps. Each step takes a frame and
returns a new one, so the steps can be exercised in isolation and the
decoded input is never mutated.
"""
from __future__ import annotations

import logging
from io import BytesIO
from typing import Callable, Sequence

import cv2
import numpy as np
from PIL import Image, ImageCms

from pagerender import constants
from pagerender.domain.entities.decoded_frame import DecodedFrame
from pagerender.domain.exceptions import DecodeError

logger = logging.getLogger(__name__)

NormalizationStep = Callable[[DecodedFrame], DecodedFrame]

WHITE = (255, 255, 255, 255)

_SRGB_PROFILE = ImageCms.createProfile("sRGB")
_HIGH_DEPTH_MODES = frozenset({"I", "I;16", "I;16B", "I;16L", "I;16N"})


def _eight_bit(image: Image.Image) -> Image.Image:
    """Narrow 16-bit, 32-bit and float single-band images to 8-bit grayscale."""
    if image.mode in _HIGH_DEPTH_MODES:
        samples = np.asarray(image).astype(np.float64)
        narrowed = np.rint(np.clip(samples, 0, 65535) / 257.0).astype(np.uint8)
        return Image.fromarray(narrowed)
    if image.mode == "F":
        samples = np.asarray(image).astype(np.float64)
        if samples.size and samples.max() <= 1.0:
            samples = samples * 255.0
        return Image.fromarray(np.rint(np.clip(samples, 0, 255)).astype(np.uint8))
    if image.mode == "1":
        return image.convert("L")
    return image


def flatten_alpha(frame: DecodedFrame) -> DecodedFrame:
    """Composite transparent frames onto white and drop the alpha band."""
    if not frame.has_alpha:
        return frame

    rgba = _eight_bit(frame.image).convert("RGBA")
    background = Image.new("RGBA", rgba.size, WHITE)
    flattened = Image.alpha_composite(background, rgba).convert("RGB")
    return frame.with_image(flattened, has_alpha=False)


def to_srgb(frame: DecodedFrame) -> DecodedFrame:
    """Coerce to 8 bits per channel in the sRGB color space."""
    image = _eight_bit(frame.image)

    if frame.icc_profile:
        try:
            source_profile = ImageCms.ImageCmsProfile(BytesIO(frame.icc_profile))
            image = ImageCms.profileToProfile(image, source_profile, _SRGB_PROFILE, outputMode="RGB")
        except (ImageCms.PyCMSError, OSError, ValueError) as exc:
            logger.warning("Ignoring unusable ICC profile on frame %s: %s", frame.index, exc)

    if image.mode != "RGB":
        try:
            image = image.convert("RGB")
        except ValueError as exc:
            raise DecodeError(f"Unsupported pixel format {image.mode}", cause=exc) from exc

    return frame.with_image(image, icc_profile=None)


def strip_metadata(frame: DecodedFrame) -> DecodedFrame:
    """Drop EXIF, ICC and text chunks so encoders write none of them."""
    clean = frame.image.copy()
    clean.info = {}
    return frame.with_image(clean, icc_profile=None)


def _kernel_size(radius: int) -> tuple[int, int]:
    # (0, 0) lets OpenCV derive the kernel from sigma.
    if radius <= 0:
        return (0, 0)
    size = 2 * int(radius) + 1
    return (size, size)


def unsharp_mask(
    frame: DecodedFrame,
    *,
    radius: int = constants.UNSHARP_RADIUS,
    sigma: float = constants.UNSHARP_SIGMA,
    amount: float = constants.UNSHARP_AMOUNT,
    threshold: float = constants.UNSHARP_THRESHOLD,
) -> DecodedFrame:
    """Sharpen edges whose contrast exceeds ``threshold`` of full scale."""
    pixels = np.asarray(frame.image).astype(np.float32)
    detail = cv2.GaussianBlur(pixels, _kernel_size(radius), sigmaX=sigma, sigmaY=sigma)
    np.subtract(pixels, detail, out=detail)

    flat = np.abs(detail) * 2.0 < threshold * 255.0
    detail *= amount
    detail[flat] = 0.0
    pixels += detail

    np.clip(pixels, 0.0, 255.0, out=pixels)
    sharpened = Image.fromarray(np.rint(pixels).astype(np.uint8))
    return frame.with_image(sharpened)


DEFAULT_STEPS: tuple[NormalizationStep, ...] = (flatten_alpha, to_srgb, strip_metadata, unsharp_mask)


class FrameNormalizer:
    """Runs the fixed normalization pipeline ahead of any encoding."""

    def __init__(self, steps: Sequence[NormalizationStep] = DEFAULT_STEPS):
        self._steps = tuple(steps)

    def normalize(self, frame: DecodedFrame) -> DecodedFrame:
        for step in self._steps:
            frame = step(frame)
        return frame
