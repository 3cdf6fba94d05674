"""Pytest configuration and shared fixtures for pagerender tests.

Ensures the project root is on sys.path so ``pagerender.*`` imports resolve
without an editable install, and provides in-memory sample documents built
with Pillow and PyMuPDF.
"""
from __future__ import annotations

import sys
from io import BytesIO
from pathlib import Path
from typing import Callable

import pytest

# Add repository root to sys.path for module resolution.
PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import fitz  # noqa: E402
from PIL import Image  # noqa: E402


def encode_image(image: Image.Image, fmt: str, **options) -> bytes:
    buffer = BytesIO()
    image.save(buffer, format=fmt, **options)
    return buffer.getvalue()


def gradient_image(width: int = 48, height: int = 32, mode: str = "RGB") -> Image.Image:
    """Smooth colour gradient; many distinct colours, photo-like."""
    image = Image.new("RGB", (width, height))
    image.putdata([
        ((x * 255) // max(width - 1, 1), (y * 255) // max(height - 1, 1), ((x + y) * 7) % 256)
        for y in range(height)
        for x in range(width)
    ])
    return image.convert(mode) if mode != "RGB" else image


def make_pdf(page_count: int, *, width: float = 36, height: float = 54) -> bytes:
    """Build a small PDF with one labelled page per entry."""
    document = fitz.open()
    for index in range(page_count):
        page = document.new_page(width=width, height=height)
        page.insert_text((4, 20), str(index + 1), fontsize=12)
    data = document.tobytes()
    document.close()
    return data


@pytest.fixture
def png_bytes() -> bytes:
    return encode_image(gradient_image(), "PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return encode_image(gradient_image(), "JPEG", quality=80)


@pytest.fixture
def webp_bytes() -> bytes:
    return encode_image(gradient_image(), "WEBP", quality=80)


@pytest.fixture
def pdf_factory() -> Callable[..., bytes]:
    return make_pdf


@pytest.fixture
def image_encoder() -> Callable[..., bytes]:
    return encode_image


@pytest.fixture
def gradient() -> Callable[..., Image.Image]:
    return gradient_image
