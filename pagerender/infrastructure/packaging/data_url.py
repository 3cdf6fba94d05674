"""Inline (data URL) encoding for converted pages."""
from __future__ import annotations

import base64


def bytes_to_data_url(data: bytes, mime_type: str) -> str:
    """Wrap encoded image bytes in a ``data:`` URL for inline responses."""

    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type or 'image/png'};base64,{encoded}"
