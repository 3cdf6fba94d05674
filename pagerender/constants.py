from __future__ import annotations

from fractions import Fraction

# Single source of truth for the fixed conversion heuristics.

# PDF rasterization density (dots per inch) and page background.
PDF_RENDER_DPI = 400

# A JPEG fallback replaces the PNG candidate only below this size ratio.
JPEG_SELECTION_RATIO = Fraction(85, 100)

# Upper bound of distinct colors kept by PNG palette quantization.
QUANTIZE_MAX_COLORS = 1024

# Encoder settings.
PNG_COMPRESSION_LEVEL = 9
WEBP_QUALITY = 90
WEBP_METHOD = 6
JPEG_TARGET_QUALITY = 90
JPEG_FALLBACK_QUALITY = 95
JPEG_SUBSAMPLING = "4:4:4"

# Unsharp mask applied to every re-encoded frame. A radius of 0 derives the
# kernel size from sigma; the threshold is a fraction of full scale.
UNSHARP_RADIUS = 0
UNSHARP_SIGMA = 0.9
UNSHARP_AMOUNT = 0.9
UNSHARP_THRESHOLD = 0.02

SUGGESTED_NAME_TEMPLATE = "{base_name}-page-{page_number:03d}{extension}"
