"""Color reduction beyond the 256-entry limit of PNG palettes.

A median-cut palette is built from the distinct colors of the image, then
pixels are mapped onto it with Floyd-Steinberg error diffusion. Results
with more than 256 colors are returned as truecolor images.
"""
from __future__ import annotations

import heapq
import itertools
import logging
from typing import List, Tuple

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

# Pillow palettes hold at most 256 entries.
PALETTE_LIMIT = 256

# Nearest-color lookups are cached on a 6-bit-per-channel grid.
_GRID_BITS = 6
_GRID_SHIFT = 8 - _GRID_BITS
_GRID_MASK = (1 << _GRID_BITS) - 1

# (row offset, column offset, weight) of the Floyd-Steinberg kernel.
_DIFFUSION = ((0, 1, 7 / 16), (1, -1, 3 / 16), (1, 0, 5 / 16), (1, 1, 1 / 16))


class _ColorBox:
    """A set of distinct colors with their pixel counts."""

    def __init__(self, colors: np.ndarray, counts: np.ndarray):
        self.colors = colors
        self.counts = counts
        spans = colors.max(axis=0) - colors.min(axis=0)
        self.axis = int(np.argmax(spans))
        self.span = int(spans[self.axis])
        self.population = int(counts.sum())

    @property
    def priority(self) -> int:
        return self.span * self.population

    def can_split(self) -> bool:
        return len(self.colors) > 1

    def split(self) -> Tuple[_ColorBox, _ColorBox]:
        order = np.argsort(self.colors[:, self.axis], kind="stable")
        colors, counts = self.colors[order], self.counts[order]
        cumulative = np.cumsum(counts)
        cut = int(np.searchsorted(cumulative, cumulative[-1] / 2.0))
        cut = min(max(cut, 1), len(colors) - 1)
        return _ColorBox(colors[:cut], counts[:cut]), _ColorBox(colors[cut:], counts[cut:])

    def mean(self) -> np.ndarray:
        weighted = (self.colors * self.counts[:, None]).sum(axis=0) / self.population
        return np.rint(weighted)


def median_cut_palette(pixels: np.ndarray, max_colors: int) -> np.ndarray:
    """Return a ``(k, 3)`` uint8 palette with ``k <= max_colors`` for ``(n, 3)`` pixels."""
    packed = (pixels[:, 0].astype(np.uint32) << 16) | (pixels[:, 1].astype(np.uint32) << 8) | pixels[:, 2]
    unique, counts = np.unique(packed, return_counts=True)
    colors = np.stack([(unique >> 16) & 0xFF, (unique >> 8) & 0xFF, unique & 0xFF], axis=1).astype(np.int64)

    tiebreak = itertools.count()
    done: List[_ColorBox] = []
    heap: List[Tuple[int, int, _ColorBox]] = []

    def push(box: _ColorBox) -> None:
        if box.can_split():
            heapq.heappush(heap, (-box.priority, next(tiebreak), box))
        else:
            done.append(box)

    push(_ColorBox(colors, counts.astype(np.int64)))
    while heap and len(heap) + len(done) < max_colors:
        _, _, box = heapq.heappop(heap)
        for half in box.split():
            push(half)

    boxes = done + [box for _, _, box in heap]
    return np.array([box.mean() for box in boxes], dtype=np.uint8)


class _NearestColor:
    """Maps colors to palette indices, filling a grid cache on demand."""

    def __init__(self, palette: np.ndarray):
        self._palette = palette.astype(np.float32)
        self._norms = (self._palette ** 2).sum(axis=1)
        self._cache = np.full(1 << (3 * _GRID_BITS), -1, dtype=np.int32)

    def __call__(self, values: np.ndarray) -> np.ndarray:
        levels = values.astype(np.int32) >> _GRID_SHIFT
        cells = (levels[:, 0] << (2 * _GRID_BITS)) | (levels[:, 1] << _GRID_BITS) | levels[:, 2]
        missing = np.unique(cells[self._cache[cells] < 0])
        if missing.size:
            centers = np.stack(
                [(missing >> (2 * _GRID_BITS)) & _GRID_MASK, (missing >> _GRID_BITS) & _GRID_MASK, missing & _GRID_MASK],
                axis=1,
            ).astype(np.float32)
            centers = centers * (1 << _GRID_SHIFT) + ((1 << _GRID_SHIFT) - 1) / 2.0
            distances = self._norms[None, :] - 2.0 * centers @ self._palette.T
            self._cache[missing] = np.argmin(distances, axis=1)
        return self._cache[cells]


def floyd_steinberg(pixels: np.ndarray, palette: np.ndarray) -> np.ndarray:
    """Dither ``(h, w, 3)`` pixels onto ``palette`` and return ``(h, w)`` indices.

    Pixel ``(y, x)`` only depends on pixels with a smaller ``x + 2y``, so each
    such anti-diagonal is processed as one vectorized step.
    """
    height, width = pixels.shape[:2]
    work = pixels.astype(np.float32)
    colors = palette.astype(np.float32)
    nearest = _NearestColor(palette)
    indices = np.empty((height, width), dtype=np.int32)

    for step in range(width + 2 * (height - 1)):
        first_row = max(0, (step - width + 2) // 2)
        last_row = min(height - 1, step // 2)
        rows = np.arange(first_row, last_row + 1)
        cols = step - 2 * rows

        values = np.clip(work[rows, cols], 0.0, 255.0)
        chosen = nearest(values)
        indices[rows, cols] = chosen
        error = values - colors[chosen]

        for row_offset, col_offset, weight in _DIFFUSION:
            target_rows = rows + row_offset
            target_cols = cols + col_offset
            inside = (target_rows < height) & (target_cols >= 0) & (target_cols < width)
            if inside.any():
                # Neighbouring pixels of one step can share a target.
                np.add.at(work, (target_rows[inside], target_cols[inside]), error[inside] * weight)

    return indices


def quantize_colors(image: Image.Image, max_colors: int) -> Image.Image:
    """
    Reduce ``image`` to at most ``max_colors`` colors with Floyd-Steinberg dithering.

    Images already within the budget are returned unchanged. Results with at
    most 256 colors are palette images, larger ones are RGB.
    """
    rgb = image if image.mode == "RGB" else image.convert("RGB")
    if rgb.getcolors(maxcolors=max_colors) is not None:
        return rgb

    pixels = np.asarray(rgb)
    palette = median_cut_palette(pixels.reshape(-1, 3), max_colors)
    indices = floyd_steinberg(pixels, palette)
    logger.debug("Quantized %sx%s image to %s colors", rgb.width, rgb.height, len(palette))

    if len(palette) <= PALETTE_LIMIT:
        quantized = Image.frombytes("P", rgb.size, indices.astype(np.uint8).tobytes())
        quantized.putpalette(palette.reshape(-1).tolist())
        return quantized
    return Image.fromarray(palette[indices])
