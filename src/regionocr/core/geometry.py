# -*- coding: utf-8 -*-
"""
src/regionocr/core/geometry.py

Rectangles and the transforms between the coordinate spaces used by RegionOCR.

A rectangle is only meaningful together with the space it lives in, so every
space has its own type:

- DisplayRect: the scaled on-screen preview. Lower-left origin.
- NativeRect: unscaled image pixels. Same origin as DisplayRect.
- FlippedRect: native pixels with the vertical axis inverted, i.e. the
  top-left origin of the raster itself. Crops are taken in this space.
- NormalizedRect: native space divided by the image size. This is the
  region-of-interest handed to the recognition engine.

The functions below are the only supported way to move between spaces.
"""

from dataclasses import dataclass
from typing import NamedTuple, Tuple

import numpy as np

# Fraction of the viewport used by the preview, leaving a visible margin.
DEFAULT_PREVIEW_MARGIN = 0.9


class Size(NamedTuple):
    width: float
    height: float


@dataclass(frozen=True)
class _Rect:
    x: float
    y: float
    width: float
    height: float

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)

    @property
    def is_empty(self) -> bool:
        """True when the rectangle encloses no area."""
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class DisplayRect(_Rect):
    """A selection on the scaled preview."""


@dataclass(frozen=True)
class NativeRect(_Rect):
    """A region in unscaled image pixels."""


@dataclass(frozen=True)
class FlippedRect(_Rect):
    """A native region measured from the top edge of the raster."""


@dataclass(frozen=True)
class NormalizedRect(_Rect):
    """A native region expressed as fractions of the image size."""


def image_size(image: np.ndarray) -> Size:
    """Returns the (width, height) of a decoded raster."""
    height, width = image.shape[:2]
    return Size(width, height)


def display_rect_from_points(p1: Tuple[float, float], p2: Tuple[float, float]) -> DisplayRect:
    """Axis-aligned bounding box of two display points."""
    (x1, y1), (x2, y2) = p1, p2
    return DisplayRect(
        x=min(x1, x2),
        y=min(y1, y2),
        width=abs(x1 - x2),
        height=abs(y1 - y2),
    )


def to_native(rect: DisplayRect, scale: float) -> NativeRect:
    """
    Undoes the preview scaling.

    Args:
        rect (DisplayRect): The selection on the preview.
        scale (float): The preview scale factor, must be positive.

    Returns:
        NativeRect: The same region in image pixels.
    """
    if scale <= 0:
        raise ValueError(f"scale must be positive, got {scale}")
    return NativeRect(
        x=rect.x / scale,
        y=rect.y / scale,
        width=rect.width / scale,
        height=rect.height / scale,
    )


def _flip_y(y: float, height: float, image_height: float) -> float:
    return image_height - y - height


def to_flipped(rect: NativeRect, image_height: float) -> FlippedRect:
    """Measures a native rectangle from the opposite horizontal edge."""
    return FlippedRect(
        x=rect.x,
        y=_flip_y(rect.y, rect.height, image_height),
        width=rect.width,
        height=rect.height,
    )


def from_flipped(rect: FlippedRect, image_height: float) -> NativeRect:
    """Inverse of to_flipped for the same image height."""
    return NativeRect(
        x=rect.x,
        y=_flip_y(rect.y, rect.height, image_height),
        width=rect.width,
        height=rect.height,
    )


def to_normalized(rect: NativeRect, size: Size) -> NormalizedRect:
    """
    Divides a native rectangle by the image size.

    Components are not clamped. A region reaching outside the image yields
    values outside [0, 1] and it is up to the engine to reject them.
    """
    width, height = size
    if width <= 0 or height <= 0:
        raise ValueError(f"image size must be positive, got {width}x{height}")
    return NormalizedRect(
        x=rect.x / width,
        y=rect.y / height,
        width=rect.width / width,
        height=rect.height / height,
    )


def compute_scale(viewport: Size, size: Size, allow_scaling: bool,
                  margin: float = DEFAULT_PREVIEW_MARGIN) -> float:
    """
    Computes the preview scale for an image shown inside a viewport.

    Images are never enlarged. When scaling is allowed, the fitted factor is
    multiplied by `margin` so the preview does not touch the screen edges.

    Returns:
        float: 1.0 when scaling is disabled, otherwise
        margin * min(1, viewport.width / width, viewport.height / height).
    """
    if not allow_scaling:
        return 1.0
    if size.width <= 0 or size.height <= 0:
        raise ValueError(f"image size must be positive, got {size.width}x{size.height}")
    fit = min(viewport.width / size.width, viewport.height / size.height)
    return margin * min(1.0, fit)
