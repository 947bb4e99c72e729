"""
Overlay compositor.

Scales an overlay image to the width of a detected face and draws it,
alpha blended, centered on the face. Images are numpy arrays in OpenCV
channel order (BGR / BGRA, or single channel grey), dtype uint8.

Each call returns a new array; the background passed in is never
modified, so successive faces are accumulated by feeding one call's
output into the next.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import cv2
import numpy as np

from emojify.errors import AssetError, InvalidInputError
from emojify.features import FaceDescriptor

logger = logging.getLogger(__name__)

SUPPORTED_CHANNELS = (1, 3, 4)


@dataclass(frozen=True)
class CompositorConfig:
    """Configuration for Compositor.

    Attributes:
        scale_factor: Overlay width as a fraction of the face width
        compound_height_scale: Apply scale_factor a second time to the
            overlay height. On by default so output stays pixel-compatible
            with existing emojified pictures; this squashes the overlay
            and is probably unintended. Off keeps the aspect ratio.
    """
    scale_factor: float = 0.9
    compound_height_scale: bool = True

    def __post_init__(self):
        if not (self.scale_factor > 0 and math.isfinite(self.scale_factor)):
            raise ValueError(f"scale_factor must be positive, got {self.scale_factor}")


@dataclass(frozen=True)
class OverlayPlacement:
    """Size and top-left position of a scaled overlay on the background."""
    width: int
    height: int
    x: float
    y: float

    @property
    def origin(self) -> Tuple[int, int]:
        """Pixel origin of the draw, coordinates rounded half up."""
        return math.floor(self.x + 0.5), math.floor(self.y + 0.5)


def compute_placement(
    face: FaceDescriptor,
    overlay_width: int,
    overlay_height: int,
    scale_factor: float = 0.9,
    compound_height_scale: bool = True,
) -> OverlayPlacement:
    """
    Compute the scaled overlay size and where to draw it for one face.

    Sizes are truncated toward zero. The height follows the overlay's
    aspect ratio using integer division, and is multiplied by
    ``scale_factor`` once more when ``compound_height_scale`` is set.
    The overlay is centered horizontally on the face; vertically the
    face center lines up with the point one third down the overlay.

    Example: face width 200, overlay 100x80, scale 0.9 -> 180x129.

    Raises:
        InvalidInputError: If the overlay size is not positive or the
            scaled overlay would be empty.
    """
    if overlay_width <= 0 or overlay_height <= 0:
        raise InvalidInputError(
            f"Overlay size must be positive, got {overlay_width}x{overlay_height}"
        )

    scaled_width = int(face.width * scale_factor)
    scaled_height = (overlay_height * scaled_width) // overlay_width
    if compound_height_scale:
        scaled_height = int(scaled_height * scale_factor)

    if scaled_width <= 0 or scaled_height <= 0:
        raise InvalidInputError(
            f"Face of width {face.width} gives an empty overlay "
            f"({scaled_width}x{scaled_height})"
        )

    x = face.x + face.width / 2 - scaled_width // 2
    y = face.y + face.height / 2 - scaled_height // 3

    return OverlayPlacement(width=scaled_width, height=scaled_height, x=x, y=y)


def _as_channels(image: np.ndarray, what: str) -> np.ndarray:
    """Validate a uint8 image and return it as a (H, W, C) view."""
    if not isinstance(image, np.ndarray):
        raise AssetError(f"{what} must be a numpy array, got {type(image).__name__}")
    if image.dtype != np.uint8:
        raise AssetError(f"{what} must have dtype uint8, got {image.dtype}")
    if image.ndim == 2:
        image = image[:, :, np.newaxis]
    if image.ndim != 3 or image.shape[2] not in SUPPORTED_CHANNELS:
        raise AssetError(f"Unsupported {what} shape {image.shape}")
    if image.shape[0] == 0 or image.shape[1] == 0:
        raise AssetError(f"{what} is empty")
    return image


def _match_color(color: np.ndarray, channels: int) -> np.ndarray:
    """Convert a 1 or 3 channel color block to the given channel count."""
    if color.shape[2] == channels:
        return color
    if channels == 1:
        grey = cv2.cvtColor(np.ascontiguousarray(color), cv2.COLOR_BGR2GRAY)
        return grey[:, :, np.newaxis]
    return np.repeat(color, channels, axis=2)


def draw_over(background: np.ndarray, overlay: np.ndarray, x: int, y: int) -> np.ndarray:
    """
    Alpha composite ``overlay`` onto a copy of ``background``.

    Args:
        background: uint8 image, grey (H, W) / (H, W, 1), BGR or BGRA.
        overlay: uint8 image, grey, BGR (opaque) or BGRA.
        x: Column of the overlay's top-left pixel, may be negative.
        y: Row of the overlay's top-left pixel, may be negative.

    Returns:
        New array with the shape and dtype of ``background``. Overlay
        pixels falling outside the background are clipped.

    Raises:
        AssetError: If either image has an unsupported dtype or shape.
    """
    bg = _as_channels(background, "background")
    ov = _as_channels(overlay, "overlay")

    result = background.copy()
    out = result if result.ndim == 3 else result[:, :, np.newaxis]

    bg_h, bg_w = bg.shape[:2]
    ov_h, ov_w = ov.shape[:2]

    x1, y1 = max(x, 0), max(y, 0)
    x2, y2 = min(x + ov_w, bg_w), min(y + ov_h, bg_h)
    if x1 >= x2 or y1 >= y2:
        logger.debug(f"Overlay at ({x}, {y}) lies outside the background, skipped")
        return result

    crop = ov[y1 - y:y2 - y, x1 - x:x2 - x]
    bg_has_alpha = bg.shape[2] == 4
    color_channels = 3 if bg_has_alpha else bg.shape[2]

    if crop.shape[2] == 4:
        fg = crop[:, :, :3]
        alpha = crop[:, :, 3:].astype(np.float32) / 255.0
    else:
        fg = crop
        alpha = np.ones(crop.shape[:2] + (1,), dtype=np.float32)
    fg = _match_color(fg, color_channels).astype(np.float32)

    roi = out[y1:y2, x1:x2]
    roi_color = roi[:, :, :color_channels].astype(np.float32)

    if bg_has_alpha:
        bg_alpha = roi[:, :, 3:].astype(np.float32) / 255.0
        out_alpha = alpha + bg_alpha * (1.0 - alpha)
        weighted = fg * alpha + roi_color * bg_alpha * (1.0 - alpha)
        color = np.divide(
            weighted, out_alpha,
            out=np.zeros_like(weighted), where=out_alpha > 0,
        )
        roi[:, :, :3] = np.clip(np.rint(color), 0, 255).astype(np.uint8)
        roi[:, :, 3:] = np.clip(np.rint(out_alpha * 255.0), 0, 255).astype(np.uint8)
    else:
        color = fg * alpha + roi_color * (1.0 - alpha)
        roi[:, :, :] = np.clip(np.rint(color), 0, 255).astype(np.uint8)

    return result


class Compositor:
    """
    Draws overlays onto faces.

    Usage:
        compositor = Compositor()
        result = compositor.composite(background, overlay, face)
    """

    def __init__(self, config: Optional[CompositorConfig] = None):
        self.config = config or CompositorConfig()

    def place(self, overlay: np.ndarray, face: FaceDescriptor) -> OverlayPlacement:
        """Compute the placement of ``overlay`` on ``face`` with this config."""
        ov = _as_channels(overlay, "overlay")
        return compute_placement(
            face,
            overlay_width=ov.shape[1],
            overlay_height=ov.shape[0],
            scale_factor=self.config.scale_factor,
            compound_height_scale=self.config.compound_height_scale,
        )

    def scale(self, overlay: np.ndarray, placement: OverlayPlacement) -> np.ndarray:
        """Resize the overlay to the placement size (nearest neighbour)."""
        scaled = cv2.resize(
            overlay, (placement.width, placement.height),
            interpolation=cv2.INTER_NEAREST,
        )
        # cv2.resize drops a trailing singleton channel axis
        if overlay.ndim == 3 and scaled.ndim == 2:
            scaled = scaled[:, :, np.newaxis]
        return scaled

    def composite_with_placement(
        self,
        background: np.ndarray,
        overlay: np.ndarray,
        face: FaceDescriptor,
    ) -> Tuple[np.ndarray, OverlayPlacement]:
        """
        Composite one overlay and also report where it was drawn.

        Returns:
            Tuple of:
                - image: New array, same shape and dtype as ``background``
                - placement: Scaled size and position of the overlay
        """
        _as_channels(background, "background")
        placement = self.place(overlay, face)
        scaled = self.scale(overlay, placement)
        x, y = placement.origin
        logger.debug(
            f"Drawing {overlay.shape[1]}x{overlay.shape[0]} overlay as "
            f"{placement.width}x{placement.height} at ({x}, {y})"
        )
        return draw_over(background, scaled, x, y), placement

    def composite(
        self,
        background: np.ndarray,
        overlay: np.ndarray,
        face: FaceDescriptor,
    ) -> np.ndarray:
        """
        Draw ``overlay`` scaled to ``face`` on a copy of ``background``.

        Raises:
            AssetError: Unsupported background or overlay format.
            InvalidInputError: The face is too small to hold any overlay pixel.
        """
        image, _ = self.composite_with_placement(background, overlay, face)
        return image
