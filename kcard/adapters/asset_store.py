"""Load-once store for the card background raster and monospace font.

The default background is painted procedurally with numpy so the package
ships no binary image; a file can replace it. The default font is the
DejaVu Sans Mono TTF that ships inside matplotlib's data directory. Any
decode failure raises ``AssetLoadError``, which is fatal at startup.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import matplotlib
import numpy as np
from matplotlib import font_manager
from matplotlib import image as mpimg

from kcard.domain.errors import AssetLoadError

LOGGER = logging.getLogger(__name__)

BACKGROUND_SIZE: Tuple[int, int] = (1600, 900)
DEFAULT_FONT_FILE = Path("fonts") / "ttf" / "DejaVuSansMono.ttf"


@dataclass(frozen=True)
class CardAssets:
    """Immutable background pixels plus the font used for every text element."""

    background: np.ndarray
    font: font_manager.FontProperties
    font_path: str

    @property
    def width(self) -> int:
        return int(self.background.shape[1])

    @property
    def height(self) -> int:
        return int(self.background.shape[0])


def paint_sunset(width: int, height: int) -> np.ndarray:
    """Return an RGB ``uint8`` red-sunset scene of ``height`` x ``width`` pixels."""
    if width <= 0 or height <= 0:
        raise AssetLoadError(f"Background size must be positive, got {width}x{height}")
    horizon = int(height * 0.68)
    rows = np.linspace(0.0, 1.0, height)[:, None]

    sky_top = np.array([70.0, 10.0, 30.0])
    sky_low = np.array([235.0, 95.0, 40.0])
    sea_top = np.array([120.0, 30.0, 35.0])
    sea_low = np.array([25.0, 8.0, 20.0])

    sky_t = np.clip(rows / max(horizon / height, 1e-6), 0.0, 1.0) ** 1.6
    sea_t = np.clip((rows - horizon / height) / max(1.0 - horizon / height, 1e-6), 0.0, 1.0)
    sky = sky_top + (sky_low - sky_top) * sky_t
    sea = sea_top + (sea_low - sea_top) * sea_t
    column = np.where(rows < horizon / height, sky, sea)
    canvas = np.repeat(column[:, None, :], width, axis=1)

    # sun sitting on the horizon, clipped by the sea
    yy, xx = np.mgrid[0:height, 0:width]
    cx, cy, radius = width * 0.3, horizon, height * 0.12
    dist = np.sqrt((xx - cx) ** 2 + (yy - cy) ** 2)
    sun = (dist < radius) & (yy < horizon)
    canvas[sun] = [250.0, 200.0, 120.0]
    glow = np.clip(1.0 - dist / (radius * 3.0), 0.0, 1.0)[..., None] * 60.0
    canvas = canvas + glow * (yy < horizon)[..., None]

    return np.clip(canvas, 0, 255).astype(np.uint8)


def load_background(path: Optional[str] = None, size: Tuple[int, int] = BACKGROUND_SIZE) -> np.ndarray:
    """Return read-only background pixels, decoded from ``path`` or painted."""
    if path is None:
        pixels = paint_sunset(*size)
    else:
        try:
            pixels = np.asarray(mpimg.imread(path))
        except Exception as exc:
            raise AssetLoadError(f"Failed to decode background {path}: {exc}") from exc
        if pixels.ndim not in (2, 3) or pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise AssetLoadError(f"Background {path} has unsupported shape {pixels.shape}")
        if pixels.ndim == 2:
            # figimage would colormap a 2-D array
            pixels = np.stack([pixels] * 3, axis=-1)
        else:
            pixels = pixels.copy()
    pixels.setflags(write=False)
    return pixels


def load_font(path: Optional[str] = None) -> Tuple[font_manager.FontProperties, str]:
    """Validate the monospace TTF and return font properties bound to it."""
    font_path = str(path or Path(matplotlib.get_data_path()) / DEFAULT_FONT_FILE)
    try:
        font_manager.get_font(font_path)
    except Exception as exc:
        raise AssetLoadError(f"Failed to load font {font_path}: {exc}") from exc
    return font_manager.FontProperties(fname=font_path), font_path


def load_assets(
    background_path: Optional[str] = None,
    font_path: Optional[str] = None,
    size: Tuple[int, int] = BACKGROUND_SIZE,
) -> CardAssets:
    """Load every card asset once; raises ``AssetLoadError`` on any failure."""
    background = load_background(background_path, size)
    font, resolved_font = load_font(font_path)
    LOGGER.info(
        "Card assets loaded: background %dx%d, font %s",
        background.shape[1],
        background.shape[0],
        resolved_font,
    )
    return CardAssets(background=background, font=font, font_path=resolved_font)


__all__ = [
    "BACKGROUND_SIZE",
    "CardAssets",
    "load_assets",
    "load_background",
    "load_font",
    "paint_sunset",
]
