from __future__ import annotations

import io
from datetime import datetime, timezone

import numpy as np
import pytest
from matplotlib import image as mpimg
from matplotlib.transforms import Bbox

from kcard.adapters import asset_store
from kcard.adapters.asset_store import load_assets, load_background, load_font, paint_sunset
from kcard.adapters.card_renderer import GUTTER_PX, TEXT_FONT_PX, MatplotlibCardRenderer
from kcard.domain.errors import AssetLoadError
from kcard.domain.models import NamingState, NodeIdentity, RoutedRouting
from kcard.domain.report import format_report

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
NOW = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


def _decode(data: bytes) -> np.ndarray:
    return mpimg.imread(io.BytesIO(data), format="png")


def test_render_produces_png_with_background_dimensions(small_assets, snapshot) -> None:
    renderer = MatplotlibCardRenderer(small_assets)

    data = renderer.render("ochocinco.os", format_report(snapshot), NOW)

    assert data.startswith(PNG_SIGNATURE)
    assert _decode(data).shape[:2] == (240, 320)


def test_render_default_background_size() -> None:
    assets = load_assets()
    renderer = MatplotlibCardRenderer(assets)

    pixels = _decode(renderer.render("a.os", "...is running 1 processes", NOW))

    assert pixels.shape[:2] == (900, 1600)


def test_render_clips_reports_longer_than_canvas(small_assets) -> None:
    report = "\n".join(f"line {idx}" for idx in range(200))

    pixels = _decode(MatplotlibCardRenderer(small_assets).render("a.os", report, NOW))

    assert pixels.shape[:2] == (240, 320)


def test_render_draws_text_over_background(small_assets) -> None:
    renderer = MatplotlibCardRenderer(small_assets)

    blank = _decode(renderer.render(" ", "", NOW))
    titled = _decode(renderer.render("ochocinco.os", "...is running 42 processes", NOW))

    assert not np.array_equal(blank, titled)


def test_render_does_not_mutate_background(small_assets) -> None:
    before = small_assets.background.copy()

    MatplotlibCardRenderer(small_assets).render("a.os", "report", NOW)

    assert np.array_equal(before, small_assets.background)
    assert not small_assets.background.flags.writeable


def test_paint_sunset_shape_and_dtype() -> None:
    pixels = paint_sunset(64, 48)

    assert pixels.shape == (48, 64, 3)
    assert pixels.dtype == np.uint8


def test_paint_sunset_rejects_empty_size() -> None:
    with pytest.raises(AssetLoadError):
        paint_sunset(0, 10)


def test_background_file_that_cannot_decode_is_fatal(tmp_path) -> None:
    broken = tmp_path / "background.png"
    broken.write_bytes(b"not an image")

    with pytest.raises(AssetLoadError):
        load_background(str(broken))


def test_background_file_is_decoded(tmp_path) -> None:
    path = tmp_path / "bg.png"
    mpimg.imsave(path, paint_sunset(200, 100))

    background = load_background(str(path))

    assert background.shape[:2] == (100, 200)


def test_missing_font_is_fatal(tmp_path) -> None:
    with pytest.raises(AssetLoadError):
        load_font(str(tmp_path / "missing.ttf"))


@pytest.fixture(scope="module")
def full_assets():
    return load_assets()


def _extent(fig, gid: str) -> Bbox:
    renderer = fig.canvas.get_renderer()
    boxes = [text.get_window_extent(renderer) for text in fig.texts if text.get_gid() == gid]
    assert boxes, f"no text drawn for {gid}"
    return Bbox.union(boxes)


def test_long_key_and_address_stay_clear_of_motif(full_assets, make_snapshot) -> None:
    snapshot = make_snapshot(
        identity=NodeIdentity(
            name="ochocinco.os",
            networking_key="ab" * 32,
            routing=RoutedRouting(routers=("r1.os", "r2.os")),
        ),
        naming=NamingState(chain_id=10, contract_address=bytes(range(20)), nodes={}),
    )
    renderer = MatplotlibCardRenderer(full_assets)

    fig = renderer.compose("ochocinco.os", format_report(snapshot), NOW)

    motif = _extent(fig, "motif")
    for gid in ("title", "report"):
        block = _extent(fig, gid)
        assert block.x1 <= motif.x0
        assert not block.overlaps(motif)


def test_short_report_keeps_full_text_size(full_assets) -> None:
    layout = MatplotlibCardRenderer(full_assets).layout("a.os", "...is running 42 processes\n...using public key")

    assert layout.report_px == TEXT_FONT_PX
    assert layout.motif_px == TEXT_FONT_PX


def test_layout_shrinks_report_to_left_column(full_assets) -> None:
    renderer = MatplotlibCardRenderer(full_assets)
    report = "   " + "ab" * 32

    layout = renderer.layout("ochocinco.os", report)

    assert layout.report_px < TEXT_FONT_PX
    assert 50 + renderer._block_width([report], layout.report_px) <= layout.motif_x - GUTTER_PX


def test_grayscale_background_is_expanded_to_rgb(monkeypatch) -> None:
    monkeypatch.setattr(asset_store.mpimg, "imread", lambda path: np.full((10, 20), 0.5))

    background = load_background("gray.png")

    assert background.shape == (10, 20, 3)
    assert np.array_equal(background[..., 0], background[..., 2])
