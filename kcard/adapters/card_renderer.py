"""Matplotlib implementation of ``CardRendererPort``.

The card is composed on an off-screen ``Figure`` whose pixel size equals the
background raster: ``figsize = size / DPI`` with a power-of-two DPI keeps the
division exact, so the encoded PNG always has the background's dimensions.
No pyplot state is touched, each call builds and drops its own figure.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from matplotlib import font_manager
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from kcard.adapters.asset_store import CardAssets

DPI = 64
TITLE_FONT_PX = 96
TEXT_FONT_PX = 32
CAPTION_FONT_PX = 20
MIN_FONT_PX = 4
MARGIN_PX = 50
GUTTER_PX = 32
# widest share of the inner canvas the motif may take before it shrinks
MOTIF_SHARE = 0.4
TEXT_COLOR = "#ffffff"

# red sunset from https://www.metmuseum.org/art/collection/search/436833
ATTRIBUTION = "background after \"Red Sunset\", metmuseum.org 436833 (public domain)"

BIRD = r"""
    .`
`@@,,                     ,*
  `@%@@@,            ,~-##`
    ~@@#@%#@@,      #####
      ~-%######@@@, #####
         -%%#######@#####,
           ~^^%##########@
              >^#########@
                `>#######`
               .>######%
              /###%^#%
            /##%@#  `
         ./######`
       /.^`.#^#^`
      `   ,#`#`#,
         ,/ /` `
       .*`
""".strip("\n").splitlines()


@dataclass(frozen=True)
class CardLayout:
    """Pixel sizes and anchors of the card's text blocks, origin top-left.

    The motif owns the right-hand column; title and report are shrunk until
    their widest line ends ``GUTTER_PX`` before ``motif_x``.
    """

    title_px: int
    report_px: int
    motif_px: int
    motif_x: float
    report_top: float


def _points(px: float) -> float:
    """Convert a pixel font height into points at the canvas DPI."""
    return px * 72.0 / DPI


class MatplotlibCardRenderer:
    """Compose node name, report, motif and captions over the background."""

    def __init__(self, assets: CardAssets) -> None:
        self.assets = assets

    def render(self, node_name: str, report: str, now: datetime) -> bytes:
        fig = self.compose(node_name, report, now)
        buf = io.BytesIO()
        fig.savefig(buf, format="png", dpi=DPI)
        return buf.getvalue()

    def layout(self, node_name: str, report: str) -> CardLayout:
        """Size the motif column first, then fit title and report to its left."""
        width = self.assets.width
        inner = width - 2 * MARGIN_PX
        motif_px = self._fit_px(BIRD, TEXT_FONT_PX, inner * MOTIF_SHARE)
        motif_x = width - MARGIN_PX - self._block_width(BIRD, motif_px)
        column = motif_x - GUTTER_PX - MARGIN_PX
        title_px = self._fit_px([node_name], TITLE_FONT_PX, column)
        report_px = self._fit_px(report.splitlines(), TEXT_FONT_PX, column)
        return CardLayout(
            title_px=title_px,
            report_px=report_px,
            motif_px=motif_px,
            motif_x=motif_x,
            report_top=MARGIN_PX + title_px + report_px,
        )

    def compose(self, node_name: str, report: str, now: datetime) -> Figure:
        """Build the card figure; text artists carry a ``gid`` per block."""
        width, height = self.assets.width, self.assets.height
        card = self.layout(node_name, report)
        fig = Figure(figsize=(width / DPI, height / DPI), dpi=DPI)
        FigureCanvasAgg(fig)
        fig.figimage(self.assets.background, xo=0, yo=0, origin="upper")

        self._draw(fig, node_name, MARGIN_PX, MARGIN_PX, card.title_px, gid="title")

        y = MARGIN_PX
        for line in BIRD:
            self._draw(fig, line, card.motif_x, y, card.motif_px, gid="motif")
            y += card.motif_px

        y = card.report_top
        for line in report.splitlines():
            self._draw(fig, line, MARGIN_PX, y, card.report_px, gid="report")
            y += card.report_px

        bottom = height - MARGIN_PX
        stamp = f"rendered at {now:%Y-%m-%d %H:%M:%S %Z}".rstrip()
        self._draw(fig, stamp, MARGIN_PX, bottom, CAPTION_FONT_PX, va="bottom", gid="caption")
        self._draw(
            fig,
            ATTRIBUTION,
            width - MARGIN_PX,
            bottom,
            CAPTION_FONT_PX,
            ha="right",
            va="bottom",
            gid="caption",
        )
        return fig

    # ------------------------------------------------------------------
    def _draw(
        self,
        fig: Figure,
        text: str,
        x: float,
        y: float,
        size_px: float,
        *,
        ha: str = "left",
        va: str = "top",
        gid: Optional[str] = None,
    ) -> None:
        """Draw ``text`` with its anchor at pixel ``(x, y)``, origin top-left."""
        if not text.strip():
            return
        font = self.assets.font.copy()
        font.set_size(_points(size_px))
        fig.text(
            x / self.assets.width,
            1.0 - y / self.assets.height,
            text,
            color=TEXT_COLOR,
            fontproperties=font,
            ha=ha,
            va=va,
            parse_math=False,
            gid=gid,
        )

    def _fit_px(self, lines: List[str], max_px: int, avail_px: float) -> int:
        """Largest pixel size up to ``max_px`` at which ``lines`` fit in ``avail_px``."""
        size = max_px
        while size > MIN_FONT_PX and self._block_width(lines, size) > avail_px:
            size -= 1
        return size

    def _block_width(self, lines: List[str], size_px: float) -> float:
        """Pixel width of a monospace block, measured the way Agg lays it out."""
        # blanks carry no ink, so measure a solid run of the same length
        ft = font_manager.get_font(self.assets.font_path)
        ft.set_size(_points(size_px), DPI)
        ft.set_text("M" * max((len(line) for line in lines), default=0), 0.0)
        return ft.get_width_height()[0] / 64.0


__all__ = ["ATTRIBUTION", "BIRD", "DPI", "CardLayout", "MatplotlibCardRenderer"]
