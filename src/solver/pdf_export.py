"""Render a single 9x9 grid onto a portrait A4 PDF page."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.backends.backend_pdf import PdfPages  # noqa: E402

from project_config import get_config  # noqa: E402

from .grid_state import EMPTY, GRID_SIZE  # noqa: E402

INCH_PER_CM = 0.3937007874

_PDF_CONFIG = get_config().get("pdf", {})
PAGE_WIDTH_CM = float(_PDF_CONFIG.get("page_width_cm", 21.0))
PAGE_HEIGHT_CM = float(_PDF_CONFIG.get("page_height_cm", 29.7))
MARGIN_CM = float(_PDF_CONFIG.get("margin_cm", 3.0))
FONT_SCALE = float(_PDF_CONFIG.get("font_scale", 0.65))

GIVEN_COLOUR = "black"
SOLVED_COLOUR = "tab:blue"


def _draw_grid(ax, cells: Sequence[int], givens: Optional[Sequence[int]], size_in: float) -> None:
    ax.tick_params(axis="both", which="both", bottom=False, top=False, left=False, right=False,
                   labelbottom=False, labelleft=False)
    for i in range(GRID_SIZE + 1):
        lw = 1.5 if i % 3 else 3.0
        ax.axvline(i / GRID_SIZE, color="k", linewidth=lw)
        ax.axhline(i / GRID_SIZE, color="k", linewidth=lw)
    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1)
    ax.axis("off")
    fs = int(FONT_SCALE * size_in * 72 / GRID_SIZE)  # font size scaled to grid
    for index, value in enumerate(cells):
        if value == EMPTY:
            continue
        r, c = divmod(index, GRID_SIZE)
        is_given = givens is None or givens[index] != EMPTY
        ax.text(
            (c + 0.5) / GRID_SIZE,
            1 - (r + 0.5) / GRID_SIZE,
            str(value),
            ha="center",
            va="center",
            fontsize=fs,
            color=GIVEN_COLOUR if is_given else SOLVED_COLOUR,
        )


def export_pdf(
    cells: Sequence[int],
    path: str | Path,
    *,
    givens: Optional[Sequence[int]] = None,
    title: Optional[str] = None,
) -> Path:
    """Write ``cells`` as a one-page PDF and return the output path.

    When ``givens`` is provided, digits that were not given are drawn in a
    second colour so the solved part stands out.
    """

    out_path = Path(path)
    page_w_in = PAGE_WIDTH_CM * INCH_PER_CM
    page_h_in = PAGE_HEIGHT_CM * INCH_PER_CM
    margin_in = MARGIN_CM * INCH_PER_CM
    size_in = min(page_w_in, page_h_in) - 2 * margin_in
    left_in = (page_w_in - size_in) / 2
    bottom_in = (page_h_in - size_in) / 2

    with PdfPages(out_path) as pdf:
        fig = plt.figure(figsize=(page_w_in, page_h_in))
        ax = fig.add_axes(
            [left_in / page_w_in, bottom_in / page_h_in, size_in / page_w_in, size_in / page_h_in],
            frameon=False,
        )
        _draw_grid(ax, cells, givens, size_in)
        if title:
            fig.text(0.5, (bottom_in + size_in + margin_in / 2) / page_h_in, title,
                     ha="center", va="center", fontsize=14)
        pdf.savefig(fig)
        plt.close(fig)
    return out_path


__all__ = ["export_pdf"]
