"""Drawing surfaces for curve segments."""

import io
from pathlib import Path
from typing import Protocol

from matplotlib.collections import LineCollection
from matplotlib.figure import Figure

from spirograph.models.geometry import Segment

POINTS_PER_INCH = 72


class Surface(Protocol):
    def stroke_weight(self, weight: float) -> None: ...

    def line(self, x0: float, y0: float, x1: float, y1: float) -> None: ...


def draw_curve(surface: Surface, segments: list[Segment]) -> int:
    """Replay segments on a surface. Returns the number of lines drawn."""
    for seg in segments:
        surface.stroke_weight(seg.weight)
        surface.line(seg.x0, seg.y0, seg.x1, seg.y1)
    return len(segments)


class FigureSurface:
    """Square matplotlib canvas with the origin at its centre.

    Lines accumulate into a single LineCollection; stroke weights are in
    pixels and converted to points at the figure dpi. The y axis points
    down, matching screen coordinates.
    """

    def __init__(
        self,
        size: int = 600,
        background: str = "#0a0a0a",
        stroke: str = "#ffffff",
        dpi: int = 100,
    ):
        self.size = size
        self.background = background
        self.stroke = stroke
        self.dpi = dpi
        self._weight = 1.0
        self._segments: list[list[tuple[float, float]]] = []
        self._widths: list[float] = []

    def stroke_weight(self, weight: float) -> None:
        self._weight = weight

    def line(self, x0: float, y0: float, x1: float, y1: float) -> None:
        self._segments.append([(x0, y0), (x1, y1)])
        self._widths.append(self._weight * POINTS_PER_INCH / self.dpi)

    @property
    def line_count(self) -> int:
        return len(self._segments)

    def collection(self) -> LineCollection:
        return LineCollection(
            self._segments,
            linewidths=self._widths,
            colors=self.stroke,
            capstyle="round",
        )

    def figure(self) -> Figure:
        inches = self.size / self.dpi
        fig = Figure(figsize=(inches, inches), dpi=self.dpi, facecolor=self.background)
        ax = fig.add_axes((0, 0, 1, 1))
        ax.set_facecolor(self.background)
        half = self.size / 2
        ax.set_xlim(-half, half)
        ax.set_ylim(half, -half)
        ax.set_aspect("equal")
        ax.set_axis_off()
        ax.add_collection(self.collection())
        return fig

    def to_svg(self) -> str:
        buf = io.BytesIO()
        self.figure().savefig(buf, format="svg", facecolor=self.background)
        return buf.getvalue().decode("utf-8")

    def save(self, path: str | Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.figure().savefig(path, format="svg", facecolor=self.background)
        return path
