"""Plot state for a concentration-versus-time chart, rendered with matplotlib."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from matplotlib.figure import Figure

from pumpctl.console import Color

PADDING = 0.05
DEFAULT_X_RANGE = (0.0, 10.0)
CLEARED_LINE_COLOR = "#de655e"


class PlotModel:
    """Data, axis limits and a vertical position marker for one chart."""

    def __init__(self) -> None:
        self.x = -100.0
        self.y_bot = 0
        self.y_top = 100
        self.run_start = 0.0
        self.x_data: list[float] = []
        self.y_data: list[float] = []
        self.x_label = "Time (min)"
        self.y_label = "Conc (mM)"
        self.line_color = Color.RED.value
        self.show_curve = True

    def _changed(self) -> None:
        self.show_curve = True

    def set_x(self, x: float) -> None:
        """Move the marker; a negative position hides it."""
        self.x = float(x)
        self._changed()

    def set_y_axis(self, pac: int, pbc: int) -> None:
        """Span the y axis between the two pump concentrations."""
        self.y_bot = min(pac, pbc)
        self.y_top = max(pac, pbc)
        self._changed()

    def set_y_label(self, label: str) -> None:
        self.y_label = label

    def clear_axes(self) -> None:
        """Blank the labels and hide the curve until the data next changes."""
        self.show_curve = False
        self.line_color = CLEARED_LINE_COLOR
        self.x_label = ""
        self.y_label = ""

    def set_start(self, time: float) -> None:
        self.run_start = time

    def set_stop(self) -> None:
        self.run_start = 0.0

    def set_data(self, x_values: Iterable[float], y_values: Iterable[float]) -> None:
        self.x_data = [float(v) for v in x_values]
        self.y_data = [float(v) for v in y_values]
        self._changed()

    def append_data(self, x: float, y: float) -> None:
        self.x_data.append(float(x))
        self.y_data.append(float(y))
        self._changed()

    def x_range(self) -> tuple[float, float]:
        """The data's x extent (or the default extent) padded by 5% each side."""
        if self.x_data:
            low, high = min(self.x_data), max(self.x_data)
        else:
            low, high = DEFAULT_X_RANGE
        pad = (high - low) * PADDING
        return low - pad, high + pad

    def y_range(self) -> tuple[float, float]:
        pad = (self.y_top - self.y_bot) * PADDING
        return self.y_bot - pad, self.y_top + pad

    def marker(self) -> tuple[tuple[float, float], tuple[float, float]] | None:
        """End points of the vertical marker line, or None when it is hidden."""
        if self.x < 0:
            return None
        low, high = self.y_range()
        return (self.x, low), (self.x, high)

    def render(self, path: str | Path) -> Path:
        """Draw the chart into an image file and return its path."""
        fig = Figure()
        ax = fig.add_subplot()
        if self.show_curve:
            ax.plot(self.x_data, self.y_data, color=self.line_color, linewidth=2)
        ax.set_xlabel(self.x_label)
        ax.set_ylabel(self.y_label)
        ax.tick_params(labelsize=12)
        ax.set_xlim(*self.x_range())
        ax.set_ylim(*self.y_range())
        line = self.marker()
        if line is not None:
            (x0, y0), (x1, y1) = line
            ax.plot([x0, x1], [y0, y1], color=Color.GREEN.value, linewidth=2)
        out = Path(path)
        fig.savefig(out)
        return out