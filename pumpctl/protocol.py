"""Gradient protocol: piecewise-linear concentration ramps sampled at a fixed step."""

from __future__ import annotations

from typing import Iterable, Sequence


class Protocol:
    """Expands segments of `[duration_min, start, end]` into sampled x/y curves."""

    def __init__(self, dt: float = 0.5) -> None:
        if dt <= 0:
            raise ValueError("time step must be positive")
        self._dt = float(dt)
        self.x_values: list[float] = []
        self.y_values: list[float] = []
        self._segments: list[list[float]] = []

    @property
    def dt(self) -> float:
        """Sampling interval in seconds."""
        return self._dt

    @dt.setter
    def dt(self, value: float) -> None:
        if value <= 0:
            raise ValueError("time step must be positive")
        self._dt = float(value)
        self.generate(self._segments)

    @property
    def segments(self) -> list[list[float]]:
        return [list(seg) for seg in self._segments]

    def generate(self, segments: Iterable[Sequence[float]]) -> None:
        """Rebuild the curves from segments; an empty list leaves everything unchanged.

        Segments without exactly three values are skipped.
        """
        segs = [list(seg) for seg in segments]
        if not segs:
            return
        xs: list[float] = []
        ys: list[float] = []
        total_time = 0.0
        for seg in segs:
            if len(seg) != 3:
                continue
            duration, start, end = (float(v) for v in seg)
            x0, x1 = total_time, total_time + duration
            steps = int((duration * 60.0) / self._dt)
            if steps <= 0:
                raise ValueError(
                    f"segment of {duration} min is shorter than one time step"
                )
            span = x1 - x0
            for i in range(steps + 1):
                t = x0 + i * span / steps
                xs.append(t)
                ys.append(start + ((t - x0) / span) * (end - start))
            total_time += duration
        self._segments = segs
        self.x_values = xs
        self.y_values = ys

    def clear(self) -> None:
        self.x_values = []
        self.y_values = []
        self._segments = []