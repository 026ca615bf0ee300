"""Timestamped, colour-coded message log for the controller."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Union


class Color(str, Enum):
    """Colours used to mark console messages."""

    GREEN = "#3cb371"
    RED = "#cd5c5c"
    YELLOW = "#daa520"
    BLUE = "#1e90ff"


ColorLike = Union[Color, str]


@dataclass(frozen=True)
class ConsoleEntry:
    """One line written to the console."""

    timestamp: str
    text: str
    color: str

    def to_html(self) -> str:
        return (
            f"<code>{self.timestamp} | "
            f'<span style="white-space: pre-wrap; color: {self.color}">'
            f"{self.text}</span></code><br>"
        )

    def to_plain(self) -> str:
        return f"{self.timestamp} | {self.text}"


class Console:
    """An append-only log of messages with a timestamp and a colour."""

    def __init__(
        self,
        default_color: str = "#000000",
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.default_color = default_color
        self._clock = clock
        self._entries: list[ConsoleEntry] = []

    @property
    def entries(self) -> list[ConsoleEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def write(self, text: str, color: ColorLike | None = None) -> ConsoleEntry:
        """Append a message; without a colour the default text colour is used."""
        if color is None:
            hex_color = self.default_color
        elif isinstance(color, Color):
            hex_color = color.value
        else:
            hex_color = str(color)
        entry = ConsoleEntry(self._clock().strftime("%H:%M:%S"), text, hex_color)
        self._entries.append(entry)
        return entry

    def clear(self) -> None:
        self._entries.clear()

    def plain_text(self) -> str:
        return "\n".join(entry.to_plain() for entry in self._entries)

    def html(self) -> str:
        return "".join(entry.to_html() for entry in self._entries)

    def save(self, base_path: str | Path) -> tuple[Path, Path]:
        """Write `<base>.txt` (plain) and `<base>_colors.md` (HTML); return both paths."""
        base = str(base_path)
        plain_path = Path(base + ".txt")
        color_path = Path(base + "_colors.md")
        plain_path.write_text(self.plain_text(), encoding="utf-8")
        color_path.write_text(self.html(), encoding="utf-8")
        return plain_path, color_path