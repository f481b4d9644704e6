# core/progress_renderer.py
import sys
from dataclasses import dataclass
from typing import Iterator, TextIO
from util.enums import Color
from util.functions import clamp

HIDE_CURSOR = "\033[?25l"
SHOW_CURSOR = "\033[?25h"
CLEAR_DOWN = "\033[J"


def rgb(hex_color: str) -> tuple[int, int, int]:
    h = hex_color.lstrip("#")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def fg(color: tuple[int, int, int]) -> str:
    return "\033[38;2;%d;%d;%dm" % color


@dataclass(frozen=True)
class RenderStyle:
    """
    Everything the bar needs to know about its looks. Passed in explicitly
    so two renderers never share hidden state.
    """

    padding: int = 2
    max_width: int = 80
    full_rune: str = "█"
    empty_rune: str = "░"
    gradient_start: str = "#5A56E0"
    gradient_end: str = "#EE6FF8"
    empty_color: str = "#606060"
    help_color: str = "#626262"
    help_text: str = "Press any key to quit"
    show_percentage: bool = True
    frames: int = 12
    color: bool = True


class ProgressRenderer:
    def __init__(self, style: RenderStyle | None = None) -> None:
        self.style = style or RenderStyle()
        self.width = self.style.max_width
        self._target = 0.0
        self._shown = 0.0

    @property
    def percent(self) -> float:
        return self._target

    @property
    def shown(self) -> float:
        return self._shown

    def set_percent(self, value: float) -> Iterator[str]:
        """
        Set a new target and return the lazy frames that ease the bar
        from where it is now to the target. The last frame lands on it.
        """
        self._target = clamp(value)
        return self._animate(self._shown, self._target)

    def _animate(self, start: float, end: float) -> Iterator[str]:
        steps = max(1, self.style.frames)
        for i in range(1, steps + 1):
            t = i / steps
            eased = 1 - (1 - t) ** 3
            self._shown = end if i == steps else start + (end - start) * eased
            yield self.view()

    def finish(self) -> str:
        self._shown = self._target
        return self.view()

    def resize(self, terminal_width: int) -> None:
        w = terminal_width - self.style.padding * 2 - 4
        self.width = max(0, min(w, self.style.max_width))

    def bar(self) -> str:
        s = self.style
        label = f" {self._shown * 100:3.0f}%" if s.show_percentage else ""
        cells = max(0, self.width - len(label))
        filled = int(round(cells * self._shown))
        empty = cells - filled
        if not s.color:
            return s.full_rune * filled + s.empty_rune * empty + label

        start, end = rgb(s.gradient_start), rgb(s.gradient_end)
        out = []
        for i in range(filled):
            t = i / max(1, cells - 1)
            cell = tuple(int(round(a + (b - a) * t)) for a, b in zip(start, end))
            out.append(fg(cell) + s.full_rune)
        out.append(fg(rgb(s.empty_color)) + s.empty_rune * empty)
        out.append(str(Color.RESET) + label)
        return "".join(out)

    def help(self) -> str:
        s = self.style
        if not s.color:
            return s.help_text
        return fg(rgb(s.help_color)) + s.help_text + str(Color.RESET)

    def view(self) -> str:
        pad = " " * self.style.padding
        return "\n" + pad + self.bar() + "\n\n" + pad + self.help()


class Screen:
    """Redraws a multi-line view in place on a text stream."""

    def __init__(self, stream: TextIO | None = None, ansi: bool = True) -> None:
        self._stream = stream or sys.stdout
        self._ansi = ansi
        self._lines = 0

    def draw(self, view: str) -> None:
        out = []
        if self._ansi:
            if self._lines == 0:
                out.append(HIDE_CURSOR)
            else:
                if self._lines > 1:
                    out.append(f"\033[{self._lines - 1}A")
                out.append("\r" + CLEAR_DOWN)
        elif self._lines:
            out.append("\n")
        out.append(view)
        self._stream.write("".join(out))
        self._stream.flush()
        self._lines = view.count("\n") + 1

    def close(self) -> None:
        if self._lines:
            self._stream.write("\n")
        if self._ansi:
            self._stream.write(SHOW_CURSOR)
        self._stream.flush()
        self._lines = 0
