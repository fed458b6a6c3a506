"""Play the game in a terminal, with the OLED frame buffer drawn as text."""

from __future__ import annotations

import argparse
import curses
import locale
import random
import time
from collections.abc import Sequence

from picotetris.app import Button, Controller, Variant
from picotetris.game import Game
from picotetris.ssd1306 import SSD1306

_BLANK = " "
_UPPER = "\u2580"
_LOWER = "\u2584"
_FULL = "\u2588"

_KEYS: dict[int, Button] = {
    curses.KEY_LEFT: Button.LEFT,
    ord("a"): Button.LEFT,
    curses.KEY_RIGHT: Button.RIGHT,
    ord("d"): Button.RIGHT,
    curses.KEY_DOWN: Button.DOWN,
    ord("s"): Button.DOWN,
    curses.KEY_UP: Button.ROTATE,
    ord("w"): Button.ROTATE,
    ord(" "): Button.ROTATE,
}
_QUIT_KEYS = {ord("q"), ord("Q"), 27}


def render_buffer(display: SSD1306) -> str:
    """Draw a display's frame buffer as text, two pixel rows per line."""
    glyphs = {
        (False, False): _BLANK,
        (True, False): _UPPER,
        (False, True): _LOWER,
        (True, True): _FULL,
    }
    lines = []
    for top in range(0, display.height, 2):
        lines.append(
            "".join(
                glyphs[display.get_pixel(x, top), display.get_pixel(x, top + 1)]
                for x in range(display.width)
            )
        )
    return "\n".join(lines)


def _variant(label: str) -> Variant:
    for variant in Variant:
        if variant.label == label:
            return variant
    raise argparse.ArgumentTypeError(f"unknown variant: {label}")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse the command line."""
    parser = argparse.ArgumentParser(
        prog="picotetris",
        description="Falling-block puzzle drawn on a simulated 128x64 OLED.",
    )
    parser.add_argument(
        "--variant",
        type=_variant,
        default=Variant.BUZZER_AND_ROTATION,
        metavar="{" + ",".join(v.label for v in Variant) + "}",
        help="console build to emulate (default: %(default)s)",
    )
    parser.add_argument("--seed", type=int, default=None, help="random seed for pieces")
    return parser.parse_args(argv)


class _CountingBus:
    """A bus with no device behind it that tallies the traffic sent to it."""

    def __init__(self) -> None:
        self.transfers = 0
        self.bytes_written = 0

    def write(self, address: int, data: bytes) -> None:
        self.transfers += 1
        self.bytes_written += len(data)


class _TerminalSignals:
    """Shows the LED on a status line and rings the terminal bell."""

    def __init__(self, screen: curses.window, status_row: int) -> None:
        self.screen = screen
        self.status_row = status_row

    def _status(self, text: str) -> None:
        try:
            self.screen.addstr(self.status_row, 0, text)
            self.screen.clrtoeol()
        except curses.error:
            pass
        self.screen.refresh()

    def led_flash(self, duration_ms: int) -> None:
        self._status("LED *")
        time.sleep(duration_ms / 1000)
        self._status("")

    def buzzer_beep(self, duration_ms: int) -> None:
        curses.beep()
        time.sleep(duration_ms / 1000)


def _now_ms() -> float:
    return time.monotonic() * 1000


def _paint(screen: curses.window, frame: str) -> None:
    for row, line in enumerate(frame.split("\n")):
        try:
            screen.addstr(row, 0, line)
        except curses.error:
            pass
    screen.refresh()


def _run(screen: curses.window, args: argparse.Namespace) -> None:
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    screen.nodelay(True)
    screen.keypad(True)

    display = SSD1306(_CountingBus())
    game = Game(random.Random(args.seed))
    signals = _TerminalSignals(screen, display.height // 2)
    controller = Controller(game, display, args.variant, signals)
    controller.start(_now_ms())

    last_frame = None
    while True:
        pressed: set[Button] = set()
        while (key := screen.getch()) != -1:
            if key in _QUIT_KEYS:
                return
            button = _KEYS.get(key)
            if button is not None:
                pressed.add(button)
        delay = controller.update(_now_ms(), pressed)
        frame = render_buffer(display)
        if frame != last_frame:
            _paint(screen, frame)
            last_frame = frame
        time.sleep(delay / 1000)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the game in the terminal until the player quits."""
    args = parse_args(argv)
    locale.setlocale(locale.LC_ALL, "")
    try:
        curses.wrapper(_run, args)
    except KeyboardInterrupt:
        pass
    return 0