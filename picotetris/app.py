"""Game loop control: buttons, debouncing, gravity timing and signals."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum, auto
from typing import Protocol

from picotetris.game import Event, Game
from picotetris.ssd1306 import SSD1306

FALL_INTERVAL_MS = 1500
LOOP_DELAY_MS = 10
GAME_OVER_DELAY_MS = 100
RESET_DELAY_MS = 300

LOCK_BEEP_MS = 50
LOCK_FLASH_MS = 100
CLEAR_BEEP_MS = 80
CLEAR_FLASH_MS = 100
GAME_OVER_BEEP_MS = 300
GAME_OVER_FLASH_MS = 300


class Button(Enum):
    """The physical buttons of the console."""

    LEFT = auto()
    RIGHT = auto()
    DOWN = auto()
    ROTATE = auto()


class Variant(Enum):
    """Hardware builds of the console, which differ in features and debounce."""

    BUZZER_AND_ROTATION = ("buzzer-rotation", 100, True, True)
    PLAIN = ("plain", 150, False, False)

    def __init__(
        self, label: str, debounce_ms: int, has_buzzer: bool, has_rotation: bool
    ) -> None:
        self.label = label
        self.debounce_ms = debounce_ms
        self.has_buzzer = has_buzzer
        self.has_rotation = has_rotation


class _Signals(Protocol):
    def led_flash(self, duration_ms: int) -> None: ...

    def buzzer_beep(self, duration_ms: int) -> None: ...


class Controller:
    """Drives a game from button states and a millisecond clock."""

    def __init__(
        self,
        game: Game,
        display: SSD1306,
        variant: Variant = Variant.BUZZER_AND_ROTATION,
        signals: _Signals | None = None,
    ) -> None:
        self.game = game
        self.display = display
        self.variant = variant
        self.signals = signals
        self.fall_interval_ms = FALL_INTERVAL_MS
        self.needs_redraw = True
        self.game_over_displayed = False
        self.game_over_signalled = False
        self._last_fall: float | None = None
        self._last_input: float | None = None

    def start(self, now_ms: float) -> None:
        """Begin a fresh game with the clocks set to now."""
        self._last_fall = now_ms
        self._reset()
        self._last_input = now_ms
        self.needs_redraw = True
        self.game_over_displayed = False

    def _reset(self) -> None:
        self.game.reset()
        self.game_over_signalled = False
        self.game.draw(self.display)

    def update(self, now_ms: float, pressed: Iterable[Button]) -> int:
        """Run one loop step and return how many milliseconds to wait before the next."""
        if self._last_fall is None or self._last_input is None:
            raise RuntimeError("start() must be called before update()")
        buttons = frozenset(pressed)
        if self.game.game_over:
            return self._update_game_over(buttons)

        self.game_over_displayed = False
        if now_ms - self._last_input > self.variant.debounce_ms and self._handle_input(buttons):
            self._last_input = now_ms
            self.needs_redraw = True

        if now_ms - self._last_fall > self.fall_interval_ms:
            self._signal(self.game.fall())
            self.needs_redraw = True
            self._last_fall = now_ms

        if self.needs_redraw:
            self.game.draw(self.display)
            self.needs_redraw = False
        return LOOP_DELAY_MS

    def _handle_input(self, buttons: frozenset[Button]) -> bool:
        if Button.LEFT in buttons and self.game.move_left():
            return True
        if Button.RIGHT in buttons and self.game.move_right():
            return True
        if Button.DOWN in buttons and self.game.move_down():
            return True
        if self.variant.has_rotation and Button.ROTATE in buttons:
            return self.game.rotate()
        return False

    def _beep(self, duration_ms: int) -> None:
        if self.variant.has_buzzer and self.signals is not None:
            self.signals.buzzer_beep(duration_ms)

    def _flash(self, duration_ms: int) -> None:
        if self.signals is not None:
            self.signals.led_flash(duration_ms)

    def _signal(self, events: list[Event]) -> None:
        if Event.LOCKED in events:
            self._beep(LOCK_BEEP_MS)
            self._flash(LOCK_FLASH_MS)
        if Event.LINES_CLEARED in events:
            self._beep(CLEAR_BEEP_MS)
            self._flash(CLEAR_FLASH_MS)

    def _update_game_over(self, buttons: frozenset[Button]) -> int:
        delay = GAME_OVER_DELAY_MS + LOOP_DELAY_MS
        if not self.game_over_displayed:
            self.display.clear()
            self.display.show()
            self.game_over_displayed = True
        if not self.game_over_signalled:
            self._beep(GAME_OVER_BEEP_MS)
            self._flash(GAME_OVER_FLASH_MS)
            self.game_over_signalled = True
        if Button.DOWN in buttons:
            self._reset()
            delay += RESET_DELAY_MS
        return delay