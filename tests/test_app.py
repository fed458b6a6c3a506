import random

import pytest

from picotetris.app import (
    GAME_OVER_DELAY_MS,
    LOOP_DELAY_MS,
    RESET_DELAY_MS,
    Button,
    Controller,
    Variant,
)
from picotetris.game import Game
from picotetris.ssd1306 import SSD1306, RecordingBus

SINGLE = 7
T_SHAPE = 5


class FakeSignals:
    def __init__(self):
        self.calls = []

    def led_flash(self, duration_ms):
        self.calls.append(("flash", duration_ms))

    def buzzer_beep(self, duration_ms):
        self.calls.append(("beep", duration_ms))


def make(variant=Variant.BUZZER_AND_ROTATION, seed=1):
    display = SSD1306(RecordingBus())
    game = Game(random.Random(seed))
    signals = FakeSignals()
    controller = Controller(game, display, variant, signals)
    controller.start(0)
    return controller, signals


def place(controller, shape, x, y, rotation=0):
    game = controller.game
    game.shape, game.x, game.y, game.rotation = shape, x, y, rotation


def assert_display_matches(controller):
    occupied = controller.game.occupied_cells()
    board = controller.game.board
    for y in range(board.height):
        for x in range(board.width):
            lit = controller.display.get_pixel(x * 8 + 3, y * 8 + 3)
            assert lit == ((x, y) in occupied)


def test_update_before_start_raises():
    controller = Controller(Game(random.Random(0)), SSD1306(RecordingBus()))
    with pytest.raises(RuntimeError):
        controller.update(0, set())


def test_start_draws_the_spawned_piece():
    controller, _ = make()
    assert any(controller.display.buffer)
    assert_display_matches(controller)


def test_left_is_debounced():
    controller, _ = make()
    place(controller, SINGLE, 6, 0)
    controller.update(100, {Button.LEFT})
    assert controller.game.x == 6
    controller.update(101, {Button.LEFT})
    assert controller.game.x == 5
    controller.update(150, {Button.LEFT})
    assert controller.game.x == 5
    assert_display_matches(controller)


def test_plain_variant_has_longer_debounce():
    controller, _ = make(Variant.PLAIN)
    place(controller, SINGLE, 6, 0)
    controller.update(150, {Button.LEFT})
    assert controller.game.x == 6
    controller.update(151, {Button.LEFT})
    assert controller.game.x == 5


def test_left_takes_priority_over_right():
    controller, _ = make()
    place(controller, SINGLE, 6, 0)
    controller.update(101, {Button.LEFT, Button.RIGHT})
    assert controller.game.x == 5


def test_blocked_left_falls_through_to_right():
    controller, _ = make()
    place(controller, SINGLE, 0, 0)
    controller.update(101, {Button.LEFT, Button.RIGHT})
    assert controller.game.x == 1


def test_down_button_moves_piece_down():
    controller, _ = make()
    place(controller, SINGLE, 6, 0)
    controller.update(101, {Button.DOWN})
    assert controller.game.y == 1
    assert_display_matches(controller)


def test_rotation_only_in_rotation_variant():
    controller, _ = make()
    place(controller, T_SHAPE, 6, 0)
    controller.update(101, {Button.ROTATE})
    assert controller.game.rotation == 1

    plain, _ = make(Variant.PLAIN)
    place(plain, T_SHAPE, 6, 0)
    plain.update(151, {Button.ROTATE})
    assert plain.game.rotation == 0


def test_gravity_follows_fall_interval():
    controller, signals = make()
    place(controller, SINGLE, 6, 0)
    controller.update(1500, set())
    assert controller.game.y == 0
    assert controller.update(1501, set()) == LOOP_DELAY_MS
    assert controller.game.y == 1
    controller.update(3001, set())
    assert controller.game.y == 1
    controller.update(3002, set())
    assert controller.game.y == 2
    assert signals.calls == []
    assert_display_matches(controller)


def test_lock_beeps_and_flashes():
    controller, signals = make()
    place(controller, SINGLE, 6, 7)
    controller.update(1501, set())
    assert controller.game.board.is_filled(6, 7)
    assert controller.game.y == 0
    assert signals.calls == [("beep", 50), ("flash", 100)]


def test_lock_in_plain_variant_only_flashes():
    controller, signals = make(Variant.PLAIN)
    place(controller, SINGLE, 6, 7)
    controller.update(1501, set())
    assert signals.calls == [("flash", 100)]


def test_clearing_a_line_signals_again():
    controller, signals = make()
    board = controller.game.board
    board.rows[7] = [x != 6 for x in range(board.width)]
    place(controller, SINGLE, 6, 7)
    controller.update(1501, set())
    assert signals.calls == [("beep", 50), ("flash", 100), ("beep", 80), ("flash", 100)]
    assert not any(board.rows[7])


def fill_for_game_over(controller):
    board = controller.game.board
    for y in range(board.height):
        for x in range(board.width - 2):
            board.rows[y][x] = True
    place(controller, SINGLE, board.width - 2, board.height - 1)


def test_game_over_clears_screen_signals_once_and_resets_on_down():
    controller, signals = make()
    fill_for_game_over(controller)
    controller.update(1501, set())
    assert controller.game.game_over
    assert signals.calls == [("beep", 50), ("flash", 100)]

    bus = controller.display.bus
    bus.writes.clear()
    assert controller.update(1600, set()) == LOOP_DELAY_MS + GAME_OVER_DELAY_MS
    assert not any(controller.display.buffer)
    assert bus.writes
    assert signals.calls[2:] == [("beep", 300), ("flash", 300)]

    bus.writes.clear()
    controller.update(1700, set())
    assert len(signals.calls) == 4
    assert bus.writes == []

    delay = controller.update(1800, {Button.DOWN})
    assert delay == LOOP_DELAY_MS + GAME_OVER_DELAY_MS + RESET_DELAY_MS
    assert not controller.game.game_over
    assert not any(any(row) for row in controller.game.board.rows)
    assert_display_matches(controller)


def test_game_over_in_plain_variant_only_flashes():
    controller, signals = make(Variant.PLAIN)
    fill_for_game_over(controller)
    controller.update(1501, set())
    controller.update(1600, set())
    assert signals.calls == [("flash", 100), ("flash", 300)]


def test_game_over_signals_again_after_reset():
    controller, signals = make()
    controller.game.game_over = True
    controller.update(10, set())
    controller.update(20, {Button.DOWN})
    controller.game.game_over = True
    controller.update(30, set())
    assert signals.calls == [("beep", 300), ("flash", 300)] * 2