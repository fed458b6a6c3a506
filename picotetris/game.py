"""Falling-block game rules on a small grid."""

from __future__ import annotations

import random
from enum import Enum, auto
from typing import Protocol

GRID_WIDTH = 16
GRID_HEIGHT = 8
CELL_SIZE = 8
PIECE_SIZE = 4

# Each shape has four rotations; each rotation is a 4x4 bitmap with
# bit 15 at the top-left and bit 0 at the bottom-right.
TETROMINOES: tuple[tuple[int, int, int, int], ...] = (
    (0x0F00, 0x2222, 0x0F00, 0x2222),  # I
    (0x8E00, 0x6440, 0x0E20, 0x44C0),  # J
    (0x2E00, 0x4460, 0x0E80, 0xC440),  # L
    (0x6600, 0x6600, 0x6600, 0x6600),  # O
    (0x6C00, 0x4620, 0x6C00, 0x4620),  # S
    (0x4E00, 0x4640, 0x0E40, 0x4C40),  # T
    (0xC600, 0x2640, 0xC600, 0x2640),  # Z
    (0x8000, 0x8000, 0x8000, 0x8000),  # single block
    (0x4000, 0xE000, 0x4000, 0x0000),  # plus
    (0x8800, 0xC000, 0x8800, 0xC000),  # two blocks
)


def tetromino_cell(shape: int, rotation: int, x: int, y: int) -> bool:
    """Return whether cell (x, y) of a shape's 4x4 bitmap is filled."""
    bits = TETROMINOES[shape][rotation]
    return bool(bits & (0x8000 >> (y * PIECE_SIZE + x)))


def shape_cells(shape: int, rotation: int) -> list[tuple[int, int]]:
    """Return the filled (x, y) cells of a shape, row by row."""
    return [
        (x, y)
        for y in range(PIECE_SIZE)
        for x in range(PIECE_SIZE)
        if tetromino_cell(shape, rotation, x, y)
    ]


class Event(Enum):
    """What happened during one gravity step."""

    FELL = auto()
    LOCKED = auto()
    LINES_CLEARED = auto()
    GAME_OVER = auto()


class Display(Protocol):
    def clear(self) -> None: ...

    def fill_rect(self, x: int, y: int, w: int, h: int, color: bool) -> None: ...

    def show(self) -> None: ...


class Board:
    """The grid of placed blocks."""

    def __init__(self, width: int = GRID_WIDTH, height: int = GRID_HEIGHT) -> None:
        self.width = width
        self.height = height
        self.rows: list[list[bool]] = []
        self.reset()

    def _empty_row(self) -> list[bool]:
        return [False] * self.width

    def reset(self) -> None:
        """Empty every cell."""
        self.rows = [self._empty_row() for _ in range(self.height)]

    def is_filled(self, x: int, y: int) -> bool:
        """Return whether a cell holds a block; cells off the grid hold none."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return self.rows[y][x]
        return False

    def collides(self, x: int, y: int, shape: int, rotation: int) -> bool:
        """Return whether a piece at (x, y) hits a wall, the floor or a block.

        Cells above the top of the grid are free.
        """
        for px, py in shape_cells(shape, rotation):
            gx, gy = x + px, y + py
            if gx < 0 or gx >= self.width or gy >= self.height:
                return True
            if gy >= 0 and self.rows[gy][gx]:
                return True
        return False

    def lock(self, x: int, y: int, shape: int, rotation: int) -> None:
        """Place a piece's cells into the grid, dropping any that lie outside it."""
        for px, py in shape_cells(shape, rotation):
            gx, gy = x + px, y + py
            if 0 <= gx < self.width and 0 <= gy < self.height:
                self.rows[gy][gx] = True

    def clear_lines(self) -> int:
        """Remove full rows, shift the rows above down, and return how many went."""
        kept = [row for row in self.rows if not all(row)]
        cleared = self.height - len(kept)
        self.rows = [self._empty_row() for _ in range(cleared)] + kept
        return cleared


class Game:
    """A board plus the falling piece."""

    def __init__(
        self,
        rng: random.Random | None = None,
        width: int = GRID_WIDTH,
        height: int = GRID_HEIGHT,
    ) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.board = Board(width, height)
        self.shape = 0
        self.rotation = 0
        self.x = 0
        self.y = 0
        self.game_over = False
        self.reset()

    @property
    def spawn_x(self) -> int:
        return self.board.width // 2 - 2

    def reset(self) -> None:
        """Empty the board and spawn the first piece."""
        self.board.reset()
        self.game_over = False
        self.spawn()

    def spawn(self) -> bool:
        """Bring in a random piece at the top; return whether that ended the game."""
        self.shape = self.rng.randrange(len(TETROMINOES))
        self.rotation = 0
        self.x = self.spawn_x
        self.y = 0
        if self.board.collides(self.x, self.y, self.shape, self.rotation):
            self.game_over = True
        return self.game_over

    def _try_move(self, x: int, y: int, rotation: int) -> bool:
        if self.game_over or self.board.collides(x, y, self.shape, rotation):
            return False
        self.x, self.y, self.rotation = x, y, rotation
        return True

    def move_left(self) -> bool:
        return self._try_move(self.x - 1, self.y, self.rotation)

    def move_right(self) -> bool:
        return self._try_move(self.x + 1, self.y, self.rotation)

    def move_down(self) -> bool:
        return self._try_move(self.x, self.y + 1, self.rotation)

    def rotate(self) -> bool:
        return self._try_move(self.x, self.y, (self.rotation + 1) % 4)

    def fall(self) -> list[Event]:
        """Apply one step of gravity and report what happened."""
        if self.game_over:
            return []
        if self.move_down():
            return [Event.FELL]
        events = [Event.LOCKED]
        self.board.lock(self.x, self.y, self.shape, self.rotation)
        if self.board.clear_lines():
            events.append(Event.LINES_CLEARED)
        if self.spawn():
            events.append(Event.GAME_OVER)
        return events

    def occupied_cells(self) -> set[tuple[int, int]]:
        """Return every visible cell taken by the board or the falling piece."""
        cells = {
            (x, y)
            for y, row in enumerate(self.board.rows)
            for x, filled in enumerate(row)
            if filled
        }
        for px, py in shape_cells(self.shape, self.rotation):
            gx, gy = self.x + px, self.y + py
            if 0 <= gx < self.board.width and 0 <= gy < self.board.height:
                cells.add((gx, gy))
        return cells

    def draw(self, display: Display) -> None:
        """Paint the board and the falling piece and refresh the display."""
        display.clear()
        for x, y in sorted(self.occupied_cells(), key=lambda c: (c[1], c[0])):
            display.fill_rect(x * CELL_SIZE, y * CELL_SIZE, CELL_SIZE, CELL_SIZE, True)
        display.show()