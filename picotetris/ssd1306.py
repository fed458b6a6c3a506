"""Frame buffer and I2C command protocol for SSD1306 monochrome OLED controllers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

DEFAULT_ADDRESS = 0x3C
DEFAULT_WIDTH = 128
DEFAULT_HEIGHT = 64

COMMAND_PREFIX = 0x00
DATA_PREFIX = 0x40

PAGE_HEIGHT = 8
SET_PAGE_ADDRESS = 0xB0
SET_LOW_COLUMN = 0x00
SET_HIGH_COLUMN = 0x10

INIT_SEQUENCE: tuple[int, ...] = (
    0xAE,        # display off
    0x20, 0x00,  # horizontal addressing mode
    0xB0,        # page start address
    0xC8,        # COM output scan direction
    0x00,        # low column address
    0x10,        # high column address
    0x40,        # start line address
    0x81, 0x7F,  # contrast
    0xA1,        # segment re-map
    0xA6,        # normal display
    0xA8, 0x3F,  # multiplex ratio
    0xA4,        # output follows RAM
    0xD3, 0x00,  # display offset
    0xD5, 0x80,  # clock divide ratio
    0xD9, 0xF1,  # pre-charge period
    0xDA, 0x12,  # COM pins configuration
    0xDB, 0x40,  # VCOMH deselect level
    0x8D, 0x14,  # charge pump
    0xAF,        # display on
)


class Bus(Protocol):
    """Anything that can write a block of bytes to a device address."""

    def write(self, address: int, data: bytes) -> None: ...


@dataclass
class RecordingBus:
    """A bus that keeps every write it receives, in order."""

    writes: list[tuple[int, bytes]] = field(default_factory=list)

    def write(self, address: int, data: bytes) -> None:
        self.writes.append((address, bytes(data)))


class SSD1306:
    """An SSD1306 display with a local frame buffer organised in 8-pixel pages."""

    def __init__(
        self,
        bus: Bus,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        address: int = DEFAULT_ADDRESS,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("display dimensions must be positive")
        if height % PAGE_HEIGHT:
            raise ValueError(f"height must be a multiple of {PAGE_HEIGHT}")
        self.bus = bus
        self.width = width
        self.height = height
        self.address = address
        self.buffer = bytearray(width * height // PAGE_HEIGHT)

    @property
    def pages(self) -> int:
        return self.height // PAGE_HEIGHT

    def _command(self, cmd: int) -> None:
        self.bus.write(self.address, bytes((COMMAND_PREFIX, cmd)))

    def _data(self, data: bytes) -> None:
        self.bus.write(self.address, bytes((DATA_PREFIX,)) + bytes(data))

    def initialize(self) -> None:
        """Send the power-up command sequence and clear the frame buffer."""
        for cmd in INIT_SEQUENCE:
            self._command(cmd)
        self.clear()

    def clear(self) -> None:
        """Turn every pixel of the frame buffer off."""
        self.buffer[:] = bytes(len(self.buffer))

    def show(self) -> None:
        """Push the whole frame buffer to the display, one page at a time."""
        for page in range(self.pages):
            self._command(SET_PAGE_ADDRESS + page)
            self._command(SET_LOW_COLUMN)
            self._command(SET_HIGH_COLUMN)
            start = page * self.width
            self._data(self.buffer[start:start + self.width])

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def draw_pixel(self, x: int, y: int, color: bool) -> None:
        """Set or clear one pixel; coordinates outside the display are ignored."""
        if not self._in_bounds(x, y):
            return
        index = (y // PAGE_HEIGHT) * self.width + x
        mask = 1 << (y % PAGE_HEIGHT)
        if color:
            self.buffer[index] |= mask
        else:
            self.buffer[index] &= ~mask & 0xFF

    def get_pixel(self, x: int, y: int) -> bool:
        """Return whether a pixel is lit; outside the display nothing is lit."""
        if not self._in_bounds(x, y):
            return False
        index = (y // PAGE_HEIGHT) * self.width + x
        return bool(self.buffer[index] & (1 << (y % PAGE_HEIGHT)))

    def draw_rect(self, x: int, y: int, w: int, h: int, fill: bool) -> None:
        """Light a filled rectangle, or only its outline when fill is false."""
        for dx in range(w):
            for dy in range(h):
                edge = dx in (0, w - 1) or dy in (0, h - 1)
                if fill or edge:
                    self.draw_pixel(x + dx, y + dy, True)

    def fill_rect(self, x: int, y: int, w: int, h: int, color: bool) -> None:
        """Set every pixel of a rectangle to the given color."""
        for dx in range(w):
            for dy in range(h):
                self.draw_pixel(x + dx, y + dy, color)