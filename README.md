# picotetris

picotetris is a small falling-block puzzle game. It is played on a grid of
16 by 8 cells. Each cell is drawn as an 8 by 8 pixel square in a 128 by 64
monochrome frame buffer. The buffer is laid out the way an SSD1306 OLED
controller expects: eight pages, each page a row of bytes, and each byte one
column of 8 pixels.

There are ten pieces. The seven classic tetrominoes are joined by a single
block, a plus shape and a two-block bar. A new piece appears at the top
centre. Once every 1.5 seconds it drops one row. When it can drop no further
it locks in place, and any full rows are removed. The game ends when a new
piece has no room to appear.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Playing in a terminal

```
picotetris
```

This runs the game in the terminal with `curses`. The frame buffer is drawn as
text, two pixel rows to a line, so the terminal needs at least 32 lines and
128 columns to show the whole screen.

Keys:

| Key                     | Action            |
|-------------------------|-------------------|
| Left arrow or `a`       | move left         |
| Right arrow or `d`      | move right        |
| Down arrow or `s`       | move down         |
| Up arrow, `w` or space  | rotate            |
| `q`, `Q` or Esc         | quit              |

A held key counts as one press per debounce period. That period is 100 ms in
the `buzzer-rotation` variant and 150 ms in the `plain` variant. When a piece
locks, when lines are cleared and when the game ends, the LED is shown as
`LED *` on the line below the board. In the `buzzer-rotation` variant the
terminal bell also rings. After the game ends the screen goes blank, and
pressing down starts a new game.

Options:

- `--variant {buzzer-rotation,plain}`: the console build to play. The default
  is `buzzer-rotation`. The `plain` variant has no rotation and no buzzer.
- `--seed N`: a seed for the random choice of pieces.

## Using the library

- `picotetris.ssd1306`
  - `SSD1306(bus, width=128, height=64, address=0x3C)` is a display with a
    page-organised frame buffer (`buffer`, 1024 bytes at the default size).
    The height must be a multiple of 8. It provides `draw_pixel`, `get_pixel`,
    `draw_rect` (filled, or only the outline), `fill_rect` and `clear`. Pixels
    outside the display are ignored. `initialize()` sends the controller's
    power-up command sequence and clears the buffer. `show()` sends the buffer
    page by page. Each command and each data block goes to
    `bus.write(address, data)`, prefixed with `0x00` for a command or `0x40`
    for data.
  - `RecordingBus` keeps every `(address, data)` write in its `writes` list.
- `picotetris.game`
  - `tetromino_cell(shape, rotation, x, y)` and `shape_cells(shape, rotation)`
    read the 4x4 bit patterns of the pieces.
  - `Board` holds the locked cells. It has `collides`, `lock`, `clear_lines`
    (which returns the number of rows removed), `is_filled` and `reset`.
    Cells above the top of the grid never collide.
  - `Game(rng=None, width=16, height=8)` holds a board and the falling piece.
    `move_left`, `move_right`, `move_down` and `rotate` return whether the
    move was made. `fall()` applies one step of gravity and returns a list of
    `Event` values: `FELL`, `LOCKED`, `LINES_CLEARED` and `GAME_OVER`. There
    are also `spawn`, `reset`, `occupied_cells`, and `draw(display)`, which
    paints the board and the piece and calls `show()`.
- `picotetris.app`
  - `Controller(game, display, variant=Variant.BUZZER_AND_ROTATION, signals=None)`
    runs the game loop. Call `start(now_ms)` once. Then call
    `update(now_ms, pressed)` with the current time in milliseconds and the set
    of pressed `Button` values. It returns how many milliseconds to wait before
    the next call. Calling `update` before `start` raises `RuntimeError`. The
    optional `signals` object receives `led_flash(ms)` and `buzzer_beep(ms)`.
  - `Variant.BUZZER_AND_ROTATION` and `Variant.PLAIN` set the debounce time and
    say whether the buzzer and rotation are used.
- `picotetris.terminal`
  - `render_buffer(display)` returns the frame buffer as text made of block
    characters.
  - `parse_args(argv)` and `main(argv=None)` implement the `picotetris`
    command.

```python
import random

from picotetris.game import Game
from picotetris.ssd1306 import SSD1306, RecordingBus

bus = RecordingBus()
display = SSD1306(bus, 128, 64, 0x3C)
game = Game(random.Random(1), 16, 8)
game.move_left()
events = game.fall()
game.draw(display)
print(events, len(bus.writes))
```

## What it does not do

- No bus is included that reaches a real SSD1306 over I2C. The terminal
  command sends display traffic to a bus that only counts it. For real
  hardware you must supply your own object with a `write(address, data)`
  method.
- There is no score, level or speed-up. Pieces always fall once every 1.5
  seconds.
- The terminal command relies on `curses`, which the standard Python build
  for Windows does not include.