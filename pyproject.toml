[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "picotetris"
version = "0.1.0"
description = "A small falling-block puzzle game on a 16x8 grid, drawn through an SSD1306-style frame buffer"
requires-python = ">=3.10"
dependencies = []
keywords = ["tetris", "puzzle", "game", "ssd1306", "oled", "framebuffer", "curses"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Environment :: Console :: Curses",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Puzzle Games",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
picotetris = "picotetris.terminal:main"

[tool.hatch.build.targets.wheel]
packages = ["picotetris"]

[tool.pytest.ini_options]
addopts = "-ra"
