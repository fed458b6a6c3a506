"""A small falling-block puzzle game drawn through an SSD1306-style frame buffer."""

__version__ = "0.1.0"
__all__ = ["ssd1306", "game", "app", "terminal"]