"""
Current position of the draggable overlay.
"""

from typing import Tuple


class OverlayPosition:
    """Pure (x, y) holder, updated on every drag move."""

    def __init__(self, x: int = 0, y: int = 0):
        self.x = int(x)
        self.y = int(y)

    def update(self, x: int, y: int):
        self.x = int(x)
        self.y = int(y)

    def current(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def __repr__(self):
        return f"OverlayPosition({self.x}, {self.y})"
