"""
Rectangular regions of the apron drawing (px).
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ViewArea:
    """
    Axis-aligned box in drawing coordinates.

    Used for the body's fillable bounding box (the pattern area), the logo
    box, and the adjustable strap slider.

    Attributes:
        x, y: Top-left corner
        width, height: Size; may be zero or negative for out-of-range designs
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @classmethod
    def centered_at(cls, cx: float, cy: float, width: float, height: float) -> 'ViewArea':
        """Box of the given size centred on (cx, cy)."""
        return cls(cx - width / 2, cy - height / 2, width, height)
