"""
Page Element Data Classes.

The layout stages do not draw. They append positioned elements to
``PageLayout`` objects, and the encoder turns the finished pages into
PDF drawing calls. Keeping the display list in plain data lets the
pagination be inspected without parsing the PDF back.

Author: ML Engineering Team
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from PIL import Image

Color = Tuple[int, int, int]


@dataclass(frozen=True)
class TextElement:
    """
    A single line of text.

    ``x`` is the left edge for ``align="left"`` and the right edge for
    ``align="right"``; ``y`` is the baseline.
    """
    text: str
    x: float
    y: float
    font: str
    size: float
    align: str = "left"
    color: Color = (0, 0, 0)
    role: str = ""


@dataclass(frozen=True)
class RectElement:
    """A rectangle with optional fill and stroke; ``y`` is the top edge."""
    x: float
    y: float
    width: float
    height: float
    fill: Optional[Color] = None
    stroke: Optional[Color] = None
    role: str = ""

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True, eq=False)
class ImageElement:
    """A raster image stretched into the given box; ``y`` is the top edge."""
    image: Image.Image
    x: float
    y: float
    width: float
    height: float
    role: str = "logo"


@dataclass
class PageLayout:
    """
    Everything drawn on one page, in drawing order.

    Attributes:
        number: 1-based page number
        elements: Positioned elements
    """
    number: int
    elements: List[object] = field(default_factory=list)

    def add(self, element) -> None:
        self.elements.append(element)

    def texts(self, role: Optional[str] = None) -> List[TextElement]:
        """Text elements on the page, optionally filtered by role."""
        return [
            e for e in self.elements
            if isinstance(e, TextElement) and (role is None or e.role == role)
        ]

    @property
    def images(self) -> List[ImageElement]:
        return [e for e in self.elements if isinstance(e, ImageElement)]

    def rects(self, role: Optional[str] = None) -> List[RectElement]:
        return [
            e for e in self.elements
            if isinstance(e, RectElement) and (role is None or e.role == role)
        ]

    def __repr__(self) -> str:
        return f"PageLayout(number={self.number}, elements={len(self.elements)})"
