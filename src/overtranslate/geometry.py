"""Screen geometry value types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Rect:
    """Axis-aligned screen rectangle in pixels.

    Used both as the OCR capture region and as the overlay placement.
    Instances are immutable, so a Rect read from shared state can never be
    observed half-updated.
    """

    x: int
    y: int
    width: int
    height: int

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Rect size must be non-negative, got {self.width}x{self.height}"
            )

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def contains(self, other: "Rect") -> bool:
        """Check whether `other` lies entirely inside this rectangle."""
        return (
            other.x >= self.x
            and other.y >= self.y
            and other.right <= self.right
            and other.bottom <= self.bottom
        )

    def translated(self, dx: int, dy: int) -> "Rect":
        """Return a copy moved by (dx, dy)."""
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    def resized(self, dw: int, dh: int) -> "Rect":
        """Return a copy grown by (dw, dh), never shrinking below zero."""
        return Rect(self.x, self.y, max(0, self.width + dw), max(0, self.height + dh))

    def as_monitor(self) -> dict:
        """Convert to the monitor dict accepted by mss.grab()."""
        return {
            "left": self.x,
            "top": self.y,
            "width": self.width,
            "height": self.height,
        }

    def as_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: dict) -> "Rect":
        """Build from a {"x", "y", "width", "height"} mapping."""
        return cls(
            x=int(data["x"]),
            y=int(data["y"]),
            width=int(data["width"]),
            height=int(data["height"]),
        )

    @classmethod
    def parse(cls, value: str) -> "Rect":
        """Parse an "X,Y,W,H" string (CLI syntax)."""
        parts = [p.strip() for p in value.split(",")]
        if len(parts) != 4:
            raise ValueError(f"expected X,Y,W,H, got {value!r}")
        x, y, width, height = (int(p) for p in parts)
        return cls(x, y, width, height)

    def __str__(self) -> str:
        return f"({self.x},{self.y}) {self.width}x{self.height}"
