"""Pan/zoom state owned by the interaction controller."""

from dataclasses import dataclass

MIN_SCALE = 0.2
MAX_SCALE = 5.0


@dataclass
class Viewport:
    """Screen = canvas * scale + translate."""
    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0

    def zoom(self, delta: float, focal_x: float = 0.0, focal_y: float = 0.0) -> None:
        """Add `delta` to the scale (clamped), keeping the canvas point under the focal point fixed."""
        next_scale = max(MIN_SCALE, min(MAX_SCALE, self.scale + delta))
        canvas_x, canvas_y = self.to_canvas(focal_x, focal_y)
        self.scale = next_scale
        # Shift so the same canvas point lands back under the focal point
        screen_x, screen_y = self.to_screen(canvas_x, canvas_y)
        self.translate_x += focal_x - screen_x
        self.translate_y += focal_y - screen_y

    def pan(self, dx: float, dy: float) -> None:
        self.translate_x += dx
        self.translate_y += dy

    def to_canvas(self, screen_x: float, screen_y: float) -> tuple[float, float]:
        return (
            (screen_x - self.translate_x) / self.scale,
            (screen_y - self.translate_y) / self.scale,
        )

    def to_screen(self, canvas_x: float, canvas_y: float) -> tuple[float, float]:
        return (
            canvas_x * self.scale + self.translate_x,
            canvas_y * self.scale + self.translate_y,
        )
