"""Rendering surface: where positions and affordances are sent.

The core never reads anything back from a surface. The base class ignores
every call, so a surface overrides only what it draws.
"""

import logging

from ontomap.layout import Positions

logger = logging.getLogger(__name__)


class RenderSurface:
    """No-op surface; subclass and override the calls you render."""

    def apply_positions(self, positions: Positions) -> None:
        pass

    def set_router(self, router: str) -> None:
        pass

    def highlight(self, node_opacity: dict[str, float], edge_opacity: dict[tuple[str, str], float]) -> None:
        pass

    def reset_highlight(self) -> None:
        pass

    def show_tools(self, node_id: str) -> None:
        pass

    def clear_tools(self) -> None:
        pass

    def show_detail(self, label: str, text: str) -> None:
        pass

    def hide_detail(self) -> None:
        pass

    def notify(self, message: str) -> None:
        pass

    def set_viewport(self, scale: float, translate_x: float, translate_y: float) -> None:
        pass


class LoggingSurface(RenderSurface):
    """Headless surface that logs what a renderer would be asked to do."""

    def apply_positions(self, positions: Positions) -> None:
        logger.debug("Positions updated for %d nodes", len(positions))

    def set_router(self, router: str) -> None:
        logger.debug("Edge router: %s", router)

    def highlight(self, node_opacity: dict[str, float], edge_opacity: dict[tuple[str, str], float]) -> None:
        lit = sum(1 for v in node_opacity.values() if v == 1.0)
        logger.debug("Highlight %d of %d nodes", lit, len(node_opacity))

    def show_tools(self, node_id: str) -> None:
        logger.debug("Tools shown for %s", node_id)

    def show_detail(self, label: str, text: str) -> None:
        logger.info("%s: %s", label, text)

    def notify(self, message: str) -> None:
        logger.warning("%s", message)

    def reset_highlight(self) -> None:
        logger.debug("Highlight cleared")

    def clear_tools(self) -> None:
        logger.debug("Tools cleared")

    def hide_detail(self) -> None:
        logger.debug("Detail hidden")

    def set_viewport(self, scale: float, translate_x: float, translate_y: float) -> None:
        logger.debug("Viewport scale=%.2f translate=(%.1f, %.1f)", scale, translate_x, translate_y)
