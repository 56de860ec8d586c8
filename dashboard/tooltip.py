from __future__ import annotations

import logging
from typing import Optional

from dashboard.dom import Document, Element, PointerEvent
from dashboard.theme import TOOLTIP_OFFSET

logger = logging.getLogger(__name__)

TOOLTIP_ID = "tooltip"


class TooltipService:
    """The single hover overlay of a document.

    The overlay element is created on the first :meth:`show` and appended to the
    document body; later calls reuse it, so the last hover wins. Obtain the
    instance through ``document.tooltip`` to keep one per document.
    """

    def __init__(self, document: Document) -> None:
        self.document = document
        self._element: Optional[Element] = None

    @property
    def element(self) -> Optional[Element]:
        return self._element

    @property
    def visible(self) -> bool:
        return self._element is not None and self._element.has_class("visible")

    def _ensure_element(self) -> Element:
        if self._element is None:
            existing = self.document.get_element_by_id(TOOLTIP_ID)
            if existing is None:
                existing = self.document.body.append(Element("div", id=TOOLTIP_ID, class_name="tooltip"))
                logger.debug("Created tooltip overlay")
            self._element = existing
        return self._element

    def show(self, event: PointerEvent, markup: str) -> None:
        el = self._ensure_element()
        el.set_html(markup)
        el.add_class("visible")
        el.set_style("left", f"{event.client_x + TOOLTIP_OFFSET:g}px")
        el.set_style("top", f"{event.client_y + TOOLTIP_OFFSET:g}px")

    def hide(self, event: Optional[PointerEvent] = None) -> None:
        if self._element is not None:
            self._element.remove_class("visible")
