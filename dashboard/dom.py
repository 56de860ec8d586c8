"""Minimal in-memory document model the renderers draw into.

An :class:`Element` is a tag with attributes, CSS classes, inline style, children
and per-event handler lists. A :class:`Document` owns a ``body`` tree and looks
up *surfaces* (target elements) by id. Renderers replace a surface's children
wholesale on every call; clearing a surface releases the handlers registered on
the removed elements, so handler lifetime equals element lifetime.
"""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, TYPE_CHECKING

from dashboard.theme import SVG_NS

if TYPE_CHECKING:
    from dashboard.tooltip import TooltipService


SELF_CLOSING = {"line", "path", "circle", "rect", "stop", "meta", "br", "input"}


@dataclass
class PointerEvent:
    type: str
    client_x: float = 0.0
    client_y: float = 0.0
    target: Optional["Element"] = field(default=None, repr=False)


Handler = Callable[[PointerEvent], None]


def format_attr_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value == 0:
            return "0"
        return ("%.3f" % value).rstrip("0").rstrip(".")
    return str(value)


class Element:
    def __init__(
        self,
        tag: str,
        *,
        id: Optional[str] = None,
        class_name: Optional[str] = None,
        text: Optional[str] = None,
        **attrs: object,
    ) -> None:
        self.tag = tag
        self.attrs: Dict[str, str] = {}
        self.classes: List[str] = []
        self.style: Dict[str, str] = {}
        self.children: List[Element] = []
        self.parent: Optional[Element] = None
        self.text: Optional[str] = text
        self.inner_html: Optional[str] = None
        self._handlers: Dict[str, List[Handler]] = {}
        if id is not None:
            self.attrs["id"] = id
        if class_name:
            self.classes.extend(class_name.split())
        for name, value in attrs.items():
            self.set(name.rstrip("_").replace("_", "-"), value)

    def __repr__(self) -> str:
        ident = f"#{self.id}" if self.id else ""
        return f"<Element {self.tag}{ident} children={len(self.children)}>"

    @property
    def id(self) -> Optional[str]:
        return self.attrs.get("id")

    # ---------- attributes / classes / style ----------
    def set(self, name: str, value: object) -> "Element":
        self.attrs[name] = format_attr_value(value)
        return self

    def get(self, name: str) -> Optional[str]:
        return self.attrs.get(name)

    def add_class(self, name: str) -> None:
        if name not in self.classes:
            self.classes.append(name)

    def remove_class(self, name: str) -> None:
        if name in self.classes:
            self.classes.remove(name)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def set_style(self, name: str, value: object) -> "Element":
        self.style[name] = format_attr_value(value)
        return self

    # ---------- tree ----------
    def append(self, child: "Element") -> "Element":
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def clear(self) -> None:
        """Remove every child (and its handlers) plus any text/raw content."""
        for child in self.children:
            child._release()
        self.children = []
        self.text = None
        self.inner_html = None

    def _release(self) -> None:
        self.parent = None
        self._handlers.clear()
        for child in self.children:
            child._release()

    def set_text(self, text: str) -> None:
        self.clear()
        self.text = text

    def set_html(self, markup: str) -> None:
        self.clear()
        self.inner_html = markup

    def iter(self) -> Iterator["Element"]:
        yield self
        for child in self.children:
            yield from child.iter()

    def find_all(self, tag: Optional[str] = None, class_name: Optional[str] = None) -> List["Element"]:
        return [
            el
            for el in self.iter()
            if el is not self
            and (tag is None or el.tag == tag)
            and (class_name is None or el.has_class(class_name))
        ]

    def get_element_by_id(self, element_id: str) -> Optional["Element"]:
        for el in self.iter():
            if el.id == element_id:
                return el
        return None

    # ---------- events ----------
    def on(self, event_type: str, handler: Handler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def handlers(self, event_type: str) -> List[Handler]:
        return list(self._handlers.get(event_type, []))

    def dispatch(self, event: PointerEvent) -> int:
        """Invoke handlers registered for ``event.type``; returns how many ran."""
        event.target = self
        handlers = self.handlers(event.type)
        for handler in handlers:
            handler(event)
        return len(handlers)

    # ---------- output ----------
    def text_content(self) -> str:
        parts = [self.text or ""]
        parts.extend(child.text_content() for child in self.children)
        return "".join(parts)

    def _attr_html(self) -> str:
        attrs = dict(self.attrs)
        if self.classes:
            attrs["class"] = " ".join(self.classes)
        if self.style:
            attrs["style"] = "; ".join(f"{k}: {v}" for k, v in self.style.items())
        return "".join(f' {k}="{html.escape(v, quote=True)}"' for k, v in attrs.items())

    def to_html(self) -> str:
        body = ""
        if self.inner_html is not None:
            body = self.inner_html
        elif self.text is not None:
            body = html.escape(self.text, quote=False)
        body += "".join(child.to_html() for child in self.children)
        if not body and self.tag in SELF_CLOSING:
            return f"<{self.tag}{self._attr_html()} />"
        return f"<{self.tag}{self._attr_html()}>{body}</{self.tag}>"


def svg_element(tag: str, **attrs: object) -> Element:
    el = Element(tag, **attrs)
    if tag == "svg":
        el.set("xmlns", SVG_NS)
    return el


class Document:
    """A page: ``head`` styles/scripts plus a ``body`` tree of surfaces."""

    def __init__(self, title: str = "Sales Analytics Dashboard") -> None:
        self.title = title
        self.styles: List[str] = []
        self.scripts: List[str] = []
        self.body = Element("body")
        self._tooltip: Optional["TooltipService"] = None

    def get_element_by_id(self, element_id: str) -> Optional[Element]:
        return self.body.get_element_by_id(element_id)

    def query_all(self, class_name: str) -> List[Element]:
        return self.body.find_all(class_name=class_name)

    @property
    def tooltip(self) -> "TooltipService":
        if self._tooltip is None:
            from dashboard.tooltip import TooltipService

            self._tooltip = TooltipService(self)
        return self._tooltip

    def to_html(self) -> str:
        styles = "".join(f"<style>{s}</style>" for s in self.styles)
        scripts = "".join(f"<script>{s}</script>" for s in self.scripts)
        children = "".join(child.to_html() for child in self.body.children)
        return (
            "<!DOCTYPE html>"
            f'<html><head><meta charset="utf-8" /><title>{html.escape(self.title)}</title>{styles}</head>'
            f"<body{self.body._attr_html()}>{children}{scripts}</body></html>"
        )
