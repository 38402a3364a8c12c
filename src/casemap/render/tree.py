"""Render tree and its laid-out visual counterpart.

A Tree of RenderNodes is produced by transforming markdown. Rendering lays
out one VisualElement per node inside a RenderTarget; each node keeps a weak,
lookup-only reference to its element, set when layout completes.
"""

import asyncio
import weakref
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Optional


class ClickEvent:
    """Click delivered to a VisualElement and bubbled to its ancestors."""

    def __init__(self, target: "VisualElement"):
        self.target = target
        self.propagation_stopped = False
        self.handled_by: list["VisualElement"] = []

    def stop_propagation(self) -> None:
        """Keep the click from reaching ancestor elements."""
        self.propagation_stopped = True


ClickHandler = Callable[[ClickEvent, "VisualElement"], None]


class VisualElement:
    """Laid-out node: an optional text label plus at most one click handler."""

    def __init__(self, parent: Optional["VisualElement"] = None, label: str | None = None):
        """Initialize VisualElement.

        Args:
            parent: Enclosing element, None for the root
            label: Displayed text, None for structural-only elements
        """
        self.parent = parent
        self.label = label
        self.interactive = False
        self._click_handler: ClickHandler | None = None

    @property
    def has_text(self) -> bool:
        """Whether the element has a text label to decorate."""
        return self.label is not None

    @property
    def click_handler(self) -> ClickHandler | None:
        """Currently bound click handler."""
        return self._click_handler

    def on_click(self, handler: ClickHandler | None) -> None:
        """Bind a click handler, replacing any previous one. None unbinds."""
        self._click_handler = handler

    def set_label(self, text: str) -> None:
        self.label = text


@dataclass(eq=False)
class RenderNode:
    """Node produced by the markdown transform."""

    content: str
    depth: int = 0
    children: list["RenderNode"] = field(default_factory=list)
    _element_ref: weakref.ReferenceType | None = field(default=None, repr=False)

    @property
    def element(self) -> VisualElement | None:
        """Visual counterpart, None before layout or after the target is cleared."""
        if self._element_ref is None:
            return None
        return self._element_ref()

    def attach(self, element: VisualElement | None) -> None:
        """Set (or clear, with None) the back-reference to the visual element."""
        self._element_ref = weakref.ref(element) if element is not None else None

    def walk(self) -> Iterator["RenderNode"]:
        """Depth-first pre-order traversal."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(eq=False)
class Tree:
    """Transformed document."""

    root: RenderNode
    rendered: bool = False

    def walk(self) -> Iterator[RenderNode]:
        return self.root.walk()

    def __len__(self) -> int:
        return sum(1 for _ in self.walk())


class RenderTarget:
    """Surface that owns the visual elements of the tree shown in it."""

    def __init__(self) -> None:
        self.elements: list[VisualElement] = []
        self.tree: Tree | None = None

    def clear(self) -> None:
        """Drop all elements, invalidating back-references into them."""
        if self.tree is not None:
            self.tree.rendered = False
            for node in self.tree.walk():
                node.attach(None)
        self.elements = []
        self.tree = None

    def dispatch_click(self, element: VisualElement) -> ClickEvent:
        """Deliver a click to an element and bubble it up the ancestor chain."""
        event = ClickEvent(element)
        current: VisualElement | None = element
        while current is not None:
            handler = current.click_handler
            if handler is not None:
                event.handled_by.append(current)
                handler(event, current)
                if event.propagation_stopped:
                    break
            current = current.parent
        return event


class RenderCompletion:
    """Signal fired once a tree has been laid out and can be queried."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def done(self) -> bool:
        return self._event.is_set()

    def set(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()
