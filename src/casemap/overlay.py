"""Overlay synchronizer.

Decorates every case node of a rendered tree with its status glyph and
binds or unbinds the status-cycling click handler according to the current
selection. Safe to run any number of times against the same tree.
"""

import logging

from .labels import decorate, extract_case_id
from .render.tree import ClickEvent, ClickHandler, Tree, VisualElement
from .selection import Selection
from .status import StatusStore

logger = logging.getLogger(__name__)


class OverlaySynchronizer:
    """Applies a StatusStore and a Selection to a rendered Tree."""

    def __init__(self, store: StatusStore):
        self.store = store

    def apply(self, tree: Tree, selection: Selection) -> int:
        """Decorate case nodes and set their interactivity.

        Must only run after the tree's render completion signal.

        Returns:
            Number of decorated case nodes
        """
        if not tree.rendered:
            logger.warning("Tree not laid out yet, skipping status overlay")
            return 0

        interactive = selection.interactive
        decorated = 0
        for node in tree.walk():
            element = node.element
            if element is None or not element.has_text:
                continue

            canonical_text = node.content
            case_id = extract_case_id(canonical_text)
            if case_id is None:
                continue

            element.set_label(decorate(self.store.get(case_id), canonical_text))
            element.on_click(None)
            if interactive:
                element.interactive = True
                element.on_click(self._make_handler(case_id, canonical_text))
            else:
                element.interactive = False
            decorated += 1

        logger.debug(f"Decorated {decorated} case nodes (interactive={interactive})")
        return decorated

    def _make_handler(self, case_id: str, canonical_text: str) -> ClickHandler:
        def on_click(event: ClickEvent, element: VisualElement) -> None:
            event.stop_propagation()
            new_status = self.store.cycle(case_id)
            element.set_label(decorate(new_status, canonical_text))

        return on_click
