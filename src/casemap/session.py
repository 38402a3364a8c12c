"""Session orchestration and mode control.

A selection change (version or user) runs the full load pipeline: document
and status file are fetched concurrently, the document is transformed and
rendered, and the overlay is applied once the render completion signal
fires. Toggling edit mode only re-applies the overlay to the tree already
on screen, so unsaved edits are kept.
"""

import asyncio

from .client import ContentClient
from .errors import DocumentLoadError
from .gateway import SaveGateway, SaveResult
from .labels import extract_case_id
from .overlay import OverlaySynchronizer
from .render.markdown import MarkdownRenderer
from .render.tree import RenderNode, RenderTarget, Tree
from .selection import Selection
from .shared.logging import get_logger
from .status import DEFAULT_USER, StatusStore, StatusValue

logger = get_logger(__name__)

LOAD_FAILED_TEMPLATE = "# Loading Failed\n\n- {message}"


class CaseMapSession:
    """Owns the selection, the status store and the rendered tree."""

    def __init__(
        self,
        client: ContentClient,
        gateway: SaveGateway,
        version: str,
        user: str = DEFAULT_USER,
        renderer: MarkdownRenderer | None = None,
        target: RenderTarget | None = None,
    ):
        self.client = client
        self.gateway = gateway
        self.renderer = renderer or MarkdownRenderer()
        self.target = target or RenderTarget()
        self.store = StatusStore(client)
        self.overlay = OverlaySynchronizer(self.store)
        self.selection = Selection(version=version, user=user)
        self.tree: Tree | None = None
        self._generation = 0
        self._update_trigger()

    async def load(self) -> Tree | None:
        """Fetch, render and decorate the current selection.

        A load overtaken by a newer one is discarded.

        Returns:
            The rendered tree, or the current tree if this load was stale
        """
        self._generation += 1
        generation = self._generation
        version, user = self.selection.version, self.selection.user
        logger.info("loading test plan", version=version, user=user)

        document, statuses = await asyncio.gather(
            self._fetch_document(version),
            self.store.fetch(version, user),
        )
        if generation != self._generation:
            logger.debug("discarding stale fetch", version=version, user=user)
            return self.tree

        self.store.replace(version, user, statuses)
        tree = self.renderer.transform(document)
        completion = self.renderer.render_into(self.target, tree)
        await completion.wait()
        if generation != self._generation:
            logger.debug("discarding stale render", version=version, user=user)
            return self.tree

        self.tree = tree
        decorated = self.overlay.apply(tree, self.selection)
        logger.info("test plan ready", version=version, user=user, cases=decorated)
        return tree

    async def _fetch_document(self, version: str) -> str:
        try:
            return await self.client.fetch_document(version)
        except DocumentLoadError as e:
            logger.error("document load failed", version=version, error=e.message)
            return LOAD_FAILED_TEMPLATE.format(message=e.message)

    async def select_version(self, version: str) -> Tree | None:
        """Switch version and reload."""
        self.selection.version = version
        return await self.load()

    async def select_user(self, user: str) -> Tree | None:
        """Switch tester, leave edit mode and reload."""
        self.selection.user = user
        self.selection.edit_mode = False
        self._update_trigger()
        return await self.load()

    def set_edit_mode(self, enabled: bool) -> int:
        """Toggle edit mode and re-apply the overlay without reloading.

        Returns:
            Number of decorated case nodes
        """
        self.selection.edit_mode = enabled
        self._update_trigger()
        if self.tree is None:
            return 0
        return self.overlay.apply(self.tree, self.selection)

    async def save(self) -> SaveResult:
        """Send the current statuses to the host."""
        return await self.gateway.save(
            self.selection.version, self.selection.user, self.store.to_json()
        )

    def _update_trigger(self) -> None:
        self.gateway.trigger.visible = self.selection.interactive

    def case_nodes(self) -> list[tuple[str, RenderNode]]:
        """(case id, node) pairs of the current tree, in document order."""
        if self.tree is None:
            return []
        pairs = []
        for node in self.tree.walk():
            case_id = extract_case_id(node.content)
            if case_id is not None:
                pairs.append((case_id, node))
        return pairs

    def click(self, case_id: str) -> StatusValue | None:
        """Click the first visible node labelled with a case id.

        Returns:
            The case's status after the click, or None if nothing handled it
        """
        for node_case_id, node in self.case_nodes():
            element = node.element
            if node_case_id != case_id or element is None:
                continue
            event = self.target.dispatch_click(element)
            if not event.handled_by:
                return None
            return self.store.get(case_id)
        return None

    def counts(self) -> dict[StatusValue, int]:
        """Status tally over the cases in the current tree."""
        case_ids = list(dict.fromkeys(case_id for case_id, _ in self.case_nodes()))
        return self.store.counts(case_ids)
