"""Markdown render adapter.

Transforms a test plan document into a Tree (headings nest by level, list
items nest under their heading or parent item) and lays it out into a
RenderTarget asynchronously.
"""

import asyncio
import logging

from markdown_it import MarkdownIt
from markdown_it.token import Token

from .tree import RenderCompletion, RenderNode, RenderTarget, Tree, VisualElement

logger = logging.getLogger(__name__)


class _ItemFrame:
    """Open list item while walking the token stream."""

    def __init__(self, node: RenderNode):
        self.node = node
        self.has_text = False


class MarkdownRenderer:
    """Render adapter backed by markdown-it-py."""

    def __init__(self) -> None:
        self._md = MarkdownIt("commonmark")

    def transform(self, markdown: str) -> Tree:
        """Build a Tree from markdown text.

        When the document has a single top-level node it becomes the root;
        otherwise a root with blank content holds the top-level nodes.
        """
        tokens = self._md.parse(markdown)
        root = RenderNode(content="")
        headings: list[tuple[int, RenderNode]] = [(0, root)]
        items: list[_ItemFrame] = []
        pending_heading: int | None = None

        for token in tokens:
            if token.type == "heading_open" and not items:
                pending_heading = int(token.tag[1:])
            elif token.type == "list_item_open":
                parent = items[-1].node if items else headings[-1][1]
                node = RenderNode(content="")
                parent.children.append(node)
                items.append(_ItemFrame(node))
            elif token.type == "list_item_close":
                items.pop()
            elif token.type == "inline":
                if pending_heading is not None:
                    self._add_heading(headings, pending_heading, token)
                    pending_heading = None
                else:
                    self._add_text(headings, items, token)

        if len(root.children) == 1:
            root = root.children[0]
        self._assign_depth(root, 0)
        return Tree(root=root)

    @staticmethod
    def _add_heading(headings: list[tuple[int, RenderNode]], level: int, token: Token) -> None:
        while headings[-1][0] >= level:
            headings.pop()
        node = RenderNode(content=token.content.strip())
        headings[-1][1].children.append(node)
        headings.append((level, node))

    @staticmethod
    def _add_text(
        headings: list[tuple[int, RenderNode]], items: list[_ItemFrame], token: Token
    ) -> None:
        text = token.content.strip()
        if not text:
            return
        if items and not items[-1].has_text:
            items[-1].node.content = text
            items[-1].has_text = True
            return
        parent = items[-1].node if items else headings[-1][1]
        parent.children.append(RenderNode(content=text))

    def _assign_depth(self, node: RenderNode, depth: int) -> None:
        node.depth = depth
        for child in node.children:
            self._assign_depth(child, depth + 1)

    def render_into(self, target: RenderTarget, tree: Tree) -> RenderCompletion:
        """Schedule layout of a tree into a target.

        Layout runs on a later event loop turn. Until the returned signal
        fires, the tree has no visual elements.
        """
        target.clear()
        target.tree = tree
        completion = RenderCompletion()
        asyncio.get_running_loop().call_soon(self._layout, target, tree, completion)
        return completion

    def _layout(self, target: RenderTarget, tree: Tree, completion: RenderCompletion) -> None:
        if target.tree is not tree:
            # Superseded by a newer render before layout ran
            logger.debug("Skipping layout of replaced tree")
            completion.set()
            return
        self._layout_node(target, tree.root, None)
        tree.rendered = True
        logger.debug(f"Laid out {len(target.elements)} elements")
        completion.set()

    def _layout_node(
        self, target: RenderTarget, node: RenderNode, parent: VisualElement | None
    ) -> None:
        element = VisualElement(parent=parent, label=node.content or None)
        target.elements.append(element)
        node.attach(element)
        for child in node.children:
            self._layout_node(target, child, element)
