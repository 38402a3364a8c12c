"""Terminal presentation of a rendered tree."""

from rich.console import Console
from rich.text import Text
from rich.tree import Tree as RichTree

from .tree import RenderNode, Tree

ROOT_PLACEHOLDER = "Test Cases"


def _node_text(node: RenderNode) -> Text:
    element = node.element
    label = element.label if element is not None and element.has_text else node.content
    text = Text(label or ROOT_PLACEHOLDER)
    if element is not None and element.interactive:
        text.stylize("bold underline")
    elif node.children:
        text.stylize("bold")
    return text


def _add_children(branch: RichTree, node: RenderNode) -> None:
    for child in node.children:
        _add_children(branch.add(_node_text(child)), child)


def build_rich_tree(tree: Tree) -> RichTree:
    """Convert a tree into a rich Tree showing the visible labels."""
    rich_tree = RichTree(_node_text(tree.root), guide_style="dim")
    _add_children(rich_tree, tree.root)
    return rich_tree


def print_tree(tree: Tree, console: Console | None = None) -> None:
    """Print the tree with its current (decorated) labels."""
    (console or Console()).print(build_rich_tree(tree))
