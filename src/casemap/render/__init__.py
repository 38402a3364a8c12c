"""Render adapter: markdown to tree, tree to visual elements."""

from .console import build_rich_tree, print_tree
from .markdown import MarkdownRenderer
from .tree import (
    ClickEvent,
    ClickHandler,
    RenderCompletion,
    RenderNode,
    RenderTarget,
    Tree,
    VisualElement,
)

__all__ = [
    "ClickEvent",
    "ClickHandler",
    "MarkdownRenderer",
    "RenderCompletion",
    "RenderNode",
    "RenderTarget",
    "Tree",
    "VisualElement",
    "build_rich_tree",
    "print_tree",
]
