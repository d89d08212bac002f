"""Object storage listing: flat key lists to navigable directory trees."""

from .mime import MimeTypeFilter, guess_mime_type
from .tree_builder import FileEntry, TreeNode, build_tree
from .tree_locator import find_subtree, flatten, locate, reroot

__all__ = [
    "FileEntry",
    "MimeTypeFilter",
    "TreeNode",
    "build_tree",
    "find_subtree",
    "flatten",
    "guess_mime_type",
    "locate",
    "reroot",
]
