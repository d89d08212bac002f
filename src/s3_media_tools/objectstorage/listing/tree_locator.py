"""Re-root a built directory tree to a requested sub-path.

Two passes run in sequence. The flattening pass normalizes the tree so that
every directory hangs below its direct parent, whatever shape the input had
(entries keyed by deep paths directly under the root are moved to their
place). The search pass looks up the requested directory depth-first.

Both passes build new ``TreeNode`` objects and never modify their input.
``FileEntry`` objects are immutable and shared.
"""

from typing import Optional

from s3_media_tools.core import get_logger

from .tree_builder import SEPARATOR, TreeNode, directory_key

logger = get_logger(__name__)


def _as_dir(path: str) -> str:
    return path if path.endswith(SEPARATOR) else path + SEPARATOR


def _walk(node: TreeNode, seen: set[int]):
    for child in node.dirs.values():
        if id(child) in seen:
            continue
        seen.add(id(child))
        yield child
        yield from _walk(child, seen)


def _ensure_node(root: TreeNode, key: str, title: str) -> TreeNode:
    """Return the node for ``key`` below ``root``, creating missing levels."""
    if not key.startswith(root.key):
        node = root.dirs.get(key)
        if node is None:
            node = root.dirs[key] = TreeNode(key=key, title=title)
        return node

    parts = [part for part in key[len(root.key):].split(SEPARATOR) if part]
    parent = root
    dir_path = ""
    for position, part in enumerate(parts):
        dir_path += part + SEPARATOR
        index = directory_key(root.key, dir_path)
        node = parent.dirs.get(index)
        if node is None:
            is_target = position == len(parts) - 1
            node = TreeNode(key=index, title=title if is_target else part)
            parent.dirs[index] = node
        parent = node
    return parent


def flatten(tree: TreeNode) -> TreeNode:
    """Return a copy of ``tree`` with every directory below its direct parent.

    Entries with equal keys are merged; files are de-duplicated by key.
    A tree produced by ``build_tree`` comes back structurally unchanged.
    """
    result = TreeNode(key=tree.key, title=tree.title, files=list(tree.files))
    for node in _walk(tree, set()):
        if node.key == tree.key:
            target = result
        else:
            target = _ensure_node(result, node.key, node.title)
        known = {f.key for f in target.files}
        for entry in node.files:
            if entry.key not in known:
                target.files.append(entry)
                known.add(entry.key)
    return result


def find_subtree(tree: TreeNode, requested_path: str) -> Optional[TreeNode]:
    """Depth-first search for the directory keyed ``requested_path``.

    Children are visited in insertion order and the first match wins.
    Returns None when no directory matches.
    """
    target = _as_dir(requested_path)
    if tree.key == target:
        return tree
    for key, node in tree.dirs.items():
        if key == target:
            return node
        found = find_subtree(node, target)
        if found is not None:
            return found
    return None


def locate(tree: TreeNode, requested_path: str) -> tuple[TreeNode, bool]:
    """Re-root ``tree`` and report whether the requested directory exists.

    Returns:
        Tuple of (tree, found). When the directory does not exist the
        original, unmodified ``tree`` is returned with found=False.
    """
    flat = flatten(tree)
    if _as_dir(requested_path) == flat.key:
        return flat, True

    subtree = find_subtree(flat, requested_path)
    if subtree is None:
        logger.info(
            "Requested directory not found in tree",
            root=tree.key,
            requested_path=requested_path,
        )
        return tree, False
    return subtree, True


def reroot(tree: TreeNode, requested_path: str) -> TreeNode:
    """Return the subtree for ``requested_path``, or the full tree if absent.

    Callers that need to tell "not found" apart from "root requested" compare
    the returned key with the request or use ``locate``.
    """
    return locate(tree, requested_path)[0]
