"""Build a directory tree from the flat object list of a bucket listing.

S3-compatible stores have no directories, only keys such as
``photos/2024/beach.jpg``. The builder splits every key on ``/`` and creates
one ``TreeNode`` per distinct key prefix, keyed by the platform directory
marker followed by the accumulated prefix:

    >>> tree = build_tree(
    ...     [ObjectEntry("a.txt"), ObjectEntry("dir1/b.txt")], "aws-s3://bucket/"
    ... )
    >>> list(tree.dirs)
    ['aws-s3://bucket/dir1/']

Prefixes shared by many keys collapse into a single node. Files land in the
directory that immediately encloses them. Objects whose mime type resolves to
an empty string are dropped without error.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterable, Optional

from s3_media_tools.core import get_logger
from s3_media_tools.objectstorage.clients import ObjectEntry

from .mime import MimeResolver, MimeTypeFilter, icon_for

logger = get_logger(__name__)

SEPARATOR = "/"


@dataclass(frozen=True)
class FileEntry:
    """A file inside a directory of the tree."""

    title: str
    key: str
    url: str
    size: int
    mime_type: str
    last_modified: Optional[datetime]
    icon: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "key": self.key,
            "file": self.url,
            "filesize": self.size,
            "mime-type": self.mime_type,
            "last-modified": (
                self.last_modified.isoformat() if self.last_modified else ""
            ),
            "icon": self.icon,
        }


@dataclass
class TreeNode:
    """A directory; ``dirs`` maps full-path keys to child directories."""

    key: str
    title: str
    files: list[FileEntry] = field(default_factory=list)
    dirs: dict[str, "TreeNode"] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "files": [f.to_dict() for f in self.files],
            "dirs": {key: node.to_dict() for key, node in self.dirs.items()},
        }

    def iter_dirs(self):
        """Yield all descendant directories, parents before children."""
        for node in self.dirs.values():
            yield node
            yield from node.iter_dirs()

    def is_empty(self) -> bool:
        return not self.files and not self.dirs


def directory_key(base_directory: str, path: str = "") -> str:
    """Join a directory marker and a relative path into a node key."""
    if not base_directory.endswith(SEPARATOR):
        base_directory += SEPARATOR
    return base_directory + path


def _file_entry(
    obj: ObjectEntry,
    resolve_mime: MimeResolver,
    public_url: Callable[[str], str],
) -> Optional[FileEntry]:
    mime_type = resolve_mime(obj.name)
    if not mime_type:
        return None
    return FileEntry(
        title=obj.name,
        key=obj.key,
        url=public_url(obj.key),
        size=max(int(obj.size), 0),
        mime_type=mime_type,
        last_modified=obj.last_modified,
        icon=icon_for(mime_type),
    )


def build_tree(
    objects: Iterable[ObjectEntry],
    base_directory: str,
    public_url: Optional[Callable[[str], str]] = None,
    mime_filter: Optional[MimeResolver] = None,
) -> TreeNode:
    """Assemble the complete directory tree of a flat object listing.

    Args:
        objects: Objects in listing order
        base_directory: Directory marker of the platform, used as root key
        public_url: Maps an object key to its public URL (identity by default)
        mime_filter: Hook returning the mime type of a name, "" to hide it

    Returns:
        Root ``TreeNode`` holding the root files and the whole hierarchy
    """
    resolve_mime = mime_filter if mime_filter is not None else MimeTypeFilter()
    to_url = public_url if public_url is not None else (lambda key: key)

    root = TreeNode(key=directory_key(base_directory), title=base_directory)
    nodes: dict[str, TreeNode] = {}
    object_count = 0
    hidden_count = 0

    for obj in objects:
        object_count += 1
        segments = obj.key.split(SEPARATOR)

        parent = root
        dir_path = ""
        for segment in segments[:-1]:
            if not segment:
                continue
            dir_path += segment + SEPARATOR
            index = directory_key(base_directory, dir_path)
            node = nodes.get(index)
            if node is None:
                node = TreeNode(key=index, title=segment)
                nodes[index] = node
                parent.dirs[index] = node
            parent = node

        # keys ending with "/" are directory placeholders
        if not segments[-1]:
            continue

        entry = _file_entry(obj, resolve_mime, to_url)
        if entry is None:
            hidden_count += 1
            continue
        parent.files.append(entry)

    logger.debug(
        "Directory tree built",
        root=root.key,
        object_count=object_count,
        directory_count=len(nodes),
        hidden_count=hidden_count,
    )
    return root
