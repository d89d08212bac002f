"""Tests for building directory trees from flat object listings."""

from s3_media_tools.objectstorage.clients import ObjectEntry
from s3_media_tools.objectstorage.listing import MimeTypeFilter, build_tree
from s3_media_tools.objectstorage.listing.tree_builder import directory_key


def entries(*keys):
    return [ObjectEntry(key) for key in keys]


class TestBuildTree:
    """Test tree assembly."""

    def test_nested_directories(self):
        """Files land in the directory immediately enclosing them."""
        tree = build_tree(
            entries("a.txt", "dir1/b.txt", "dir1/dir2/c.txt"), "/bucket/"
        )

        assert tree.key == "/bucket/"
        assert [f.title for f in tree.files] == ["a.txt"]
        assert list(tree.dirs) == ["/bucket/dir1/"]

        dir1 = tree.dirs["/bucket/dir1/"]
        assert dir1.title == "dir1"
        assert [f.title for f in dir1.files] == ["b.txt"]
        assert list(dir1.dirs) == ["/bucket/dir1/dir2/"]

        dir2 = dir1.dirs["/bucket/dir1/dir2/"]
        assert [f.title for f in dir2.files] == ["c.txt"]
        assert dir2.dirs == {}

    def test_shared_prefixes_collapse(self):
        """A prefix shared by many keys produces a single node."""
        tree = build_tree(
            entries("x/1.txt", "x/2.txt", "x/y/3.txt", "x/y/4.txt"), "/bucket/"
        )

        assert list(tree.dirs) == ["/bucket/x/"]
        x = tree.dirs["/bucket/x/"]
        assert [f.title for f in x.files] == ["1.txt", "2.txt"]
        assert list(x.dirs) == ["/bucket/x/y/"]
        assert len(x.dirs["/bucket/x/y/"].files) == 2

    def test_directory_set_matches_key_prefixes(self):
        """Every strict prefix of a key becomes exactly one directory."""
        keys = ["a/b/c/d.txt", "a/b/e.txt", "f/g.txt", "h.txt"]
        tree = build_tree(entries(*keys), "/root/")

        built = {node.key for node in tree.iter_dirs()}
        expected = set()
        for key in keys:
            parts = key.split("/")[:-1]
            for i in range(1, len(parts) + 1):
                expected.add("/root/" + "/".join(parts[:i]) + "/")

        assert built == expected

    def test_empty_listing(self):
        """An empty listing yields an empty root."""
        tree = build_tree([], "aws-s3://media/")

        assert tree.key == "aws-s3://media/"
        assert tree.is_empty()

    def test_base_without_trailing_separator(self):
        """The root key always ends with a separator."""
        tree = build_tree(entries("dir/a.txt"), "/bucket")

        assert tree.key == "/bucket/"
        assert list(tree.dirs) == ["/bucket/dir/"]

    def test_directory_placeholders(self):
        """Keys ending with a separator create directories but no files."""
        tree = build_tree(entries("empty/", "full/a.txt"), "/bucket/")

        assert set(tree.dirs) == {"/bucket/empty/", "/bucket/full/"}
        assert tree.dirs["/bucket/empty/"].is_empty()
        assert tree.files == []

    def test_public_url_and_metadata(self):
        """File entries carry the public URL, size and icon."""
        tree = build_tree(
            [ObjectEntry("img/photo.png", size=1024)],
            "/bucket/",
            public_url=lambda key: f"https://cdn.example.com/{key}",
        )

        entry = tree.dirs["/bucket/img/"].files[0]
        assert entry.url == "https://cdn.example.com/img/photo.png"
        assert entry.size == 1024
        assert entry.mime_type == "image/png"
        assert entry.icon == "media-image"

        data = entry.to_dict()
        assert data["file"] == "https://cdn.example.com/img/photo.png"
        assert data["mime-type"] == "image/png"
        assert data["last-modified"] == ""


class TestMimeFiltering:
    """Test the mime type hook of the tree builder."""

    def test_unresolvable_types_hidden(self):
        """Objects without a mime type never appear as files."""
        tree = build_tree(entries("README", "docs/notes.txt"), "/bucket/")

        assert tree.files == []
        assert [f.title for f in tree.dirs["/bucket/docs/"].files] == ["notes.txt"]

    def test_filtered_file_keeps_directory(self):
        """Directories are created even when their only file is hidden."""
        tree = build_tree(entries("hidden/no-extension"), "/bucket/")

        assert "/bucket/hidden/" in tree.dirs
        assert tree.dirs["/bucket/hidden/"].files == []

    def test_allow_list(self):
        """Only allowed mime types are kept when filtering is enabled."""
        only_images = MimeTypeFilter(allowed=["image/png"], enabled=True)
        tree = build_tree(entries("a.png", "b.txt"), "/bucket/", mime_filter=only_images)

        assert [f.title for f in tree.files] == ["a.png"]

    def test_allow_list_disabled(self):
        """Any resolvable type is kept when filtering is disabled."""
        no_filter = MimeTypeFilter(allowed=["image/png"], enabled=False)
        tree = build_tree(entries("a.png", "b.txt"), "/bucket/", mime_filter=no_filter)

        assert [f.title for f in tree.files] == ["a.png", "b.txt"]

    def test_custom_hook(self):
        """Any callable can decide the mime type."""
        tree = build_tree(
            entries("a.bin", "b.bin"),
            "/bucket/",
            mime_filter=lambda name: "application/octet-stream" if name == "a.bin" else "",
        )

        assert [f.title for f in tree.files] == ["a.bin"]
        assert tree.files[0].icon == "media-default"


class TestDirectoryKey:
    """Test node key construction."""

    def test_directory_key(self):
        assert directory_key("/bucket/") == "/bucket/"
        assert directory_key("/bucket") == "/bucket/"
        assert directory_key("aws-s3://media/", "a/b/") == "aws-s3://media/a/b/"
