"""Tests for resource resolution and source walks."""

from pathlib import Path

from notesite.core.resources import (
    Directory,
    Note,
    Static,
    classify_file,
    resolve_resource,
    walk_resources,
)


class TestResolveResource:
    """Tests for resolve_resource()."""

    def test__existing_file__resolves_static(self, source_dir: Path) -> None:
        (source_dir / "image.png").write_bytes(b"png")

        assert resolve_resource(source_dir, "/image.png") == Static(source_dir / "image.png")

    def test__existing_dir__resolves_directory(self, source_dir: Path) -> None:
        (source_dir / "sub").mkdir()

        assert resolve_resource(source_dir, "sub") == Directory(source_dir / "sub")

    def test__root__resolves_directory(self, source_dir: Path) -> None:
        assert resolve_resource(source_dir, "/") == Directory(source_dir)

    def test__html_with_note__resolves_note(self, source_dir: Path) -> None:
        (source_dir / "foo.md").write_text("# Foo")

        assert resolve_resource(source_dir, "foo.html") == Note(source_dir / "foo.md")

    def test__verbatim_html__wins_over_note(self, source_dir: Path) -> None:
        (source_dir / "foo.md").write_text("# Foo")
        (source_dir / "foo.html").write_text("<p>real</p>")

        assert resolve_resource(source_dir, "foo.html") == Static(source_dir / "foo.html")

    def test__nested_note__resolves(self, source_dir: Path) -> None:
        (source_dir / "a" / "b").mkdir(parents=True)
        (source_dir / "a" / "b" / "c.md").write_text("# C")

        assert resolve_resource(source_dir, "/a/b/c.html") == Note(source_dir / "a" / "b" / "c.md")

    def test__md_requested_directly__resolves_static(self, source_dir: Path) -> None:
        (source_dir / "foo.md").write_text("# Foo")

        assert resolve_resource(source_dir, "foo.md") == Static(source_dir / "foo.md")

    def test__missing__returns_none(self, source_dir: Path) -> None:
        assert resolve_resource(source_dir, "nope.html") is None

    def test__non_html_without_file__returns_none(self, source_dir: Path) -> None:
        (source_dir / "foo.md").write_text("# Foo")

        assert resolve_resource(source_dir, "foo.txt") is None

    def test__html_with_md_directory__returns_none(self, source_dir: Path) -> None:
        (source_dir / "foo.md").mkdir()

        assert resolve_resource(source_dir, "foo.html") is None

    def test__traversal__returns_none(self, source_dir: Path) -> None:
        (source_dir.parent / "secret.txt").write_text("secret")

        assert resolve_resource(source_dir, "../secret.txt") is None

    def test__private_file__returns_none(self, source_dir: Path) -> None:
        (source_dir / "_draft.md").write_text("# Draft")

        assert resolve_resource(source_dir, "_draft.html") is None
        assert resolve_resource(source_dir, "_draft.md") is None


class TestClassifyFile:
    """Tests for classify_file()."""

    def test__md__is_note(self) -> None:
        assert classify_file(Path("a.md")) == Note(Path("a.md"))

    def test__other__is_static(self) -> None:
        assert classify_file(Path("a.markdown")) == Static(Path("a.markdown"))


class TestWalkResources:
    """Tests for walk_resources()."""

    def test__tree__yields_all_public_entries(self, source_dir: Path) -> None:
        (source_dir / "sub").mkdir()
        (source_dir / "index.md").write_text("# Index")
        (source_dir / "sub" / "page.md").write_text("# Page")
        (source_dir / "sub" / "pic.png").write_bytes(b"png")

        resources = list(walk_resources(source_dir))

        assert resources == [
            Directory(source_dir),
            Note(source_dir / "index.md"),
            Directory(source_dir / "sub"),
            Note(source_dir / "sub" / "page.md"),
            Static(source_dir / "sub" / "pic.png"),
        ]

    def test__ignored_names__skipped(self, source_dir: Path) -> None:
        (source_dir / ".hidden.md").write_text("x")
        (source_dir / "_private.md").write_text("x")
        (source_dir / "public.md").write_text("x")

        resources = list(walk_resources(source_dir))

        assert Note(source_dir / "public.md") in resources
        assert len(resources) == 2

    def test__ignored_directory__subtree_pruned(self, source_dir: Path) -> None:
        (source_dir / "_build" / "deep").mkdir(parents=True)
        (source_dir / "_build" / "deep" / "page.md").write_text("x")
        (source_dir / ".git").mkdir()
        (source_dir / ".git" / "HEAD").write_text("ref")

        resources = list(walk_resources(source_dir))

        assert resources == [Directory(source_dir)]

    def test__directory__precedes_its_contents(self, source_dir: Path) -> None:
        (source_dir / "a" / "b").mkdir(parents=True)
        (source_dir / "a" / "b" / "c.md").write_text("x")

        paths = [r.path for r in walk_resources(source_dir)]

        assert paths.index(source_dir / "a") < paths.index(source_dir / "a" / "b")
        assert paths.index(source_dir / "a" / "b") < paths.index(source_dir / "a" / "b" / "c.md")
