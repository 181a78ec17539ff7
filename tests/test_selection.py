from pathlib import Path

from layoutsmith.core.selection import is_selected, matches_pattern, select_files


def _files(**layouts: str | None) -> dict[str, dict]:
    files: dict[str, dict] = {}
    for stem, layout in layouts.items():
        record: dict = {"contents": f"{stem} body".encode()}
        if layout is not None:
            record["layout"] = layout
        files[f"{stem}.md"] = record
    return files


def test_files_without_layout_or_default_are_skipped() -> None:
    files = _files(a=None, b=None)
    selection = select_files(files)

    assert len(selection) == 0
    assert files["a.md"]["contents"] == b"a body"


def test_explicit_layout_selected_regardless_of_pattern() -> None:
    files = {"notes.txt": {"contents": b"x", "layout": "post.html"}}
    selection = select_files(files, patterns=["*.md"], default="base.html")
    assert selection.seeds == ["notes.txt"]


def test_default_applies_only_to_matching_pattern() -> None:
    files = {
        "a.md": {"contents": b"a"},
        "b.txt": {"contents": b"b"},
    }
    selection = select_files(files, patterns=["*.md"], default="base.html")
    assert selection.seeds == ["a.md"]
    assert selection.followers == []
    assert files["b.txt"]["contents"] == b"b"


def test_default_without_pattern_selects_everything() -> None:
    files = _files(a=None, b=None)
    selection = select_files(files, default="base.html")
    assert selection.seeds == ["a.md"]
    assert selection.followers == ["b.md"]


def test_first_file_seeds_each_template() -> None:
    files = _files(a="post", b="post", c="page", d="post.html")
    selection = select_files(files, layout_extension="html", directory="layouts")

    assert selection.templates == {
        str(Path("layouts") / "post.html"): "a.md",
        str(Path("layouts") / "page.html"): "c.md",
    }
    assert selection.followers == ["b.md", "d.md"]
    assert set(selection.seeds).isdisjoint(selection.followers)


def test_selected_contents_are_stringified() -> None:
    files = _files(a="post.html")
    select_files(files)
    assert files["a.md"]["contents"] == "a body"


def test_layout_false_cancels_default() -> None:
    record = {"contents": b"x", "layout": False}
    assert not is_selected("a.md", record, default="base.html")


def test_binary_contents_are_never_selected() -> None:
    record = {"contents": b"\xff\xfe\x00", "layout": "post.html"}
    assert not is_selected("image.png", record)


def test_custom_layout_key() -> None:
    files = {"a.md": {"contents": b"x", "template": "post.html", "layout": "ignored.html"}}
    selection = select_files(files, layout_key="template", directory="layouts")
    assert list(selection.templates) == [str(Path("layouts") / "post.html")]


def test_negated_patterns_exclude_matches() -> None:
    patterns = ["*.md", "!drafts/*"]
    assert matches_pattern("blog/post.md", patterns)
    assert not matches_pattern("drafts/post.md", patterns)
    assert not matches_pattern("post.txt", patterns)
    assert matches_pattern("post.txt", ["!*.md"])


def test_equivalent_layout_paths_share_one_seed() -> None:
    files = {
        "a.md": {"contents": b"a", "layout": "blog/../post"},
        "b.md": {"contents": b"b", "layout": "post"},
        "c.md": {"contents": b"c", "layout": "./post.html"},
    }
    selection = select_files(files, layout_extension="html", directory="layouts")

    assert selection.templates == {str(Path("layouts") / "post.html"): "a.md"}
    assert selection.followers == ["b.md", "c.md"]
