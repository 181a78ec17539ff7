from pathlib import Path

import pytest

from layoutsmith.engines import TemplateSourceError
from layoutsmith.engines.mustache import (
    MustacheRenderer,
    compile_template,
    escape_html,
    render_nodes,
)


def _render(source: str, context: dict) -> str:
    return render_nodes(compile_template(source), [context], lambda name: None)


def test_variables_are_escaped_unless_raw() -> None:
    context = {"title": "<b>Hi</b>"}
    assert _render("{{ title }}", context) == "&lt;b&gt;Hi&lt;&#x2F;b&gt;"
    assert _render("{{{title}}}", context) == "<b>Hi</b>"
    assert _render("{{& title}}", context) == "<b>Hi</b>"


def test_escaping_follows_mustache_table() -> None:
    assert escape_html("a=\"1\" & b='`2`' </x>") == (
        "a&#x3D;&quot;1&quot; &amp; b&#x3D;&#39;&#x60;2&#x60;&#39; &lt;&#x2F;x&gt;"
    )
    assert _render("{{url}}", {"url": "/a?b=c"}) == "&#x2F;a?b&#x3D;c"


def test_dotted_names_and_missing_values() -> None:
    context = {"site": {"name": "Demo"}}
    assert _render("{{site.name}}|{{site.missing}}|{{nothing}}", context) == "Demo||"


def test_sections_iterate_lists_and_push_mappings() -> None:
    context = {"tags": [{"name": "a"}, {"name": "b"}], "author": {"name": "Ann"}, "title": "T"}
    assert _render("{{#tags}}[{{name}}]{{/tags}}", context) == "[a][b]"
    assert _render("{{#author}}{{name}} on {{title}}{{/author}}", context) == "Ann on T"
    assert _render("{{#items}}<{{.}}>{{/items}}", {"items": [1, 2]}) == "<1><2>"


def test_inverted_sections_render_on_empty_values() -> None:
    assert _render("{{^tags}}none{{/tags}}", {"tags": []}) == "none"
    assert _render("{{^tags}}none{{/tags}}", {"tags": ["x"]}) == ""
    assert _render("{{#draft}}draft{{/draft}}", {"draft": False}) == ""


def test_comments_are_dropped() -> None:
    assert _render("a{{! ignored }}b", {}) == "ab"


def test_unbalanced_sections_raise() -> None:
    with pytest.raises(TemplateSourceError):
        compile_template("{{#a}}open")
    with pytest.raises(TemplateSourceError):
        compile_template("{{/a}}")


def test_renderer_reads_partials_from_context(tmp_path: Path) -> None:
    layouts = tmp_path / "layouts"
    layouts.mkdir()
    (layouts / "post.html").write_text("{{> header}}{{{contents}}}{{> footer}}", encoding="utf-8")
    partials = tmp_path / "partials"
    partials.mkdir()
    header = partials / "header.html"
    header.write_text("<h1>{{title}}</h1>", encoding="utf-8")

    renderer = MustacheRenderer()
    context = {
        "title": "T",
        "contents": "body",
        "partials": {"header": str(header), "footer": "<hr>{{title}}"},
    }

    assert renderer.render(str(layouts / "post.html"), context) == "<h1>T</h1>body<hr>T"


def test_partial_reference_relative_to_layout(tmp_path: Path) -> None:
    (tmp_path / "nav.html").write_text("NAV", encoding="utf-8")
    (tmp_path / "base.html").write_text("{{> nav}}|{{> missing}}", encoding="utf-8")

    renderer = MustacheRenderer()
    result = renderer.render(str(tmp_path / "base.html"), {"partials": {"nav": "nav"}})

    assert result == "NAV|"


def test_compiled_layouts_are_cached(tmp_path: Path) -> None:
    layout = tmp_path / "post.html"
    layout.write_text("first {{x}}", encoding="utf-8")
    renderer = MustacheRenderer()

    assert renderer.render(str(layout), {"x": 1}) == "first 1"
    layout.write_text("second {{x}}", encoding="utf-8")
    assert renderer.render(str(layout), {"x": 2}) == "first 2"


def test_missing_layout_raises_template_source_error(tmp_path: Path) -> None:
    with pytest.raises(TemplateSourceError):
        MustacheRenderer().render(str(tmp_path / "absent.html"), {})


def test_partial_reference_relative_to_layout_directory(tmp_path: Path) -> None:
    (tmp_path / "shared").mkdir()
    (tmp_path / "shared" / "nav.html").write_text("NAV", encoding="utf-8")
    (tmp_path / "blog").mkdir()
    (tmp_path / "blog" / "post.html").write_text("{{> nav}}!", encoding="utf-8")

    renderer = MustacheRenderer(directory=tmp_path)
    layout = tmp_path / "blog" / "post.html"
    result = renderer.render(str(layout), {"partials": {"nav": "shared/nav"}})

    assert result == "NAV!"
