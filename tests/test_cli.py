from pathlib import Path

from typer.testing import CliRunner

from layoutsmith.ui.cli import app, get_cli_state
from layoutsmith.ui.cli.commands.build import parse_params


def _project(tmp_path: Path) -> Path:
    (tmp_path / "layouts").mkdir()
    (tmp_path / "layouts" / "post.mustache").write_text(
        "<h1>{{title}}</h1>{{{contents}}}<footer>{{site}}</footer>", encoding="utf-8"
    )
    source = tmp_path / "src"
    source.mkdir()
    (source / "a.md").write_text("---\ntitle: A\nlayout: post\n---\n<p>a</p>\n", encoding="utf-8")
    (source / "b.md").write_text("---\ntitle: B\n---\n<p>b</p>\n", encoding="utf-8")
    return source


def test_build_renders_and_renames(tmp_path: Path) -> None:
    source = _project(tmp_path)
    output = tmp_path / "out"
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "build",
            str(source),
            str(output),
            "--engine",
            "mustache",
            "--layout-extension",
            "mustache",
            "--root",
            str(tmp_path),
            "--rename",
            "--param",
            "site=Demo",
        ],
    )

    assert result.exit_code == 0, result.output
    assert (output / "a.html").read_text(encoding="utf-8") == (
        "<h1>A</h1><p>a</p>\n<footer>Demo</footer>"
    )
    assert (output / "b.md").read_text(encoding="utf-8") == "<p>b</p>\n"
    assert not (output / "a.md").exists()
    assert "(1 renamed)" in result.output


def test_build_applies_default_layout_with_pattern(tmp_path: Path) -> None:
    source = _project(tmp_path)
    (source / "c.txt").write_text("plain", encoding="utf-8")
    output = tmp_path / "out"

    result = CliRunner().invoke(
        app,
        [
            "build",
            str(source),
            str(output),
            "-e",
            "mustache",
            "--default",
            "post.mustache",
            "--layout-extension",
            "mustache",
            "--pattern",
            "*.md",
            "--root",
            str(tmp_path),
        ],
    )

    assert result.exit_code == 0, result.output
    assert (output / "b.md").read_text(encoding="utf-8").startswith("<h1>B</h1>")
    assert (output / "c.txt").read_text(encoding="utf-8") == "plain"


def test_build_rejects_unknown_engine(tmp_path: Path) -> None:
    source = _project(tmp_path)
    result = CliRunner().invoke(
        app, ["build", str(source), str(tmp_path / "out"), "--engine", "doesnotexist"]
    )

    assert result.exit_code != 0
    assert not (tmp_path / "out").exists()


def test_build_reports_render_failures(tmp_path: Path) -> None:
    source = _project(tmp_path)
    result = CliRunner().invoke(
        app,
        ["build", str(source), str(tmp_path / "out"), "-e", "mustache", "--root", str(tmp_path)],
    )

    assert result.exit_code == 1
    assert "a.md" in result.output


def test_engines_command_lists_engines() -> None:
    result = CliRunner().invoke(app, ["engines"])

    assert result.exit_code == 0
    assert "mustache" in result.output
    assert "jinja2" in result.output


def test_parse_params_reads_yaml_values() -> None:
    assert parse_params(["year=2024", "draft=false", "name=Demo", "empty="]) == {
        "year": 2024,
        "draft": False,
        "name": "Demo",
        "empty": "",
    }


def test_verbose_failure_names_the_error_type(tmp_path: Path) -> None:
    source = _project(tmp_path)
    result = CliRunner().invoke(
        app,
        [
            "-v",
            "build",
            str(source),
            str(tmp_path / "out"),
            "-e",
            "mustache",
            "--root",
            str(tmp_path),
        ],
    )

    assert result.exit_code == 1
    assert "TemplateLoadError" in result.output


def test_events_are_consumed_per_build(tmp_path: Path) -> None:
    source = _project(tmp_path)
    args = [
        "build",
        str(source),
        str(tmp_path / "out"),
        "-e",
        "mustache",
        "--layout-extension",
        "mustache",
        "--root",
        str(tmp_path),
        "--rename",
    ]

    CliRunner().invoke(app, args)
    result = CliRunner().invoke(app, args)

    assert result.exit_code == 0, result.output
    assert "(1 renamed)" in result.output
    assert get_cli_state().consume_events("layout_renamed") == []
    assert get_cli_state().consume_events("layout_rendered") == [
        {"file": "a.html", "layout": "post"}
    ]
