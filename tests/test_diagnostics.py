import logging

import pytest

from layoutsmith.core.diagnostics import LoggingEmitter, ensure_emitter, format_event_message
from layoutsmith.core.exceptions import RenderError, exception_hint


def test_format_event_messages() -> None:
    assert format_event_message("layout_rendered", {"file": "a.html", "layout": "post"}) == (
        "Rendered a.html (layout: post)"
    )
    assert format_event_message("layout_renamed", {"source": "a.md", "target": "a.html"}) == (
        "Renamed a.md -> a.html"
    )
    assert format_event_message("layout_phase", {"phase": "matches", "count": 1}) == (
        "Layout phase matches: 1 file"
    )
    assert format_event_message("unknown", {}) is None


def test_logging_emitter_logs_events_and_warnings(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter(logger_obj=logging.getLogger("layoutsmith.test"))
    with caplog.at_level(logging.INFO, logger="layoutsmith.test"):
        emitter.event("layout_template_seeded", {"template": "layouts/post.html", "file": "a.md"})
        emitter.warning("Skipped 2 file(s) sharing a layout after a failure.")

    assert "Warming layout layouts/post.html with a.md" in caplog.text
    assert "Skipped 2 file(s)" in caplog.text


def test_ensure_emitter_defaults_to_logging() -> None:
    assert isinstance(ensure_emitter(None), LoggingEmitter)


def test_exception_hint_reaches_root_cause() -> None:
    try:
        try:
            raise ValueError("variable 'x' is undefined")
        except ValueError as cause:
            raise RenderError("a.md", "post", cause) from cause
    except RenderError as exc:
        hint = exception_hint(exc)

    assert hint == "variable 'x' is undefined"
