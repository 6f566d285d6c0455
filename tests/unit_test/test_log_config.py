import io
import logging

from lvs.log_config import configure_logging

from ..utils.factory_helpers import DOC, get_registry


def test_logs_go_through_a_single_stdlib_handler():
    configure_logging("DEBUG")
    configure_logging("WARNING")

    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0], logging.StreamHandler)
    assert handlers[0].level == logging.WARNING


def test_warnings_render_to_the_handler_stream():
    configure_logging("WARNING")
    stream = io.StringIO()
    logging.getLogger().handlers[0].setStream(stream)

    assert get_registry().enter_scope(DOC, "ghost") is False
    assert "enter_unknown_scope" in stream.getvalue()


def test_closed_log_stream_never_breaks_the_registry(monkeypatch):
    configure_logging("WARNING")
    closed = io.StringIO()
    closed.close()
    logging.getLogger().handlers[0].setStream(closed)
    # logging reports handler failures itself instead of raising.
    monkeypatch.setattr(logging, "raiseExceptions", False)

    registry = get_registry()
    assert registry.enter_scope(DOC, "ghost") is False
    assert registry.list_scopes(DOC) == []
