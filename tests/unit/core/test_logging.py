"""Tests for structured logging helpers."""

import structlog

from authcore.core.logging import (
    LoggingContext,
    add_correlation_id,
    bind_correlation_id,
    clear_context,
    rename_message_field,
)


def test_logging_context_binds_and_unbinds():
    clear_context()
    bind_correlation_id("cid_abc")

    with LoggingContext(operation="login"):
        context = structlog.contextvars.get_contextvars()
        assert context["operation"] == "login"
        assert context["correlation_id"] == "cid_abc"

    context = structlog.contextvars.get_contextvars()
    assert "operation" not in context
    assert context["correlation_id"] == "cid_abc"
    clear_context()


def test_add_correlation_id_keeps_bound_value():
    event = add_correlation_id(None, "info", {"correlation_id": "cid_bound"})

    assert event["correlation_id"] == "cid_bound"


def test_add_correlation_id_generates_when_missing():
    event = add_correlation_id(None, "info", {})

    assert event["correlation_id"].startswith("cid_")


def test_rename_message_field():
    event = rename_message_field(None, "info", {"event": "Login succeeded"})

    assert event == {"message": "Login succeeded"}
