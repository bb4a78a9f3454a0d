"""JSON log records carry service/request/provider context."""

import json
import logging

from sidegate.common.logging import configure_logging, logger, mask_email, provider_ctx, request_id_ctx


def test_mask_email_keeps_first_char_and_domain():
    assert mask_email("alice@example.com") == "a***@example.com"
    assert mask_email("no-at-sign") == "***"


def test_configured_logger_emits_json_with_context(capsys):
    root = logging.getLogger()
    saved_handlers, saved_filters, saved_level = list(root.handlers), list(root.filters), root.level
    try:
        configure_logging("sidegate-test", "INFO")
        request_token = request_id_ctx.set("req-1")
        provider_token = provider_ctx.set("relay")
        try:
            logger.info("hello")
        finally:
            request_id_ctx.reset(request_token)
            provider_ctx.reset(provider_token)
        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["message"] == "hello"
        assert record["service_name"] == "sidegate-test"
        assert record["request_id"] == "req-1"
        assert record["provider"] == "relay"
    finally:
        root.handlers = saved_handlers
        root.filters = saved_filters
        root.setLevel(saved_level)
