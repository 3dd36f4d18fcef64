import json
from types import SimpleNamespace

from utils.logging_utils import create_logger, log_function_call, sanitize_data


class TestStructuredLogger:

    def test_log_line_shape(self, caplog):
        log = create_logger("svc").with_context(request_id="evt-1", document_id="o1")

        with caplog.at_level("INFO", logger="rider-notifications"):
            log.info("hello", {"orderId": "o1"})

        entry = json.loads(caplog.records[-1].getMessage())
        assert entry["service"] == "svc"
        assert entry["request_id"] == "evt-1"
        assert entry["document_id"] == "o1"
        assert entry["message"] == "hello"
        assert entry["data"] == {"orderId": "o1"}
        assert entry["location"].endswith(":test_log_line_shape")

    def test_with_context_does_not_mutate(self):
        log = create_logger("svc")

        bound = log.with_context(request_id="evt-1")

        assert bound.request_id == "evt-1"
        assert log.request_id is None

    def test_with_context_generates_request_id(self):
        assert create_logger("svc").with_context().request_id

    def test_levels(self, caplog):
        log = create_logger("svc")

        with caplog.at_level("DEBUG", logger="rider-notifications"):
            log.debug("d")
            log.info("i")
            log.error("e")

        assert [record.levelname for record in caplog.records[-3:]] == ["DEBUG", "INFO", "ERROR"]
        assert not hasattr(log, "warning")


class TestSanitize:

    def test_tokens_redacted(self):
        data = {"token": "abc", "riderId": "r1", "nested": {"fcmToken": "xyz", "orderId": "o1"}}

        assert sanitize_data(data) == {
            "token": "[REDACTED]",
            "riderId": "r1",
            "nested": {"fcmToken": "[REDACTED]", "orderId": "o1"},
        }

    def test_non_dict_passthrough(self):
        assert sanitize_data("plain") == "plain"


class TestLogFunctionCall:

    def test_result_returned(self):
        log = create_logger("svc")

        @log_function_call(log)
        def handler(event):
            return "done"

        assert handler(SimpleNamespace(id="e1")) == "done"

    def test_exception_swallowed(self, caplog):
        log = create_logger("svc")

        @log_function_call(log)
        def handler(event):
            raise RuntimeError("firestore unavailable")

        with caplog.at_level("ERROR", logger="rider-notifications"):
            assert handler(SimpleNamespace(id="e1")) is None

        assert any("firestore unavailable" in record.getMessage() for record in caplog.records)
