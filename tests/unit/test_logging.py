from crosspost.infrastructure.logging import Timer, redact, sanitize_for_logging


class TestRedact:
    def test_masks_nested_secrets(self):
        event = {
            "event": "Target publish failed",
            "params": {"access_token": "EAAB-secret", "upload_phase": "start"},
            "headers": [{"Authorization": "Bearer li-token"}],
        }

        redacted = redact(event)

        assert redacted["params"] == {"access_token": "[REDACTED]", "upload_phase": "start"}
        assert redacted["headers"] == [{"Authorization": "[REDACTED]"}]
        assert event["params"]["access_token"] == "EAAB-secret"

    def test_leaves_plain_values(self):
        assert redact("plain") == "plain"
        assert redact(("a", 1)) == ("a", 1)


class TestSanitize:
    def test_masks_tail(self):
        assert sanitize_for_logging("1055123456") == "1055******"

    def test_short_values_fully_masked(self):
        assert sanitize_for_logging("abc") == "***"
        assert sanitize_for_logging("") == ""


class TestTimer:
    def test_duration_frozen_after_exit(self):
        with Timer() as t:
            pass
        first = t.duration_ms

        assert first >= 0
        assert t.duration_ms == first
