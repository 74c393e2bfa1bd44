"""Tests for error normalization and the quota circuit breaker."""

import pytest

from common.config import GENERIC_ERROR_MESSAGE, QUOTA_EXCEEDED_MESSAGE
from common.notifications import NotificationQueue
from quota_guard.core import (
    ErrorKind,
    ErrorNormalizer,
    QuotaCircuitBreaker,
    classify_error,
    is_quota_message,
)


class TestClassifyError:
    """Tests for the pure classification of thrown values."""

    def test_exception_message_is_used(self):
        result = classify_error(RuntimeError("Model overloaded"))
        assert result.kind is ErrorKind.RECOVERABLE
        assert result.message == "Model overloaded"

    def test_string_is_used_directly(self):
        result = classify_error("Network unreachable")
        assert result.kind is ErrorKind.RECOVERABLE
        assert result.message == "Network unreachable"

    @pytest.mark.parametrize("value", [None, 42, {"code": 500}, ["boom"]])
    def test_other_values_get_generic_message(self, value):
        result = classify_error(value)
        assert result.kind is ErrorKind.UNRECOGNIZED
        assert result.message == GENERIC_ERROR_MESSAGE

    def test_empty_exception_falls_back_to_class_name(self):
        assert classify_error(ValueError()).message == "ValueError"

    @pytest.mark.parametrize(
        "value",
        [
            RuntimeError("429: Too Many Requests"),
            RuntimeError("You exceeded your current quota"),
            "QUOTA_EXHAUSTED for project",
            "Resource has been exhausted (e.g. check Quota).",
        ],
    )
    def test_quota_markers_replace_message(self, value):
        result = classify_error(value)
        assert result.kind is ErrorKind.QUOTA_EXCEEDED
        assert result.is_quota
        assert result.message == QUOTA_EXCEEDED_MESSAGE

    def test_raw_value_is_kept(self):
        err = RuntimeError("boom")
        assert classify_error(err).raw is err

    def test_is_quota_message(self):
        assert is_quota_message("HTTP 429")
        assert is_quota_message("Quota")
        assert not is_quota_message("500 internal error")


class TestQuotaCircuitBreaker:
    """Tests for the latched breaker."""

    def test_starts_untripped(self):
        breaker = QuotaCircuitBreaker()
        assert not breaker.tripped
        assert breaker.allows_requests

    def test_trip_is_idempotent(self):
        breaker = QuotaCircuitBreaker()
        breaker.trip()
        breaker.trip()
        assert breaker.tripped
        assert not breaker.allows_requests

    def test_dismiss_always_resets(self):
        breaker = QuotaCircuitBreaker()
        for _ in range(3):
            breaker.trip()
        breaker.dismiss()
        assert not breaker.tripped

    def test_dismiss_when_untripped(self):
        breaker = QuotaCircuitBreaker()
        breaker.dismiss()
        assert not breaker.tripped


class TestErrorNormalizer:
    """Tests for the surfacing boundary."""

    @pytest.fixture
    def normalizer(self) -> ErrorNormalizer:
        return ErrorNormalizer(QuotaCircuitBreaker(), NotificationQueue())

    def test_plain_error_surfaces_message(self, normalizer):
        message = normalizer.handle(RuntimeError("Service unavailable"))
        assert message == "Service unavailable"
        assert normalizer.notifications.messages("error") == ["Service unavailable"]
        assert not normalizer.breaker.tripped

    def test_quota_error_trips_breaker(self, normalizer):
        message = normalizer.handle(RuntimeError("429: rate limited"))
        assert message == QUOTA_EXCEEDED_MESSAGE
        assert normalizer.breaker.tripped
        assert normalizer.notifications.messages("error") == [QUOTA_EXCEEDED_MESSAGE]

    def test_breaker_stays_tripped_after_other_errors(self, normalizer):
        normalizer.handle("quota exceeded")
        normalizer.handle("some other failure")
        assert normalizer.breaker.tripped

    def test_one_toast_per_failure(self, normalizer):
        normalizer.handle(object())
        assert len(normalizer.notifications.pending) == 1
        assert normalizer.notifications.pending[0].message == GENERIC_ERROR_MESSAGE
