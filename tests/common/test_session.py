"""Tests for the session context, notifications and localization."""

from common.localization import Localizer
from common.notifications import NotificationQueue, Toast
from common.session import SessionContext


class TestNotificationQueue:
    def test_drain_returns_in_order_and_empties(self):
        queue = NotificationQueue()
        queue.success("saved")
        queue.error("failed")

        assert queue.drain() == [Toast("saved", "success"), Toast("failed", "error")]
        assert queue.pending == []

    def test_messages_filter_by_kind(self):
        queue = NotificationQueue()
        queue.info("a")
        queue.error("b")
        assert queue.messages("info") == ["a"]
        assert queue.messages() == ["a", "b"]


class TestLocalizer:
    def test_list_values_are_copies(self):
        localizer = Localizer()
        services = localizer.t("hero.cosmeticServices")
        services.append("mutated")
        assert "mutated" not in localizer.t("hero.cosmeticServices")

    def test_missing_key_resolves_to_key(self):
        assert Localizer().t("nope.missing") == "nope.missing"

    def test_items_of_missing_key_is_empty(self):
        assert Localizer().items("nope.missing") == []


class TestSessionContext:
    def test_normalizer_shares_breaker_and_queue(self):
        session = SessionContext()
        session.errors.handle("quota")
        assert session.is_quota_exhausted
        assert session.notifications.pending[0].kind == "error"

    def test_locale_comes_from_localizer(self):
        assert SessionContext(localizer=Localizer(locale="ar")).locale == "ar"
