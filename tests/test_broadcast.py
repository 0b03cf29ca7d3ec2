"""Tests for the scheduled trivia broadcast."""

from __future__ import annotations

import datetime
from unittest.mock import MagicMock

from numbers_trivia_bot.broadcast import TriviaBroadcaster, today_subject

TODAY = datetime.date(2026, 10, 19)


def _webhook_factory(status_code: int = 200):
    webhook = MagicMock()
    webhook.send.return_value = MagicMock(status_code=status_code, body="ok")
    return MagicMock(return_value=webhook), webhook


class TestTodaySubject:

    def test_month_slash_day(self):
        assert today_subject(TODAY) == "10/19"

    def test_no_zero_padding(self):
        assert today_subject(datetime.date(2026, 3, 7)) == "3/7"


class TestSendTrivia:

    def test_sends_fact_to_every_webhook(self, fake_numbers, fact_text):
        factory, webhook = _webhook_factory()
        broadcaster = TriviaBroadcaster(
            fake_numbers,
            webhook_urls=["https://hooks.slack.test/a", "https://hooks.slack.test/b"],
            interval_ms=1000,
            webhook_factory=factory,
        )

        delivered = broadcaster.send_trivia(TODAY)

        assert delivered == 2
        fake_numbers.fetch.assert_called_once_with("10/19", "date")
        assert [c[0][0] for c in factory.call_args_list] == [
            "https://hooks.slack.test/a", "https://hooks.slack.test/b",
        ]
        webhook.send.assert_called_with(text=fact_text)

    def test_lookup_failure_skips_round(self, failing_numbers):
        factory, _ = _webhook_factory()
        broadcaster = TriviaBroadcaster(
            failing_numbers, webhook_urls=["https://hooks.slack.test/a"], webhook_factory=factory,
        )

        assert broadcaster.send_trivia(TODAY) == 0
        factory.assert_not_called()

    def test_webhook_error_does_not_stop_others(self, fake_numbers, fact_text):
        broken = MagicMock()
        broken.send.side_effect = Exception("connection reset")
        working = MagicMock()
        working.send.return_value = MagicMock(status_code=200, body="ok")
        factory = MagicMock(side_effect=[broken, working])

        broadcaster = TriviaBroadcaster(
            fake_numbers,
            webhook_urls=["https://hooks.slack.test/a", "https://hooks.slack.test/b"],
            webhook_factory=factory,
        )

        assert broadcaster.send_trivia(TODAY) == 1
        working.send.assert_called_once_with(text=fact_text)

    def test_rejected_webhook_not_counted(self, fake_numbers):
        factory, _ = _webhook_factory(status_code=404)
        broadcaster = TriviaBroadcaster(
            fake_numbers, webhook_urls=["https://hooks.slack.test/a"], webhook_factory=factory,
        )

        assert broadcaster.send_trivia(TODAY) == 0


class TestLifecycle:

    def test_start_without_webhooks_is_noop(self, fake_numbers):
        broadcaster = TriviaBroadcaster(fake_numbers, webhook_urls=[])
        broadcaster.start()
        assert broadcaster.running is False

    def test_start_and_stop(self, fake_numbers):
        factory, _ = _webhook_factory()
        broadcaster = TriviaBroadcaster(
            fake_numbers,
            webhook_urls=["https://hooks.slack.test/a"],
            interval_ms=60 * 60 * 1000,
            webhook_factory=factory,
        )

        broadcaster.start()
        assert broadcaster.running is True

        broadcaster.stop()
        assert broadcaster.running is False
        # First round is one full interval away, so nothing was sent
        factory.assert_not_called()
