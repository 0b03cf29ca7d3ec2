"""Scheduled broadcast of today's date fact to Slack incoming webhooks.

WHY: Besides answering questions, the bot posts one "on this day" fact on
a fixed schedule to every workspace channel that installed an incoming
webhook.

HOW: A daemon thread waits on a threading.Event for SEND_TRIVIA_FREQ_MS
milliseconds, then fetches "{month}/{day}/date" from the Numbers API and
sends the text to each webhook URL with slack_sdk's WebhookClient.
stop() sets the event, which wakes the thread immediately.

RULES:
- The first broadcast happens one full interval after start()
- A failed lookup skips the round (logged, nothing sent)
- A failed webhook is logged and does not stop the others
- No webhook URLs configured → start() logs and does nothing
"""

from __future__ import annotations

import datetime
import logging
import threading
from typing import Callable, List, Optional

from slack_sdk.webhook import WebhookClient

from numbers_trivia_bot.api.models import CATEGORY_DATE
from numbers_trivia_bot.api.numbers import NumbersClient
from numbers_trivia_bot.config import SEND_TRIVIA_FREQ_MS, load_webhook_urls

logger = logging.getLogger(__name__)


def today_subject(today: Optional[datetime.date] = None) -> str:
    """Return today's date as the Numbers API "month/day" subject."""
    today = today or datetime.date.today()
    return "{}/{}".format(today.month, today.day)


class TriviaBroadcaster:
    """Periodically pushes today's date fact to incoming webhooks."""

    def __init__(
        self,
        numbers: NumbersClient,
        webhook_urls: Optional[List[str]] = None,
        interval_ms: Optional[int] = None,
        webhook_factory: Callable[[str], WebhookClient] = WebhookClient,
    ) -> None:
        self._numbers = numbers
        self._webhook_urls = load_webhook_urls() if webhook_urls is None else list(webhook_urls)
        self._interval_s = (SEND_TRIVIA_FREQ_MS if interval_ms is None else interval_ms) / 1000.0
        self._webhook_factory = webhook_factory
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def send_trivia(self, today: Optional[datetime.date] = None) -> int:
        """Run one broadcast round. Returns the number of webhooks delivered."""
        result = self._numbers.fetch(today_subject(today), CATEGORY_DATE)
        if not result.ok:
            logger.error("Got an error from the Numbers API: %s", result.error)
            return 0

        delivered = 0
        for url in self._webhook_urls:
            try:
                resp = self._webhook_factory(url).send(text=result.text)
            except Exception:
                logger.exception("Got an error when sending the webhook")
                continue

            if resp.status_code != 200:
                logger.error(
                    "Webhook rejected the broadcast: %s %s", resp.status_code, resp.body,
                )
                continue

            delivered += 1

        logger.info("Broadcast today's fact to %d/%d webhooks", delivered, len(self._webhook_urls))
        return delivered

    def start(self) -> None:
        if not self._webhook_urls:
            logger.info("No incoming webhooks configured, trivia broadcast disabled")
            return
        if self.running:
            return

        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="trivia-broadcast", daemon=True)
        self._thread.start()
        logger.info(
            "Trivia broadcast every %.0fs to %d webhooks",
            self._interval_s, len(self._webhook_urls),
        )

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(self._interval_s):
            try:
                self.send_trivia()
            except Exception:
                logger.exception("Trivia broadcast round failed")
