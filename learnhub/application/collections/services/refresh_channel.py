"""
Publish/subscribe channel for ``collection:refresh``.

Fire-and-forget: publishers never wait for subscribers and get no
acknowledgment. A subscriber may be a plain callable or return an awaitable,
in which case the awaitable is scheduled on the running loop.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from types import TracebackType
from typing import Self

import structlog

from learnhub.domain.collections.events import CollectionEvent

logger = structlog.get_logger(__name__)

REFRESH_TOPIC = "collection:refresh"

Subscriber = Callable[[CollectionEvent], Awaitable[None] | None]


class Subscription:
    """Handle returned by ``RefreshChannel.subscribe``."""

    def __init__(self, channel: "RefreshChannel", callback: Subscriber) -> None:
        self._channel = channel
        self.callback = callback

    @property
    def active(self) -> bool:
        return self._channel.is_subscribed(self)

    def unsubscribe(self) -> None:
        self._channel.remove(self)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.unsubscribe()


class RefreshChannel:
    """Engine-owned broadcast of collection events."""

    topic = REFRESH_TOPIC

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, callback: Subscriber) -> Subscription:
        subscription = Subscription(self, callback)
        self._subscriptions.append(subscription)
        return subscription

    def is_subscribed(self, subscription: Subscription) -> bool:
        return subscription in self._subscriptions

    def remove(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def publish(self, event: CollectionEvent) -> None:
        """Deliver an event to every current subscriber."""
        logger.debug("collection_refresh_published", topic=self.topic, **event.to_dict())
        for subscription in list(self._subscriptions):
            try:
                outcome = subscription.callback(event)
            except Exception:
                # One broken subscriber must not starve the others
                logger.exception("refresh_subscriber_failed", event_type=event.event_type)
                continue
            if inspect.isawaitable(outcome):
                self._schedule(outcome)

    async def drain(self) -> None:
        """Wait until every scheduled subscriber coroutine has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _schedule(self, awaitable: Awaitable[None]) -> None:
        task = asyncio.get_running_loop().create_task(_await(awaitable))
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("refresh_subscriber_failed", exc_info=error)


async def _await(awaitable: Awaitable[None]) -> None:
    await awaitable
