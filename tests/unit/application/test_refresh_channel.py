"""Tests for RefreshChannel and ScopeVersions."""

from learnhub.application.collections.services.refresh_channel import (
    REFRESH_TOPIC,
    RefreshChannel,
)
from learnhub.application.collections.services.scope_versions import ScopeVersions
from learnhub.domain.collections.events import (
    ANY_COLLECTION,
    CollectionDeleted,
    CollectionEvent,
    CollectionRenamed,
)


class TestRefreshChannel:
    def test_topic(self) -> None:
        assert RefreshChannel.topic == REFRESH_TOPIC == "collection:refresh"

    def test_publish_reaches_every_subscriber(self) -> None:
        channel = RefreshChannel()
        first: list[CollectionEvent] = []
        second: list[CollectionEvent] = []
        channel.subscribe(first.append)
        channel.subscribe(second.append)

        event = CollectionDeleted(collection_id="c1")
        channel.publish(event)

        assert first == [event]
        assert second == [event]

    def test_unsubscribe(self) -> None:
        channel = RefreshChannel()
        received: list[CollectionEvent] = []
        subscription = channel.subscribe(received.append)

        subscription.unsubscribe()
        channel.publish(CollectionDeleted(collection_id="c1"))

        assert received == []
        assert not subscription.active
        assert channel.subscriber_count == 0

    def test_subscription_as_context_manager(self) -> None:
        channel = RefreshChannel()

        with channel.subscribe(lambda event: None) as subscription:
            assert subscription.active

        assert channel.subscriber_count == 0

    def test_failing_subscriber_does_not_starve_others(self) -> None:
        channel = RefreshChannel()
        received: list[CollectionEvent] = []

        def broken(event: CollectionEvent) -> None:
            raise RuntimeError("broken subscriber")

        channel.subscribe(broken)
        channel.subscribe(received.append)

        channel.publish(CollectionDeleted(collection_id="c1"))

        assert len(received) == 1

    async def test_async_subscribers_are_scheduled(self) -> None:
        channel = RefreshChannel()
        received: list[str] = []

        async def on_event(event: CollectionEvent) -> None:
            received.append(event.collection_id)

        channel.subscribe(on_event)
        channel.publish(CollectionRenamed(collection_id="c1", label="New"))

        # Publishing never waits for subscribers
        assert received == []
        await channel.drain()
        assert received == ["c1"]

    async def test_drain_survives_failing_coroutines(self) -> None:
        channel = RefreshChannel()

        async def broken(event: CollectionEvent) -> None:
            raise RuntimeError("broken subscriber")

        channel.subscribe(broken)
        channel.publish(CollectionDeleted(collection_id="c1"))

        await channel.drain()


class TestCollectionEvent:
    def test_concerns_own_scope_and_wildcard(self) -> None:
        assert CollectionDeleted(collection_id="c1").concerns("c1")
        assert not CollectionDeleted(collection_id="c1").concerns("c2")
        assert CollectionDeleted(collection_id=ANY_COLLECTION).concerns("c2")

    def test_to_dict(self) -> None:
        data = CollectionRenamed(collection_id="c1", label="New").to_dict()

        assert data["event_type"] == "CollectionRenamed"
        assert data["label"] == "New"
        assert isinstance(data["occurred_at"], str)


class TestScopeVersions:
    def test_ticket_goes_stale_after_bump(self) -> None:
        versions = ScopeVersions()
        ticket = versions.capture("c1")

        assert not versions.is_stale(ticket)
        versions.bump("c1")
        assert versions.is_stale(ticket)

    def test_scopes_are_independent(self) -> None:
        versions = ScopeVersions()
        ticket = versions.capture("c1")

        versions.bump("c2")

        assert not versions.is_stale(ticket)
        assert versions.current("c2") == 1

    def test_suppression_is_consumed_once(self) -> None:
        versions = ScopeVersions()
        versions.suppress_next_refresh("c1")

        assert not versions.consume_suppression("c2")
        assert versions.consume_suppression("c1")
        assert not versions.consume_suppression("c1")
