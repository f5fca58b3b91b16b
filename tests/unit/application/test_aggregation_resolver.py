"""Tests for AggregationResolver."""

from datetime import timedelta

import pytest

from learnhub.application.collections.services.aggregation_resolver import (
    AggregationResolver,
    merge_sources,
)
from learnhub.domain.collections.entities.content_item import VIRTUAL_PROFILE_ID
from learnhub.domain.collections.item_kind import CONVERSATION_KINDS, ItemKind
from learnhub.domain.collections.services.alias_resolver import AliasResolver
from learnhub.domain.collections.value_objects.membership_key import MembershipKey
from learnhub.domain.common.exceptions import TransientError
from tests.fakes import (
    NOW,
    FakeConversationSource,
    FakeGateway,
    make_item,
    system_collections,
)

CONV = ItemKind.CONVERSATION


def _join(gateway: FakeGateway, collection_id: str, *items) -> None:
    for item in items:
        gateway.items[item.key] = item
        gateway.memberships.append(
            MembershipKey(item_kind=item.kind, item_id=item.id, collection_id=collection_id)
        )


def _resolver(gateway: FakeGateway, *sources) -> AggregationResolver:
    return AggregationResolver(gateway, AliasResolver(system_collections()), sources)


class TestMergeSources:
    def test_union_without_duplicates(self) -> None:
        a, b, c = (make_item(CONV, i) for i in "ABC")

        merged = merge_sources([a, b], [(CONVERSATION_KINDS, [b, c])])

        assert [item.id for item in merged] == ["A", "B", "C"]

    def test_authoritative_copy_wins(self) -> None:
        joined = make_item(CONV, "A", title="from join")
        tagged = make_item(CONV, "A", title="from tag")

        merged = merge_sources([joined], [(CONVERSATION_KINDS, [tagged])])

        assert [item.title for item in merged] == ["from join"]

    def test_match_is_by_id_within_source_kinds(self) -> None:
        joined = make_item(CONV, "A")
        tool = make_item(ItemKind.TOOL_CONVERSATION, "A")
        lesson = make_item(ItemKind.LESSON, "B")
        tagged = make_item(CONV, "B")

        merged = merge_sources([joined, lesson], [(CONVERSATION_KINDS, [tool, tagged])])

        assert [item.key for item in merged] == [joined.key, lesson.key, tagged.key]

    def test_duplicates_inside_authoritative_list_collapse(self) -> None:
        a = make_item(ItemKind.NOTE, "A")

        assert merge_sources([a, a], []) == [a]


class TestAggregationResolver:
    async def test_alias_is_resolved_before_fetch(self) -> None:
        gateway = FakeGateway()
        _join(gateway, "sys-favorites", make_item(ItemKind.LESSON, "l1"))

        items = await _resolver(gateway).list_items("favorites")

        assert [item.id for item in items] == ["l1"]
        assert gateway.calls_to("fetch_collection_items") == [
            ("fetch_collection_items", "sys-favorites")
        ]

    async def test_merges_self_tagged_conversations(self) -> None:
        gateway = FakeGateway()
        _join(gateway, "c1", make_item(CONV, "A"), make_item(CONV, "B"))
        source = FakeConversationSource(
            [
                make_item(CONV, "B", collection_ids=("c1",)),
                make_item(CONV, "C", collection_ids=("c1",)),
                make_item(CONV, "D", collection_ids=("other",)),
            ]
        )

        items = await _resolver(gateway, source).list_items("c1")

        assert [item.id for item in items] == ["A", "B", "C"]

    async def test_favorites_without_table_is_empty(self) -> None:
        gateway = FakeGateway()
        gateway.provisioned = False

        assert await _resolver(gateway).list_items("favorites") == []

    async def test_other_failures_propagate(self) -> None:
        gateway = FakeGateway()
        gateway.fail_next["fetch_collection_items"] = TransientError("down")

        with pytest.raises(TransientError):
            await _resolver(gateway).list_items("c1")

    async def test_conversation_scope_skips_join(self) -> None:
        gateway = FakeGateway()
        source = FakeConversationSource([make_item(CONV, "A"), make_item(CONV, "B")])

        items = await _resolver(gateway, source).list_items("conversations")

        assert [item.id for item in items] == ["A", "B"]
        assert gateway.calls_to("fetch_collection_items") == []

    async def test_personal_context_profile_singleton(self) -> None:
        gateway = FakeGateway()
        _join(
            gateway,
            "sys-personal-context",
            make_item(ItemKind.CONTEXT_PROFILE, "p2", created_at=NOW),
            make_item(ItemKind.CONTEXT_PROFILE, "p1", created_at=NOW - timedelta(hours=1)),
        )

        items = await _resolver(gateway).list_items("personal-context")

        assert [item.id for item in items] == ["p1"]

    async def test_personal_context_placeholder(self) -> None:
        gateway = FakeGateway()

        items = await _resolver(gateway).list_items("personal-context")

        assert [item.id for item in items] == [VIRTUAL_PROFILE_ID]
        assert items[0].is_virtual

    async def test_unresolved_personal_context_lists_nothing(self) -> None:
        gateway = FakeGateway()
        resolver = AggregationResolver(gateway, AliasResolver())

        assert await resolver.list_items("personal-context") == []
        assert gateway.calls_to("fetch_collection_items") == [
            ("fetch_collection_items", "personal-context")
        ]
