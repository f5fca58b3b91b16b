from dataclasses import dataclass
from enum import StrEnum

from learnhub.domain.collections.item_kind import ItemKind
from learnhub.domain.common.value_object import ValueObject


class MembershipOp(StrEnum):
    ADD = "ADD"
    REMOVE = "REMOVE"


@dataclass(frozen=True)
class MembershipKey(ValueObject):
    """One membership row: which item, of which kind, in which collection."""

    item_kind: ItemKind
    item_id: str
    collection_id: str

    @property
    def item_key(self) -> tuple[ItemKind, str]:
        return (self.item_kind, self.item_id)
