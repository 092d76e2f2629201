"""Shared hierarchy value types."""
import enum
from dataclasses import dataclass, field
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from questionbank.models.knowledge_area import KnowledgeArea
    from questionbank.models.topic import Topic


class SiblingKind(str, enum.Enum):
    """The two kinds of child a knowledge area can have."""
    AREA = "area"
    TOPIC = "topic"


@dataclass
class HierarchyChildren:
    """Immediate children of one area (or the top level), each list ordered by name."""
    areas: List["KnowledgeArea"] = field(default_factory=list)
    topics: List["Topic"] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.areas) + len(self.topics)


@dataclass(frozen=True)
class Sibling:
    """A child found by a (parent, name) lookup."""
    kind: SiblingKind
    id: int
    name: str
    parent_id: Optional[int]
