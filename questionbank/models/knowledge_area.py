"""Knowledge area model: the internal nodes of the content hierarchy."""
from typing import List, Optional, TYPE_CHECKING
from sqlalchemy import String, Integer, ForeignKey, Index, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from questionbank.models.base import Base

if TYPE_CHECKING:
    from questionbank.models.topic import Topic

AREA_NAME_MIN_LENGTH = 2
AREA_NAME_MAX_LENGTH = 40


class KnowledgeArea(Base):
    """A knowledge area, possibly nested under another knowledge area.

    Uses a self-referential foreign key to support unlimited depth. A NULL
    parent_id marks a top-level area.
    """
    __tablename__ = "knowledge_area"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(AREA_NAME_MAX_LENGTH), nullable=False)
    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("knowledge_area.id", ondelete="RESTRICT"),
        nullable=True,
        index=True
    )

    # Self-referential relationships
    parent: Mapped[Optional["KnowledgeArea"]] = relationship(
        "KnowledgeArea",
        back_populates="children",
        remote_side="KnowledgeArea.id"
    )
    children: Mapped[List["KnowledgeArea"]] = relationship(
        "KnowledgeArea",
        back_populates="parent",
        passive_deletes="all",
        order_by="KnowledgeArea.name"
    )
    topics: Mapped[List["Topic"]] = relationship(
        "Topic",
        back_populates="area",
        passive_deletes="all",
        order_by="Topic.name"
    )

    def __repr__(self) -> str:
        return f"<KnowledgeArea(id={self.id}, name={self.name}, parent_id={self.parent_id})>"


# Top-level areas (parent_id IS NULL) are grouped under the sentinel parent 0,
# since a plain (parent_id, name) constraint lets NULL parents repeat names.
Index(
    "uq_knowledge_area_parent_name",
    func.coalesce(KnowledgeArea.parent_id, 0),
    KnowledgeArea.name,
    unique=True
)
