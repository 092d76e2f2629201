"""Topic model: the leaves of the content hierarchy."""
from typing import TYPE_CHECKING
from sqlalchemy import String, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from questionbank.models.base import Base

if TYPE_CHECKING:
    from questionbank.models.knowledge_area import KnowledgeArea

TOPIC_NAME_MAX_LENGTH = 255


class Topic(Base):
    """A topic, always attached to exactly one knowledge area. Topics have no children."""
    __tablename__ = "topic"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(TOPIC_NAME_MAX_LENGTH), nullable=False)
    area_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("knowledge_area.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    area: Mapped["KnowledgeArea"] = relationship(
        "KnowledgeArea",
        back_populates="topics"
    )

    __table_args__ = (
        UniqueConstraint("area_id", "name", name="uq_topic_area_name"),
    )

    def __repr__(self) -> str:
        return f"<Topic(id={self.id}, name={self.name}, area_id={self.area_id})>"
