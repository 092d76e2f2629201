"""Persistence for the knowledge area / topic hierarchy.

The store wraps one SQLAlchemy session and exposes the operations the
consistency rules rely on. It only enforces what the schema itself can
express (foreign keys, per-table unique indexes, restrict-on-delete) and
reports those failures as store-level violations. Writes are flushed, never
committed; committing is up to the caller's unit of work.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from questionbank.core.hierarchy_types import HierarchyChildren, Sibling, SiblingKind
from questionbank.models.knowledge_area import KnowledgeArea
from questionbank.models.topic import Topic

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for failures reported by the hierarchy store."""


class NotFound(StoreError):
    def __init__(self, kind: SiblingKind, entity_id: int):
        super().__init__(f"{kind.value} {entity_id} not found")
        self.kind = kind
        self.entity_id = entity_id


class UniqueViolation(StoreError):
    """Another row of the same table already has this name under this parent."""

    def __init__(self, kind: SiblingKind, parent_id: Optional[int], name: str):
        super().__init__(f"duplicate {kind.value} name '{name}' under parent {parent_id}")
        self.kind = kind
        self.parent_id = parent_id
        self.name = name


class ForeignKeyViolation(StoreError):
    """The referenced parent area does not exist."""

    def __init__(self, parent_id: int):
        super().__init__(f"knowledge area {parent_id} does not exist")
        self.parent_id = parent_id


class RestrictViolation(StoreError):
    """The area still has dependents and cannot be deleted."""

    def __init__(self, area_id: int, child_areas: int = 0, child_topics: int = 0):
        super().__init__(f"knowledge area {area_id} has children")
        self.area_id = area_id
        self.child_areas = child_areas
        self.child_topics = child_topics


def _name_filter(column, name_filter: Optional[str]):
    return column.ilike(f"%{name_filter}%")


class HierarchyStore:
    """Reads and writes knowledge areas and topics through one session."""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def area_exists(self, area_id: int) -> bool:
        return self.db.query(KnowledgeArea.id).filter(KnowledgeArea.id == area_id).first() is not None

    def get_area(self, area_id: int) -> KnowledgeArea:
        area = self.db.get(KnowledgeArea, area_id)
        if area is None:
            raise NotFound(SiblingKind.AREA, area_id)
        return area

    def get_topic(self, topic_id: int) -> Topic:
        topic = self.db.get(Topic, topic_id)
        if topic is None:
            raise NotFound(SiblingKind.TOPIC, topic_id)
        return topic

    def get_top_level_areas(self, name_filter: Optional[str] = None) -> List[KnowledgeArea]:
        query = self.db.query(KnowledgeArea).filter(KnowledgeArea.parent_id.is_(None))
        if name_filter:
            query = query.filter(_name_filter(KnowledgeArea.name, name_filter))
        return query.order_by(KnowledgeArea.name).all()

    def get_children(self, area_id: int, name_filter: Optional[str] = None) -> HierarchyChildren:
        """Return the child areas and topics of an existing area."""
        if not self.area_exists(area_id):
            raise NotFound(SiblingKind.AREA, area_id)

        areas = self.db.query(KnowledgeArea).filter(KnowledgeArea.parent_id == area_id)
        topics = self.db.query(Topic).filter(Topic.area_id == area_id)
        if name_filter:
            areas = areas.filter(_name_filter(KnowledgeArea.name, name_filter))
            topics = topics.filter(_name_filter(Topic.name, name_filter))

        return HierarchyChildren(
            areas=areas.order_by(KnowledgeArea.name).all(),
            topics=topics.order_by(Topic.name).all(),
        )

    def count_children(self, area_id: int) -> Tuple[int, int]:
        """Return (child area count, child topic count)."""
        child_areas = self.db.query(func.count(KnowledgeArea.id)).filter(
            KnowledgeArea.parent_id == area_id
        ).scalar() or 0
        child_topics = self.db.query(func.count(Topic.id)).filter(
            Topic.area_id == area_id
        ).scalar() or 0
        return child_areas, child_topics

    def get_ancestors(self, area: KnowledgeArea) -> List[KnowledgeArea]:
        """Get all ancestors from root to parent (excluding self)."""
        ancestors = []
        seen = {area.id}
        current_id = area.parent_id
        while current_id is not None and current_id not in seen:
            parent = self.db.get(KnowledgeArea, current_id)
            if parent is None:
                break
            ancestors.insert(0, parent)
            seen.add(parent.id)
            current_id = parent.parent_id
        return ancestors

    def find_topics(
        self,
        area_id: Optional[int] = None,
        name_prefix: Optional[str] = None
    ) -> List[Topic]:
        query = self.db.query(Topic)
        if area_id is not None:
            query = query.filter(Topic.area_id == area_id)
        if name_prefix:
            query = query.filter(Topic.name.ilike(f"{name_prefix}%"))
        return query.order_by(Topic.name).all()

    def find_sibling(
        self,
        kind: SiblingKind,
        parent_id: Optional[int],
        name: str,
        exclude_id: Optional[int] = None
    ) -> Optional[Sibling]:
        """Look up a child of `parent_id` named exactly `name` in the table for `kind`.

        Comparison is case-sensitive, matching the unique indexes.
        """
        if kind is SiblingKind.AREA:
            model, parent_column = KnowledgeArea, KnowledgeArea.parent_id
        else:
            if parent_id is None:
                # Topics always hang off an area.
                return None
            model, parent_column = Topic, Topic.area_id

        query = self.db.query(model.id, model.name).filter(model.name == name)
        if parent_id is None:
            query = query.filter(parent_column.is_(None))
        else:
            query = query.filter(parent_column == parent_id)
        if exclude_id is not None:
            query = query.filter(model.id != exclude_id)

        row = query.first()
        if row is None:
            return None
        return Sibling(kind=kind, id=row.id, name=row.name, parent_id=parent_id)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_area(self, name: str, parent_id: Optional[int]) -> int:
        if parent_id is not None and not self.area_exists(parent_id):
            raise ForeignKeyViolation(parent_id)

        area = KnowledgeArea(name=name, parent_id=parent_id)
        self.db.add(area)
        self._flush(SiblingKind.AREA, parent_id, name)
        logger.debug("Inserted knowledge area %s '%s' under %s", area.id, name, parent_id)
        return area.id

    def rename_or_move_area(self, area_id: int, name: str, new_parent_id: Optional[int]) -> None:
        area = self.get_area(area_id)
        if new_parent_id is not None and not self.area_exists(new_parent_id):
            raise ForeignKeyViolation(new_parent_id)

        area.name = name
        area.parent_id = new_parent_id
        self._flush(SiblingKind.AREA, new_parent_id, name)
        logger.debug("Updated knowledge area %s to '%s' under %s", area_id, name, new_parent_id)

    def delete_area(self, area_id: int) -> None:
        area = self.get_area(area_id)
        child_areas, child_topics = self.count_children(area_id)
        if child_areas or child_topics:
            raise RestrictViolation(area_id, child_areas, child_topics)

        self.db.delete(area)
        try:
            self.db.flush()
        except IntegrityError as e:
            # A child was inserted concurrently; the RESTRICT foreign key caught it.
            self.db.rollback()
            raise RestrictViolation(area_id) from e
        logger.debug("Deleted knowledge area %s", area_id)

    def create_topic(self, name: str, area_id: int) -> int:
        if not self.area_exists(area_id):
            raise ForeignKeyViolation(area_id)

        topic = Topic(name=name, area_id=area_id)
        self.db.add(topic)
        self._flush(SiblingKind.TOPIC, area_id, name)
        logger.debug("Inserted topic %s '%s' under %s", topic.id, name, area_id)
        return topic.id

    def rename_or_move_topic(self, topic_id: int, name: str, area_id: int) -> None:
        topic = self.get_topic(topic_id)
        if not self.area_exists(area_id):
            raise ForeignKeyViolation(area_id)

        topic.name = name
        topic.area_id = area_id
        self._flush(SiblingKind.TOPIC, area_id, name)
        logger.debug("Updated topic %s to '%s' under %s", topic_id, name, area_id)

    def delete_topic(self, topic_id: int) -> None:
        topic = self.get_topic(topic_id)
        self.db.delete(topic)
        self.db.flush()
        logger.debug("Deleted topic %s", topic_id)

    def _flush(self, kind: SiblingKind, parent_id: Optional[int], name: str) -> None:
        """Flush pending writes, mapping integrity failures to store violations."""
        try:
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            # The parent may have been deleted between the existence check and the write.
            if parent_id is not None and not self.area_exists(parent_id):
                raise ForeignKeyViolation(parent_id) from e
            raise UniqueViolation(kind, parent_id, name) from e
