"""Consistency rules for knowledge area and topic mutations.

Knowledge areas and topics live in separate tables, so each table's unique
index only ever sees its own rows. A name must be unique among *all* children
of an area, whichever table the child lives in, so the cross-table half of
that rule is checked here before every create, rename and move. The per-table
unique indexes still catch same-table collisions, including ones lost to a
concurrent writer between our check and the write; those surface as the same
NameConflictError.

Known gap: a concurrent writer can still slip a cross-table duplicate in
between the sibling check and the write, because no index spans both tables.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from questionbank.core.errors import (
    AreaCycleError,
    HasChildrenError,
    KnowledgeAreaNotFoundError,
    NameConflictError,
    ParentNotFoundError,
    SelfParentingError,
    TopicNotFoundError,
)
from questionbank.core.hierarchy_store import (
    ForeignKeyViolation,
    HierarchyStore,
    NotFound,
    RestrictViolation,
    UniqueViolation,
)
from questionbank.core.hierarchy_types import HierarchyChildren, SiblingKind
from questionbank.models.knowledge_area import KnowledgeArea
from questionbank.models.topic import Topic

logger = logging.getLogger(__name__)


class HierarchyService:
    """Runs each hierarchy operation as one validate -> write -> commit unit."""

    def __init__(self, db: Session):
        self.db = db
        self.store = HierarchyStore(db)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_top_level_areas(self, name_filter: Optional[str] = None) -> List[KnowledgeArea]:
        return self.store.get_top_level_areas(name_filter)

    def get_area(self, area_id: int, field: str = "id") -> KnowledgeArea:
        try:
            return self.store.get_area(area_id)
        except NotFound:
            raise KnowledgeAreaNotFoundError(area_id, field=field)

    def get_area_ancestors(self, area_id: int) -> List[KnowledgeArea]:
        return self.store.get_ancestors(self.get_area(area_id))

    def get_children(
        self,
        area_id: int,
        name_filter: Optional[str] = None,
        kind: Optional[SiblingKind] = None
    ) -> HierarchyChildren:
        try:
            children = self.store.get_children(area_id, name_filter)
        except NotFound:
            raise KnowledgeAreaNotFoundError(area_id)

        if kind is SiblingKind.AREA:
            children.topics = []
        elif kind is SiblingKind.TOPIC:
            children.areas = []
        return children

    def get_topic(self, topic_id: int) -> Topic:
        try:
            return self.store.get_topic(topic_id)
        except NotFound:
            raise TopicNotFoundError(topic_id)

    def get_topic_path(self, topic: Topic) -> List[str]:
        """Names of the areas above a topic, root first, including its own area."""
        area = self.store.get_area(topic.area_id)
        return [a.name for a in self.store.get_ancestors(area)] + [area.name]

    def find_topics(self, area_id: Optional[int] = None, name_prefix: Optional[str] = None) -> List[Topic]:
        return self.store.find_topics(area_id, name_prefix)

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def ensure_not_self_parent(self, area_id: int, parent_id: Optional[int]) -> None:
        if parent_id is not None and parent_id == area_id:
            logger.info("Rejected self-parenting of knowledge area %s", area_id)
            raise SelfParentingError(area_id)

    def ensure_no_cycle(self, area_id: int, parent_id: Optional[int]) -> None:
        """Reject moving `area_id` under one of its own descendants."""
        if parent_id is None:
            return

        chain = []
        seen = set()
        current_id = parent_id
        while current_id is not None and current_id not in seen:
            if current_id == area_id:
                # chain runs parent -> ... -> child of area_id; close the loop.
                cycle_path = [area_id] + list(reversed(chain)) + [area_id]
                names = {
                    a.id: a.name
                    for a in self.db.query(KnowledgeArea).filter(KnowledgeArea.id.in_(cycle_path))
                }
                cycle_names = [names.get(i, f"Area {i}") for i in cycle_path]
                logger.info("Rejected move of knowledge area %s under descendant %s", area_id, parent_id)
                raise AreaCycleError(area_id, parent_id, cycle_path, cycle_names)

            seen.add(current_id)
            chain.append(current_id)
            parent = self.db.get(KnowledgeArea, current_id)
            current_id = parent.parent_id if parent is not None else None

    def ensure_no_sibling(
        self,
        kind: SiblingKind,
        parent_id: Optional[int],
        name: str,
        field: str = "name"
    ) -> None:
        """Raise NameConflictError if a child of `kind` under `parent_id` is named `name`."""
        sibling = self.store.find_sibling(kind, parent_id, name)
        if sibling is not None:
            logger.info(
                "Rejected name '%s' under %s: conflicts with %s %s",
                name, parent_id, sibling.kind.value, sibling.id
            )
            raise NameConflictError(name, parent_id, sibling.kind, sibling.id, field=field)

    # ------------------------------------------------------------------
    # Knowledge areas
    # ------------------------------------------------------------------

    def create_area(self, name: str, parent_id: Optional[int] = None) -> int:
        """Create a top-level area (parent_id=None) or a child area."""
        self.ensure_no_sibling(SiblingKind.TOPIC, parent_id, name)

        try:
            area_id = self.store.create_area(name, parent_id)
        except ForeignKeyViolation:
            self.db.rollback()
            raise ParentNotFoundError(parent_id, field="id")
        except UniqueViolation:
            raise self._area_conflict(name, parent_id)

        self.db.commit()
        logger.info("Created knowledge area %s '%s' under %s", area_id, name, parent_id)
        return area_id

    def update_area(self, area_id: int, name: str, parent_id: Optional[int]) -> None:
        """Rename and/or move an area."""
        self.get_area(area_id)
        self.ensure_not_self_parent(area_id, parent_id)
        self.ensure_no_cycle(area_id, parent_id)
        self.ensure_no_sibling(SiblingKind.TOPIC, parent_id, name)

        try:
            self.store.rename_or_move_area(area_id, name, parent_id)
        except NotFound:
            raise KnowledgeAreaNotFoundError(area_id)
        except ForeignKeyViolation:
            self.db.rollback()
            raise ParentNotFoundError(parent_id, field="parentId")
        except UniqueViolation:
            raise self._area_conflict(name, parent_id, exclude_id=area_id)

        self.db.commit()
        logger.info("Updated knowledge area %s to '%s' under %s", area_id, name, parent_id)

    def delete_area(self, area_id: int) -> None:
        try:
            self.store.delete_area(area_id)
        except NotFound:
            raise KnowledgeAreaNotFoundError(area_id)
        except RestrictViolation as e:
            logger.info("Rejected deletion of knowledge area %s: it has children", area_id)
            raise HasChildrenError(area_id, e.child_areas, e.child_topics)

        self.db.commit()
        logger.info("Deleted knowledge area %s", area_id)

    def _area_conflict(self, name: str, parent_id: Optional[int], exclude_id: Optional[int] = None) -> NameConflictError:
        sibling = self.store.find_sibling(SiblingKind.AREA, parent_id, name, exclude_id=exclude_id)
        existing_id = sibling.id if sibling is not None else None
        logger.info("Rejected area name '%s' under %s: conflicts with area %s", name, parent_id, existing_id)
        return NameConflictError(name, parent_id, SiblingKind.AREA, existing_id)

    # ------------------------------------------------------------------
    # Topics
    # ------------------------------------------------------------------

    def create_topic(self, name: str, area_id: int) -> int:
        self.ensure_no_sibling(SiblingKind.AREA, area_id, name, field="topicName")

        try:
            topic_id = self.store.create_topic(name, area_id)
        except ForeignKeyViolation:
            self.db.rollback()
            raise ParentNotFoundError(area_id, field="areaId")
        except UniqueViolation:
            raise self._topic_conflict(name, area_id)

        self.db.commit()
        logger.info("Created topic %s '%s' under %s", topic_id, name, area_id)
        return topic_id

    def update_topic(self, topic_id: int, name: str, area_id: int) -> None:
        """Rename and/or move a topic to another area."""
        self.get_topic(topic_id)
        self.ensure_no_sibling(SiblingKind.AREA, area_id, name, field="topicName")

        try:
            self.store.rename_or_move_topic(topic_id, name, area_id)
        except NotFound:
            raise TopicNotFoundError(topic_id)
        except ForeignKeyViolation:
            self.db.rollback()
            raise ParentNotFoundError(area_id, field="areaId")
        except UniqueViolation:
            raise self._topic_conflict(name, area_id, exclude_id=topic_id)

        self.db.commit()
        logger.info("Updated topic %s to '%s' under %s", topic_id, name, area_id)

    def delete_topic(self, topic_id: int) -> None:
        try:
            self.store.delete_topic(topic_id)
        except NotFound:
            raise TopicNotFoundError(topic_id)

        self.db.commit()
        logger.info("Deleted topic %s", topic_id)

    def _topic_conflict(self, name: str, area_id: int, exclude_id: Optional[int] = None) -> NameConflictError:
        sibling = self.store.find_sibling(SiblingKind.TOPIC, area_id, name, exclude_id=exclude_id)
        existing_id = sibling.id if sibling is not None else None
        logger.info("Rejected topic name '%s' under %s: conflicts with topic %s", name, area_id, existing_id)
        return NameConflictError(name, area_id, SiblingKind.TOPIC, existing_id, field="topicName")
