"""Domain errors raised by hierarchy operations.

Every error is a recoverable, user-facing validation outcome. Each carries an
HTTP status, a stable name, a message, and a ``details`` dict naming the
offending field and value so a client can highlight the exact input.
"""
from typing import Any, Dict, List, Optional

from fastapi import status

from questionbank.core.hierarchy_types import SiblingKind


class HierarchyError(Exception):
    """Base class for knowledge area and topic errors."""
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.name,
            "message": self.message,
            "details": self.details,
        }


class KnowledgeAreaNotFoundError(HierarchyError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, area_id: int, field: str = "id"):
        super().__init__(
            f"There exists no knowledge area with id {area_id}",
            {"field": field, "bad_value": area_id}
        )
        self.area_id = area_id


class TopicNotFoundError(HierarchyError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, topic_id: int, field: str = "topicId"):
        super().__init__(
            f"There exists no topic with id {topic_id}",
            {"field": field, "bad_value": topic_id}
        )
        self.topic_id = topic_id


class ParentNotFoundError(HierarchyError):
    """The referenced parent area (parentId / areaId) does not exist."""
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, parent_id: int, field: str = "parentId"):
        super().__init__(
            f"There exists no knowledge area with id {parent_id}",
            {"field": field, "bad_value": parent_id}
        )
        self.parent_id = parent_id


class NameConflictError(HierarchyError):
    """A sibling (area or topic) under the same parent already uses the name."""
    status_code = status.HTTP_409_CONFLICT

    def __init__(
        self,
        name: str,
        parent_id: Optional[int],
        existing_kind: SiblingKind,
        existing_id: Optional[int],
        field: str = "name"
    ):
        if parent_id is None:
            message = f"There exists already a top-level knowledge area with name '{name}'"
        else:
            message = (
                f"Knowledge area {parent_id} already has a child "
                f"{existing_kind.value} with name '{name}'"
            )
        super().__init__(message, {
            "field": field,
            "bad_value": name,
            "parent_id": parent_id,
            "existing_child": {"type": existing_kind.value, "id": existing_id},
        })
        self.parent_id = parent_id
        self.existing_kind = existing_kind
        self.existing_id = existing_id


class SelfParentingError(HierarchyError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, area_id: int):
        super().__init__(
            "A knowledge area cannot be a parent of itself",
            {
                "fields": [
                    {"url_param": "id", "value": area_id},
                    {"field": "parentId", "bad_value": area_id},
                ]
            }
        )
        self.area_id = area_id


class AreaCycleError(HierarchyError):
    """Moving an area under one of its own descendants."""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, area_id: int, parent_id: int, cycle_path: List[int], cycle_names: List[str]):
        super().__init__(
            f"Knowledge area {area_id} cannot be moved under its own descendant {parent_id}",
            {
                "field": "parentId",
                "bad_value": parent_id,
                "cycle_path": cycle_path,
                "cycle_names": cycle_names,
            }
        )
        self.area_id = area_id
        self.cycle_path = cycle_path


class HasChildrenError(HierarchyError):
    """Deletion is restricted while an area still has child areas or topics."""
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED

    def __init__(self, area_id: int, child_areas: int = 0, child_topics: int = 0):
        super().__init__(
            f"Cannot delete knowledge area {area_id} because it has children",
            {
                "url_param": "id",
                "bad_value": area_id,
                "child_areas": child_areas,
                "child_topics": child_topics,
            }
        )
        self.area_id = area_id
