"""Tests for the hierarchy consistency rules."""
import pytest

from questionbank.core.errors import (
    AreaCycleError,
    HasChildrenError,
    KnowledgeAreaNotFoundError,
    NameConflictError,
    ParentNotFoundError,
    SelfParentingError,
    TopicNotFoundError,
)
from questionbank.core.hierarchy_rules import HierarchyService
from questionbank.core.hierarchy_types import SiblingKind


@pytest.fixture
def service(db_session):
    return HierarchyService(db_session)


class TestWalkthrough:
    """Math / Algebra walkthrough on an empty database."""

    def test_conflicts_self_parenting_and_delete_order(self, service):
        math_id = service.create_area("Math")
        algebra_id = service.create_area("Algebra", math_id)
        assert (math_id, algebra_id) == (1, 2)

        with pytest.raises(NameConflictError) as exc_info:
            service.create_topic("Algebra", math_id)
        assert exc_info.value.existing_kind is SiblingKind.AREA
        assert exc_info.value.existing_id == algebra_id
        assert exc_info.value.details["field"] == "topicName"

        with pytest.raises(SelfParentingError):
            service.update_area(algebra_id, "Algebra", algebra_id)

        with pytest.raises(HasChildrenError):
            service.delete_area(math_id)

        service.delete_area(algebra_id)
        service.delete_area(math_id)
        assert service.get_top_level_areas() == []


class TestAreaNames:
    """Sibling name uniqueness across both tables."""

    def test_duplicate_child_area(self, service, area_hierarchy):
        with pytest.raises(NameConflictError) as exc_info:
            service.create_area("Algebra", area_hierarchy["math"].id)
        error = exc_info.value
        assert error.status_code == 409
        assert error.existing_kind is SiblingKind.AREA
        assert error.existing_id == area_hierarchy["algebra"].id

    def test_duplicate_top_level_area(self, service, area_hierarchy):
        with pytest.raises(NameConflictError) as exc_info:
            service.create_area("Physics")
        assert exc_info.value.existing_id == area_hierarchy["physics"].id
        assert "top-level" in exc_info.value.message

    def test_area_named_like_sibling_topic(self, service, area_hierarchy):
        with pytest.raises(NameConflictError) as exc_info:
            service.create_area("Polynomials", area_hierarchy["algebra"].id)
        assert exc_info.value.existing_kind is SiblingKind.TOPIC
        assert exc_info.value.existing_id == area_hierarchy["polynomials"].id

    def test_names_are_case_sensitive(self, service, area_hierarchy):
        area_id = service.create_area("algebra", area_hierarchy["math"].id)
        assert area_id

    def test_rename_to_sibling_name(self, service, area_hierarchy):
        with pytest.raises(NameConflictError) as exc_info:
            service.update_area(area_hierarchy["geometry"].id, "Algebra", area_hierarchy["math"].id)
        assert exc_info.value.existing_id == area_hierarchy["algebra"].id

    def test_rename_keeping_own_name(self, service, area_hierarchy):
        geometry = area_hierarchy["geometry"]
        service.update_area(geometry.id, "Geometry", geometry.parent_id)
        assert service.get_area(geometry.id).name == "Geometry"

    def test_move_into_area_with_clashing_topic(self, service, area_hierarchy):
        area_id = service.create_area("Polynomials", area_hierarchy["physics"].id)
        with pytest.raises(NameConflictError) as exc_info:
            service.update_area(area_id, "Polynomials", area_hierarchy["algebra"].id)
        assert exc_info.value.existing_kind is SiblingKind.TOPIC


class TestTopicNames:

    def test_duplicate_topic(self, service, area_hierarchy):
        with pytest.raises(NameConflictError) as exc_info:
            service.create_topic("Polynomials", area_hierarchy["algebra"].id)
        assert exc_info.value.existing_kind is SiblingKind.TOPIC
        assert exc_info.value.existing_id == area_hierarchy["polynomials"].id

    def test_topic_named_like_sibling_area(self, service, area_hierarchy):
        with pytest.raises(NameConflictError) as exc_info:
            service.create_topic("Geometry", area_hierarchy["math"].id)
        assert exc_info.value.existing_kind is SiblingKind.AREA

    def test_rename_topic_to_sibling_name(self, service, area_hierarchy):
        with pytest.raises(NameConflictError):
            service.update_topic(area_hierarchy["linear"].id, "Polynomials", area_hierarchy["algebra"].id)

    def test_move_topic(self, service, area_hierarchy):
        topic_id = area_hierarchy["linear"].id
        service.update_topic(topic_id, "Lines", area_hierarchy["geometry"].id)
        topic = service.get_topic(topic_id)
        assert topic.name == "Lines"
        assert topic.area_id == area_hierarchy["geometry"].id

    def test_topic_under_missing_area(self, service, area_hierarchy):
        with pytest.raises(ParentNotFoundError) as exc_info:
            service.create_topic("Orphan", 9999)
        assert exc_info.value.details == {"field": "areaId", "bad_value": 9999}

    def test_delete_missing_topic(self, service, area_hierarchy):
        with pytest.raises(TopicNotFoundError):
            service.delete_topic(9999)

    def test_topic_path(self, service, area_hierarchy):
        path = service.get_topic_path(area_hierarchy["linear"])
        assert path == ["Mathematics", "Algebra"]


class TestMoves:
    """Parent changes: self-parenting, cycles and missing parents."""

    def test_self_parenting(self, service, area_hierarchy):
        math_id = area_hierarchy["math"].id
        with pytest.raises(SelfParentingError) as exc_info:
            service.update_area(math_id, "Mathematics", math_id)
        assert exc_info.value.status_code == 400

    def test_move_under_descendant(self, service, area_hierarchy):
        math_id = area_hierarchy["math"].id
        algebra_id = area_hierarchy["algebra"].id
        linear_algebra_id = service.create_area("Linear Algebra", algebra_id)

        with pytest.raises(AreaCycleError) as exc_info:
            service.update_area(math_id, "Mathematics", linear_algebra_id)

        details = exc_info.value.details
        assert details["cycle_path"] == [math_id, algebra_id, linear_algebra_id, math_id]
        assert details["cycle_names"] == ["Mathematics", "Algebra", "Linear Algebra", "Mathematics"]
        # Nothing was written
        assert service.get_area(math_id).parent_id is None

    def test_move_to_top_level(self, service, area_hierarchy):
        algebra_id = area_hierarchy["algebra"].id
        service.update_area(algebra_id, "Algebra", None)
        assert service.get_area(algebra_id).parent_id is None
        assert [a.name for a in service.get_top_level_areas()] == ["Algebra", "Mathematics", "Physics"]

    def test_move_under_missing_parent(self, service, area_hierarchy):
        with pytest.raises(ParentNotFoundError) as exc_info:
            service.update_area(area_hierarchy["algebra"].id, "Algebra", 9999)
        assert exc_info.value.details["field"] == "parentId"

    def test_create_under_missing_parent(self, service, area_hierarchy):
        with pytest.raises(ParentNotFoundError) as exc_info:
            service.create_area("Orphan", 9999)
        assert exc_info.value.details["field"] == "id"

    def test_update_missing_area(self, service, area_hierarchy):
        with pytest.raises(KnowledgeAreaNotFoundError):
            service.update_area(9999, "Nothing", None)


class TestDeletes:

    def test_delete_area_with_topics(self, service, area_hierarchy):
        with pytest.raises(HasChildrenError) as exc_info:
            service.delete_area(area_hierarchy["algebra"].id)
        assert exc_info.value.status_code == 405
        assert exc_info.value.details["child_topics"] == 2

    def test_delete_childless_area(self, service, area_hierarchy):
        service.delete_area(area_hierarchy["physics"].id)
        with pytest.raises(KnowledgeAreaNotFoundError):
            service.get_area(area_hierarchy["physics"].id)

    def test_delete_missing_area(self, service, area_hierarchy):
        with pytest.raises(KnowledgeAreaNotFoundError):
            service.delete_area(9999)

    def test_children_filtered_by_kind(self, service, area_hierarchy):
        children = service.get_children(area_hierarchy["algebra"].id, kind=SiblingKind.AREA)
        assert len(children) == 0
