"""Tests for the demo hierarchy seed."""
from questionbank.core.hierarchy_rules import HierarchyService
from questionbank.seed import seed_database

HIERARCHY = {
    "Mathematics": {
        "Algebra": ["Polynomials", "Matrices"],
        "Geometry": {
            "Plane Geometry": ["Triangles"],
        },
    },
    "Physics": ["Kinematics"],
}


class TestSeed:

    def test_seed_creates_hierarchy(self, db_session):
        created = seed_database(db_session, HIERARCHY)
        # 5 areas and 4 topics
        assert created == 9

        service = HierarchyService(db_session)
        assert [a.name for a in service.get_top_level_areas()] == ["Mathematics", "Physics"]

        triangles = service.find_topics(name_prefix="Tri")[0]
        assert service.get_topic_path(triangles) == ["Mathematics", "Geometry", "Plane Geometry"]

    def test_seed_is_idempotent(self, db_session):
        seed_database(db_session, HIERARCHY)
        assert seed_database(db_session, HIERARCHY) == 0

    def test_seed_fills_in_missing_nodes(self, db_session, area_hierarchy):
        created = seed_database(db_session, HIERARCHY)
        # Only Matrices, Plane Geometry, Triangles and Kinematics are new
        assert created == 4
