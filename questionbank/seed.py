"""Seed a demo knowledge hierarchy."""
import logging
from typing import Dict, List, Optional, Union

from sqlalchemy.orm import Session

from questionbank.core.config import configure_logging
from questionbank.core.database import SessionLocal, engine
from questionbank.core.hierarchy_rules import HierarchyService
from questionbank.models import Base, KnowledgeArea

logger = logging.getLogger(__name__)

# Nested dicts are areas; lists hold topic names of the enclosing area.
DEMO_HIERARCHY: Dict[str, Union[dict, list]] = {
    "Mathematics": {
        "Algebra": ["Linear Equations", "Polynomials", "Quadratic Equations"],
        "Geometry": {
            "Plane Geometry": ["Triangles", "Circles"],
            "Solid Geometry": ["Polyhedra"],
        },
        "Calculus": ["Limits", "Derivatives", "Integrals"],
    },
    "Computer Science": {
        "Algorithms": ["Sorting", "Graph Search", "Dynamic Programming"],
        "Data Structures": ["Trees", "Hash Tables", "Heaps"],
        "Databases": ["Normalization", "Transactions", "Indexes"],
    },
    "Physics": {
        "Mechanics": ["Kinematics", "Newton's Laws"],
        "Electromagnetism": ["Electric Fields", "Magnetic Fields"],
    },
}


def seed_subtree(service: HierarchyService, parent_id: Optional[int], subtree: Union[dict, list]) -> int:
    """Create the areas and topics of `subtree` under `parent_id`. Returns how many nodes were created."""
    created = 0
    if isinstance(subtree, list):
        existing = {t.name for t in service.find_topics(area_id=parent_id)}
        for topic_name in subtree:
            if topic_name not in existing:
                service.create_topic(topic_name, parent_id)
                created += 1
        return created

    for area_name, children in subtree.items():
        area = _find_area(service.db, parent_id, area_name)
        if area is None:
            area_id = service.create_area(area_name, parent_id)
            created += 1
        else:
            area_id = area.id
        created += seed_subtree(service, area_id, children)
    return created


def _find_area(db: Session, parent_id: Optional[int], name: str) -> Optional[KnowledgeArea]:
    query = db.query(KnowledgeArea).filter(KnowledgeArea.name == name)
    if parent_id is None:
        query = query.filter(KnowledgeArea.parent_id.is_(None))
    else:
        query = query.filter(KnowledgeArea.parent_id == parent_id)
    return query.first()


def seed_database(db: Optional[Session] = None, hierarchy: Optional[Dict[str, Union[dict, List[str]]]] = None) -> int:
    """Seed the demo hierarchy. Safe to run repeatedly."""
    owns_session = db is None
    if owns_session:
        Base.metadata.create_all(bind=engine)
        db = SessionLocal()

    try:
        created = seed_subtree(HierarchyService(db), None, hierarchy or DEMO_HIERARCHY)
    finally:
        if owns_session:
            db.close()

    if created:
        logger.info("Seeded %d knowledge areas and topics", created)
    else:
        logger.info("Knowledge hierarchy already seeded")
    return created


if __name__ == "__main__":
    configure_logging()
    seed_database()
