"""Models package."""
from questionbank.models.base import Base
from questionbank.models.knowledge_area import KnowledgeArea
from questionbank.models.topic import Topic

__all__ = ["Base", "KnowledgeArea", "Topic"]
