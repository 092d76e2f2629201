"""Knowledge area tree nodes backed by the question bank API."""
from typing import List, Optional

from questionbank.client.api_client import QuestionBankClient
from questionbank.client.tree import ROOT, NodeKey, TreeNode
from questionbank.core.hierarchy_types import SiblingKind


def area_key(area_id: int) -> NodeKey:
    return NodeKey((SiblingKind.AREA.value, area_id))


def topic_key(topic_id: int) -> NodeKey:
    return NodeKey((SiblingKind.TOPIC.value, topic_id))


class TopicTreeNode(TreeNode):
    """A topic. Topics never have children."""

    def __init__(self, topic_id: int, name: str, area_id: int):
        super().__init__(topic_key(topic_id))
        self.id = topic_id
        self.name = name
        self.area_id = area_id

    def is_leaf(self) -> bool:
        return True

    def update_from(self, other: TreeNode) -> None:
        if isinstance(other, TopicTreeNode):
            self.name = other.name
            self.area_id = other.area_id

    def __str__(self) -> str:
        return self.name


class KnowledgeAreaTreeNode(TreeNode):
    """A knowledge area. Its children are its child areas followed by its topics."""

    def __init__(
        self,
        client: QuestionBankClient,
        area_id: Optional[int],
        name: str,
        include_topics: bool = True,
        key=None
    ):
        super().__init__(key if key is not None else area_key(area_id))
        self.client = client
        self.id = area_id
        self.name = name
        self.include_topics = include_topics

    async def fetch_children(self) -> List[TreeNode]:
        kind = None if self.include_topics else SiblingKind.AREA.value
        children = await self.client.get_children_of_knowledge_area(self.id, type=kind)

        nodes: List[TreeNode] = []
        for child in children:
            if child.type == SiblingKind.AREA.value:
                nodes.append(KnowledgeAreaTreeNode(self.client, child.id, child.name, self.include_topics))
            else:
                nodes.append(TopicTreeNode(child.id, child.name, self.id))
        return nodes

    def update_from(self, other: TreeNode) -> None:
        if isinstance(other, KnowledgeAreaTreeNode):
            self.name = other.name

    def child_areas(self) -> List["KnowledgeAreaTreeNode"]:
        """Cached child areas."""
        return [c for c in self.cache.cached_children(self.key) if isinstance(c, KnowledgeAreaTreeNode)]

    def child_topics(self) -> List[TopicTreeNode]:
        """Cached child topics."""
        return [c for c in self.cache.cached_children(self.key) if isinstance(c, TopicTreeNode)]

    def has_child_area_with_name(self, name: str) -> bool:
        lowered = name.lower()
        return self.has_child(lambda c: isinstance(c, KnowledgeAreaTreeNode) and c.name.lower() == lowered)

    def has_child_topic_with_name(self, name: str) -> bool:
        lowered = name.lower()
        return self.has_child(lambda c: isinstance(c, TopicTreeNode) and c.name.lower() == lowered)

    def get_child_type(self, name: str) -> Optional[SiblingKind]:
        """
        Kind of the cached child called `name`, ignoring case, or None.

        Used to warn about a name clash before asking the server.
        """
        lowered = name.lower()
        child = self.find_child(lambda c: str(c).lower() == lowered)
        if child is None:
            return None
        return SiblingKind.TOPIC if isinstance(child, TopicTreeNode) else SiblingKind.AREA

    async def find_area(self, area_id: int) -> Optional["KnowledgeAreaTreeNode"]:
        """Search the subtree for an area, fetching as needed."""
        return await self.get_child(lambda c: isinstance(c, KnowledgeAreaTreeNode) and c.id == area_id)

    async def find_topic(self, topic_id: int) -> Optional[TopicTreeNode]:
        """Search the subtree for a topic, fetching as needed."""
        return await self.get_child(lambda c: isinstance(c, TopicTreeNode) and c.id == topic_id)

    def __str__(self) -> str:
        return self.name


class KnowledgeAreaTreeRootNode(KnowledgeAreaTreeNode):
    """Synthetic root whose children are the top-level knowledge areas."""

    def __init__(self, client: QuestionBankClient, include_topics: bool = True):
        super().__init__(client, None, "", include_topics, key=ROOT)

    async def fetch_children(self) -> List[TreeNode]:
        areas = await self.client.get_top_level_knowledge_areas()
        return [KnowledgeAreaTreeNode(self.client, a.id, a.name, self.include_topics) for a in areas]
