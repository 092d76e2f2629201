"""Lazily loaded, memoizing tree nodes.

A tree is browsed through `TreeNode` handles. Each concrete node type supplies
`fetch_children()`; `get_children()` calls it at most once per node and caches
the result. All bookkeeping lives in a `TreeNodeCache` shared by every node of
one tree: nodes indexed by key, a parent index, the resolved child keys, and
the fetches currently in flight. Nodes never point at each other directly.

Keys are either `ROOT`, for the synthetic root of a tree, or a `NodeKey`
wrapping an opaque hashable value.
"""
import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Callable, Dict, Hashable, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)


class RootKey:
    """Key of the synthetic root node. There is exactly one instance, `ROOT`."""
    _instance: Optional["RootKey"] = None

    def __new__(cls) -> "RootKey":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ROOT"

    def __reduce__(self):
        return (RootKey, ())


ROOT = RootKey()


@dataclass(frozen=True)
class NodeKey:
    """Key of an ordinary node."""
    value: Hashable

    def __str__(self) -> str:
        return str(self.value)


TreeKey = Union[RootKey, NodeKey]
Predicate = Callable[["TreeNode"], bool]


class TreeNodeCache:
    """Arena holding the nodes, parent links and resolved children of one tree."""

    def __init__(self):
        self._nodes: Dict[TreeKey, "TreeNode"] = {}
        self._parents: Dict[TreeKey, TreeKey] = {}
        # Absent key: never fetched. Empty tuple: fetched, no children.
        self._children: Dict[TreeKey, Tuple[TreeKey, ...]] = {}
        self._pending: Dict[TreeKey, "asyncio.Task[None]"] = {}
        # Bumped by invalidate(); a fetch started under an older value is discarded.
        self._generations: Dict[TreeKey, int] = {}

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, key: TreeKey) -> bool:
        return key in self._nodes

    def register(self, node: "TreeNode") -> "TreeNode":
        """Add a parentless node (a tree's root) to the arena."""
        existing = self._nodes.get(node.key)
        if existing is not None and existing is not node:
            raise ValueError(f"A different node with key {node.key!r} is already registered")
        self._nodes[node.key] = node
        node._cache = self
        return node

    def get(self, key: TreeKey) -> Optional["TreeNode"]:
        return self._nodes.get(key)

    def parent_of(self, key: TreeKey) -> Optional["TreeNode"]:
        parent_key = self._parents.get(key)
        return None if parent_key is None else self._nodes[parent_key]

    def is_resolved(self, key: TreeKey) -> bool:
        return key in self._children

    def is_fetching(self, key: TreeKey) -> bool:
        return key in self._pending

    def cached_children(self, key: TreeKey) -> List["TreeNode"]:
        """Children already resolved for `key`; empty when unresolved or childless."""
        return [self._nodes[k] for k in self._children.get(key, ())]

    def invalidate(self, key: TreeKey) -> None:
        """Forget the resolved children of `key` so the next access fetches again.

        The former children stay in the arena; when a new fetch returns the same
        keys, the existing nodes (and their own cached subtrees) are reused.
        A fetch already in flight for `key` is abandoned: its result is
        dropped and callers waiting on it fetch again.
        """
        self._children.pop(key, None)
        self._pending.pop(key, None)
        self._generations[key] = self._generations.get(key, 0) + 1

    async def get_children(self, node: "TreeNode") -> Optional[List["TreeNode"]]:
        """Resolve the children of `node`, fetching them at most once.

        Concurrent callers share a single in-flight fetch. A caller being
        cancelled does not cancel that fetch; its result is cached for the
        next caller. A failed fetch is not cached.
        """
        key = node.key
        while key not in self._children:
            task = self._pending.get(key)
            if task is None:
                task = asyncio.ensure_future(self._resolve(node, self._generations.get(key, 0)))
                task.add_done_callback(_retrieve_exception)
                self._pending[key] = task
            await asyncio.shield(task)

        children = self.cached_children(key)
        return children if children else None

    async def _resolve(self, node: "TreeNode", generation: int) -> None:
        key = node.key
        try:
            logger.debug("Fetching children of %r", key)
            fetched = await node.fetch_children()
            if self._generations.get(key, 0) != generation:
                logger.debug("Discarding children of %r fetched before invalidation", key)
                return

            # All or nothing: a bad child leaves the arena untouched.
            for child in fetched:
                self._check_adoptable(key, child)
            self._children[key] = tuple(self._adopt(key, child).key for child in fetched)
            logger.debug("Cached %d children of %r", len(fetched), key)
        finally:
            if self._generations.get(key, 0) == generation:
                self._pending.pop(key, None)

    def _check_adoptable(self, parent_key: TreeKey, child: "TreeNode") -> None:
        key = child.key
        if key is ROOT:
            raise ValueError("The root node cannot be the child of another node")

        ancestor_key: Optional[TreeKey] = parent_key
        while ancestor_key is not None:
            if ancestor_key == key:
                raise ValueError(f"Node {key!r} cannot be a descendant of itself")
            ancestor_key = self._parents.get(ancestor_key)

    def _adopt(self, parent_key: TreeKey, child: "TreeNode") -> "TreeNode":
        """Record `child` under `parent_key`, reusing an already known node with the same key."""
        key = child.key
        existing = self._nodes.get(key)
        if existing is None:
            self._nodes[key] = child
            child._cache = self
            node = child
        else:
            if existing is not child:
                existing.update_from(child)
            node = existing

        self._parents[key] = parent_key
        return node


def _retrieve_exception(task: "asyncio.Task[None]") -> None:
    # Mark the failure as seen even if every awaiter was cancelled.
    if not task.cancelled() and task.exception() is not None:
        logger.debug("Fetch failed: %r", task.exception())


class TreeNode:
    """Represents a node of a lazily loaded tree.

    Subclasses reimplement `fetch_children()`. A node never decides its own
    parent: the parent link is recorded when the parent resolves its children.
    """

    def __init__(self, key: Optional[TreeKey] = None):
        self._key: TreeKey = key if key is not None else NodeKey(uuid.uuid4().hex)
        self._cache: Optional[TreeNodeCache] = None

    @property
    def key(self) -> TreeKey:
        return self._key

    def get_key(self) -> TreeKey:
        return self._key

    @property
    def cache(self) -> TreeNodeCache:
        """The arena this node lives in; a detached node starts its own tree."""
        if self._cache is None:
            TreeNodeCache().register(self)
        return self._cache

    async def fetch_children(self) -> List["TreeNode"]:
        """
        Fetches children of this node.

        Reimplemented by subclasses to retrieve their children. By default,
        returns an empty list.
        """
        return []

    def update_from(self, other: "TreeNode") -> None:
        """Refresh display data from a newly fetched node with the same key."""

    async def get_children(self) -> Optional[List["TreeNode"]]:
        """
        Returns the children of this node, or None if it has no children.

        The first call fetches them through `fetch_children()`; later calls
        return the cached result.
        """
        return await self.cache.get_children(self)

    async def get_child(self, predicate: Predicate, recursive: bool = True) -> Optional["TreeNode"]:
        """
        Returns the first child satisfying a predicate, or None.

        If `recursive` is true, scans the whole subtree depth-first, fetching
        children as needed, until a match is found or the subtree is exhausted.
        """
        children = await self.get_children()
        if children is None:
            return None

        for child in children:
            if predicate(child):
                return child

            if recursive:
                grandchild = await child.get_child(predicate, recursive)
                if grandchild is not None:
                    return grandchild

        return None

    def get_parent(self) -> Optional["TreeNode"]:
        return self.cache.parent_of(self._key)

    def is_resolved(self) -> bool:
        """Whether the children of this node have been fetched."""
        return self.cache.is_resolved(self._key)

    def is_leaf(self) -> bool:
        """Whether this node is known to have no children."""
        return self.is_resolved() and not self.has_children()

    def child_count(self) -> int:
        """Number of cached children."""
        return len(self.cache.cached_children(self._key))

    def has_children(self) -> bool:
        return self.child_count() > 0

    def find_child(self, predicate: Predicate) -> Optional["TreeNode"]:
        """First cached child satisfying `predicate`. Never fetches."""
        for child in self.cache.cached_children(self._key):
            if predicate(child):
                return child
        return None

    def has_child(self, predicate: Predicate) -> bool:
        """Whether any cached child satisfies `predicate`. Never fetches."""
        return self.find_child(predicate) is not None

    def invalidate(self) -> None:
        """Drop the cached children so the next `get_children()` fetches again."""
        self.cache.invalidate(self._key)

    def get_path(self, separator: str = " / ") -> str:
        """
        Returns the path of this node, separated from its ancestors by `separator`.

        The root is not part of any path; the root's own path is empty.
        """
        parts = []
        node: Optional[TreeNode] = self
        while node is not None and not node.is_root():
            parts.append(str(node))
            node = node.get_parent()
        return separator.join(reversed(parts))

    def is_root(self) -> bool:
        """Whether this node has no parent."""
        return self.get_parent() is None

    def __str__(self) -> str:
        return str(self._key)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(key={self._key!r})>"
