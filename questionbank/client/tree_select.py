"""Selection state for a tree-select widget over a lazily loaded tree.

The widget works with its own notion of "no node": `None`. Internally the
selection is always a node, and the tree's root stands for "nothing selected".
`to_local` and `from_local` convert between the two at the widget boundary.
"""
import logging
from enum import Enum
from typing import Callable, List, Optional

from questionbank.client.errors import SelectionError
from questionbank.client.tree import TreeNode

logger = logging.getLogger(__name__)

NodePredicate = Callable[[TreeNode], bool]


class SelectionState(str, Enum):
    LOADING = "loading"
    READY = "ready"


class TreeSelectController:
    """Tracks the selected node of a tree-select widget."""

    def __init__(
        self,
        root: TreeNode,
        value: Optional[TreeNode] = None,
        on_change: Optional[Callable[[TreeNode], None]] = None,
        is_node_disabled: Optional[NodePredicate] = None,
        is_branch_selectable: Optional[NodePredicate] = None,
        show_path: bool = False,
        branch_separator: str = " / "
    ):
        self.root = root
        self.value = value
        self.on_change = on_change
        self.is_node_disabled = is_node_disabled
        self.is_branch_selectable = is_branch_selectable
        self.show_path = show_path
        self.branch_separator = branch_separator

        self.state = SelectionState.LOADING
        self.selected: Optional[TreeNode] = None

    @property
    def is_loading(self) -> bool:
        return self.state is SelectionState.LOADING

    async def mount(self) -> None:
        """Load the root's children, then select the supplied value (or the root)."""
        await self.root.get_children()
        self.selected = self.value if self.value is not None else self.root
        self.state = SelectionState.READY
        logger.debug("Tree select ready with %r selected", self.selected)

    async def set_value(self, value: Optional[TreeNode]) -> None:
        """Apply a value supplied from outside the widget."""
        self.value = value
        await self.mount()

    def select(self, widget_node: Optional[TreeNode]) -> TreeNode:
        """Handle a user selecting `widget_node`; `None` clears the selection."""
        if self.is_loading:
            raise SelectionError("Cannot select a node before the tree has loaded")

        node = self.to_local(widget_node)
        if not node.is_root():
            if self.is_disabled(node):
                raise SelectionError(f"Node '{node}' is disabled")
            if not self.is_selectable(node):
                raise SelectionError(f"Node '{node}' cannot be selected")

        self.selected = node
        if self.on_change is not None:
            self.on_change(node)
        return node

    # ------------------------------------------------------------------
    # Widget boundary
    # ------------------------------------------------------------------

    def to_local(self, widget_node: Optional[TreeNode]) -> TreeNode:
        return self.root if widget_node is None else widget_node

    def from_local(self, node: Optional[TreeNode]) -> Optional[TreeNode]:
        if node is None or node.is_root():
            return None
        return node

    @property
    def widget_value(self) -> Optional[TreeNode]:
        return self.from_local(self.selected)

    async def get_node_children(self, widget_node: Optional[TreeNode]) -> Optional[List[TreeNode]]:
        return await self.to_local(widget_node).get_children()

    def get_node_parent(self, node: TreeNode) -> Optional[TreeNode]:
        return self.from_local(node.get_parent())

    # ------------------------------------------------------------------
    # Node state
    # ------------------------------------------------------------------

    @property
    def is_widget_disabled(self) -> bool:
        """The widget is unusable while the root has no (fetched) children."""
        return not self.root.has_children()

    def is_branch(self, node: TreeNode) -> bool:
        """Interior node: one whose fetched children are non-empty."""
        return node.has_children()

    def is_disabled(self, node: TreeNode) -> bool:
        return bool(self.is_node_disabled and self.is_node_disabled(node))

    def is_selectable(self, node: TreeNode) -> bool:
        """
        Leaves are selectable unless disabled.

        Branches are too, unless `is_branch_selectable` says otherwise.
        """
        if self.is_disabled(node):
            return False
        if not self.is_branch(node) or self.is_branch_selectable is None:
            return True
        return bool(self.is_branch_selectable(node))

    def display_text(self) -> str:
        if self.is_loading or self.selected is None or self.selected.is_root():
            return ""
        if self.show_path:
            return self.selected.get_path(self.branch_separator)
        return str(self.selected)
