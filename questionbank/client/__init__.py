"""Async client, lazy knowledge tree and tree selection for the question bank API."""
from questionbank.client.api_client import QuestionBankClient
from questionbank.client.config import ClientSettings
from questionbank.client.errors import RequestError, SelectionError
from questionbank.client.knowledge_tree import (
    KnowledgeAreaTreeNode,
    KnowledgeAreaTreeRootNode,
    TopicTreeNode,
)
from questionbank.client.tree import ROOT, NodeKey, RootKey, TreeNode, TreeNodeCache
from questionbank.client.tree_select import SelectionState, TreeSelectController

__all__ = [
    "ClientSettings",
    "KnowledgeAreaTreeNode",
    "KnowledgeAreaTreeRootNode",
    "NodeKey",
    "QuestionBankClient",
    "RequestError",
    "ROOT",
    "RootKey",
    "SelectionError",
    "SelectionState",
    "TopicTreeNode",
    "TreeNode",
    "TreeNodeCache",
    "TreeSelectController",
]
