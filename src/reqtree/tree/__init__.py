"""The collection tree: path lookups and the mutation repository."""

from reqtree.tree.repository import TreeRepository

__all__ = ["TreeRepository"]
