"""
Tag Resolver
============

Eliminates tags and references from a parsed flag tree.

The tree is walked in pre-order. A tag's child is resolved first and then
registered under the tag name, so a reference can only reach tags that were
completed earlier in the walk. Declaring a tag name twice is an error.
"""

from typing import Dict, List

from flagrant.config.logging import get_logger
from flagrant.core.errors import DuplicateTag, UndefinedReference
from flagrant.models.schemas import (
    Band,
    Bands,
    FlagNode,
    Reference,
    Solid,
    Split,
    Tagged,
)

logger = get_logger(__name__)


class TagResolver:
    """Single-use resolver holding the tag table for one tree."""

    def __init__(self) -> None:
        self.logger = logger.bind(component="resolver")
        self.tags: Dict[str, FlagNode] = {}

    @property
    def tag_names(self) -> List[str]:
        """Registered tag names in declaration order."""
        return list(self.tags)

    def resolve(self, node: FlagNode) -> FlagNode:
        """
        Resolve every tag and reference below `node`.

        Args:
            node: Root of a parsed flag tree

        Returns:
            Equivalent tree containing only solid, split and band nodes

        Raises:
            UndefinedReference: If a reference names an unknown tag
            DuplicateTag: If a tag name is declared twice
        """
        if isinstance(node, Solid):
            return node

        if isinstance(node, Split):
            first = self.resolve(node.first)
            second = self.resolve(node.second)
            return node.model_copy(update={"first": first, "second": second})

        if isinstance(node, Bands):
            bands = tuple(
                Band(weight=band.weight, node=self.resolve(band.node)) for band in node.bands
            )
            return node.model_copy(update={"bands": bands})

        if isinstance(node, Tagged):
            child = self.resolve(node.child)
            if node.name in self.tags:
                raise DuplicateTag(node.name)
            self.tags[node.name] = child
            self.logger.debug("Registered tag", tag=node.name, kind=child.kind)
            return child

        if isinstance(node, Reference):
            if node.name not in self.tags:
                raise UndefinedReference(node.name)
            # Registered sub-trees are frozen and shared read-only
            return self.tags[node.name]

        raise TypeError(f"Unknown flag node type: {type(node).__name__}")


def resolve_tags(node: FlagNode) -> FlagNode:
    """
    Resolve tags and references in a parsed flag tree.

    Args:
        node: Root of a parsed flag tree

    Returns:
        Fully resolved tree
    """
    return TagResolver().resolve(node)
