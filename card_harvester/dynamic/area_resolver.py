"""Locate the subject region whose fields are harvested after each selection."""

import re
from typing import Any, Callable, List, Optional, Sequence

from .adapter import NodeInfo, UIAdapter


MAX_ASCENT = 8

SECTION_LIKE_PATTERN = re.compile(
    r'card|panel|container|row|column|member|area|block', re.IGNORECASE
)

AreaPredicate = Callable[[NodeInfo], bool]


def is_section_element(info: NodeInfo) -> bool:
    return info.tag == 'section'


def has_section_like_class(info: NodeInfo) -> bool:
    metadata = f"{info.class_name} {info.style}"
    return bool(SECTION_LIKE_PATTERN.search(metadata))


# Checked in order against each ancestor; the first hit wins
DEFAULT_AREA_PREDICATES: List[AreaPredicate] = [
    is_section_element,
    has_section_like_class,
]


class AreaResolver:
    """
    Find the container that holds the subject fields.

    Strategy: climb from the anchor control and take the first ancestor
    accepted by any predicate. The predicate list is data, so the heuristics
    can be swapped per target without touching the climb itself.
    """

    def __init__(
        self,
        adapter: UIAdapter,
        predicates: Optional[Sequence[AreaPredicate]] = None,
        max_ascent: int = MAX_ASCENT
    ):
        self.adapter = adapter
        self.predicates = list(predicates) if predicates is not None else list(DEFAULT_AREA_PREDICATES)
        self.max_ascent = max_ascent

    async def resolve(self, anchor: Any) -> Any:
        """Return the subject region for ``anchor``; the document root if none matches."""
        node = anchor
        for level in range(1, self.max_ascent + 1):
            node = await self.adapter.parent(node)
            if node is None:
                break
            info = await self.adapter.describe(node)
            if self._matches(info):
                print(f"    ✓ Subject region: <{info.tag}> {info.class_name[:60]} (level {level})")
                return node

        print("    ⚠ No section-like ancestor found, using document root")
        return await self.adapter.document_root()

    def _matches(self, info: NodeInfo) -> bool:
        return any(predicate(info) for predicate in self.predicates)
