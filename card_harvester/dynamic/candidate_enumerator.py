"""Reveal the selection surface and enumerate the candidates on it.

The surface is commonly destroyed and rebuilt after every choice, so
candidates are never cached: each lookup re-queries the surface and the
position is the only identity a candidate has.
"""

import asyncio
import re
from dataclasses import dataclass
from typing import Any, List, Optional

from ..core.config import HarvesterConfig
from ..core.errors import AnchorNotFound, IndexOutOfRange
from ..utils.text_utils import normalize_text
from .adapter import UIAdapter


@dataclass
class Candidate:
    """One selectable item. ``reference`` is only valid until the surface is rebuilt."""
    position: int
    display_text: str
    reference: Any


class CandidateEnumerator:
    """
    Open the selection surface and count/list its selection affordances.

    Discovers:
    - the anchor control (by role and accessible name)
    - the surface (a lazy locator, re-resolved on each use)
    - candidates (every affordance matching the candidate selector)
    """

    def __init__(self, adapter: UIAdapter, config: HarvesterConfig):
        self.adapter = adapter
        self.config = config
        self.surface = adapter.locate(config.surface_selector)
        self.anchor: Optional[Any] = None

    async def find_anchor(self) -> Any:
        """
        Locate the anchor control.

        Raises:
            AnchorNotFound: the control never became visible
        """
        anchor = await self.adapter.find_by_role(
            self.config.anchor_role,
            re.compile(re.escape(self.config.anchor_name)),
            self.config.anchor_timeout_ms
        )
        if anchor is None:
            raise AnchorNotFound(
                f"no visible {self.config.anchor_role} named {self.config.anchor_name!r}"
            )
        self.anchor = anchor
        return anchor

    async def reveal_surface(self) -> bool:
        """Click the anchor and wait for the surface. False means "no surface"."""
        if self.anchor is None:
            await self.find_anchor()

        print(f"  [ENUM] Clicking 「{self.config.anchor_name}」...")
        await self.adapter.click(self.anchor, self.config.click_timeout_ms)
        appeared = await self.adapter.wait_for_state(
            self.surface, "visible", self.config.surface_timeout_ms
        )
        if appeared:
            print("  [ENUM] ✓ Selection surface visible")
        else:
            print("  [ENUM] ⚠ Selection surface did not appear")
        return appeared

    async def surface_visible(self) -> bool:
        return await self.adapter.is_visible(self.surface)

    async def affordances(self) -> List[Any]:
        """Fresh list of candidate references; never reuse it across interactions."""
        return await self.adapter.query_all(self.surface, self.config.candidate_selector)

    async def count(self) -> int:
        """Count candidates, re-counting exactly once after a grace delay on zero."""
        found = len(await self.affordances())
        if found == 0:
            print(f"  [ENUM] ⚠ No candidates yet, re-counting in {self.config.grace_delay_ms}ms")
            await asyncio.sleep(self.config.grace_delay_ms / 1000)
            found = len(await self.affordances())

        print(f"  [ENUM] Found {found} candidates")
        return found

    async def candidate_at(self, position: int) -> Candidate:
        """
        Re-query the surface and return the candidate at ``position``.

        Raises:
            IndexOutOfRange: position not valid against the fresh count
        """
        references = await self.affordances()
        if position < 0 or position >= len(references):
            raise IndexOutOfRange(position, len(references))

        reference = references[position]
        return Candidate(
            position=position,
            display_text=await self._display_text(reference),
            reference=reference
        )

    async def _display_text(self, reference: Any) -> str:
        text = normalize_text(await self.adapter.read_text(reference))
        if text:
            return text
        return normalize_text(await self.adapter.read_value(reference))
