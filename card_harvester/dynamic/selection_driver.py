"""Selection state machine for per-candidate harvesting.

Algorithm (one position at a time, strictly in order):
    1. Reopen the selection surface if it is not visible
    2. Re-enumerate candidates (the surface may have been rebuilt)
    3. Abort with IndexOutOfRange if the position no longer exists
    4. Click the candidate
    5. Wait (bounded) for the surface to close; proceed if it stays open
    6. Settle delay while the subject region re-renders
    7. Harvest the subject region and tag the record

The subject region is mutated in place by every selection, so no second
interaction may start before the current record has been harvested.
"""

import asyncio
from typing import Any, Dict, List

from ..core.config import HarvesterConfig
from ..core.errors import AffordanceTimeout, ExtractionEmpty, HarvestError
from ..core.outcome import Action, Outcome, action_for
from ..extractors.field_extractor import FieldExtractor
from .adapter import UIAdapter
from .candidate_enumerator import Candidate, CandidateEnumerator


POSITION_FIELD = 'position'
CANDIDATE_FIELD = 'candidate'


class SelectionDriver:
    """Drive selection of every candidate and collect one record per position."""

    def __init__(
        self,
        adapter: UIAdapter,
        config: HarvesterConfig,
        enumerator: CandidateEnumerator,
        extractor: FieldExtractor
    ):
        self.adapter = adapter
        self.config = config
        self.enumerator = enumerator
        self.extractor = extractor

        self.stats = {
            'visited': 0,
            'empty': 0,
            'skipped': 0
        }

    async def run(self, region: Any, observed_count: int) -> List[Dict[str, str]]:
        """
        Visit positions ``0 .. min(observed_count, limit) - 1``.

        Raises:
            IndexOutOfRange: a position vanished between enumeration and selection
        """
        total = min(observed_count, self.config.candidate_limit)
        print(f"  [SELECT] Visiting {total} of {observed_count} candidates")

        records = []
        for position in range(total):
            outcome = await self.visit(position, region)
            self.stats['visited'] += 1
            if outcome.succeeded:
                records.append(outcome.value)
                continue
            if outcome.is_fatal:
                raise outcome.error

            action = action_for(outcome.error.kind)
            if action is Action.PROCEED:
                self.stats['empty'] += 1
                print(f"      ⚠ {outcome.error}, keeping empty record")
                records.append(outcome.value)
            else:
                self.stats['skipped'] += 1
                print(f"      ✗ Skipping candidate {position}: {outcome.error}")

        print(f"  [SELECT] ✓ {len(records)} records "
              f"({self.stats['empty']} empty, {self.stats['skipped']} skipped)")
        return records

    async def visit(self, position: int, region: Any) -> Outcome:
        """Select one position and harvest it.

        Failures come back as an ``Outcome``; fatal ones (IndexOutOfRange)
        are raised by ``run``.
        """
        try:
            if not await self.enumerator.surface_visible():
                await self.enumerator.reveal_surface()

            candidate = await self.enumerator.candidate_at(position)
            print(f"    [{position + 1}] {candidate.display_text[:60]}")

            await self.adapter.click(candidate.reference, self.config.click_timeout_ms)

            hidden = await self.adapter.wait_for_state(
                self.enumerator.surface, "hidden", self.config.hide_timeout_ms
            )
            if not hidden:
                waited = Outcome.failed(AffordanceTimeout("selection surface stayed open"))
                print(f"      ⚠ {waited.error}, continuing")
                waited.unwrap()

            await asyncio.sleep(self.config.settle_delay_ms / 1000)
            fields = await self.extractor.extract(region)
        except HarvestError as e:
            return Outcome.failed(e)
        except Exception as e:
            return Outcome.failed(HarvestError(f"{type(e).__name__}: {e}"))

        record = self._tag(candidate, fields)
        if not fields:
            return Outcome.failed(ExtractionEmpty(position), value=record)
        return Outcome.ok(record)

    def _tag(self, candidate: Candidate, fields: Dict[str, str]) -> Dict[str, str]:
        record = {
            POSITION_FIELD: str(candidate.position),
            CANDIDATE_FIELD: candidate.display_text,
        }
        for key, value in fields.items():
            if key not in record:
                record[key] = value
        return record
