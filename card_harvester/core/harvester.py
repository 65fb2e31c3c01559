"""Harvest pipeline: enumerate candidates and turn the UI into records.

Two modes share the same components:

    catalog  Reveal the selection surface (if any) and harvest the list of
             candidates in one pass; rows are cleaned and deduplicated.
    detail   Select every candidate in turn and harvest the subject region
             after each selection; rows pass through unchanged.

Usage:
    harvester = CardHarvester(config, adapter)
    records = await harvester.harvest()
"""

from typing import Dict, List

from ..dynamic.adapter import UIAdapter
from ..dynamic.area_resolver import AreaResolver
from ..dynamic.candidate_enumerator import CandidateEnumerator
from ..dynamic.selection_driver import SelectionDriver
from ..extractors.catalog_extractor import CatalogExtractor
from ..extractors.field_extractor import FieldExtractor
from .catalog_normalizer import CatalogNormalizer
from .config import CATALOG_HEADER, HarvesterConfig
from .errors import AffordanceTimeout, AnchorNotFound
from .outcome import CATALOG_POLICY_OVERRIDES, Outcome


class CardHarvester:
    """Run one harvest against an already loaded target application."""

    def __init__(self, config: HarvesterConfig, adapter: UIAdapter):
        self.config = config
        self.adapter = adapter
        self.enumerator = CandidateEnumerator(adapter, config)

    async def harvest(self) -> List[Dict[str, str]]:
        print(f"\n{'=' * 60}")
        print(f"HARVEST ({self.config.mode} mode)")
        print(f"{'=' * 60}")

        if self.config.mode == 'catalog':
            return await self.harvest_catalog()
        return await self.harvest_details()

    async def harvest_catalog(self) -> List[Dict[str, str]]:
        """Single pass over the selection surface, or the page when there is none."""
        appeared = False
        try:
            appeared = await self.enumerator.reveal_surface()
        except AnchorNotFound as e:
            outcome = Outcome.failed(e, overrides=CATALOG_POLICY_OVERRIDES)
            outcome.unwrap()
            print(f"  ⚠ {e}; extracting from the whole page")
        except Exception as e:
            outcome = Outcome.failed(AffordanceTimeout(f"anchor click failed: {e}"))
            outcome.unwrap()
            print(f"  ⚠ {outcome.error}; extracting from the whole page")

        extractor = CatalogExtractor(self.adapter)
        items = await extractor.extract(self.enumerator.surface if appeared else None)

        if appeared:
            await self._close_surface()

        normalizer = CatalogNormalizer(fields=CATALOG_HEADER)
        records = normalizer.normalize(items)
        print(f"  [CATALOG] {normalizer.stats['input_items']} raw → {len(records)} unique "
              f"({normalizer.stats['duplicates_removed']} duplicates, "
              f"{normalizer.stats['keyless_removed']} without a name)")
        return records

    async def harvest_details(self) -> List[Dict[str, str]]:
        """
        Select every candidate and harvest the subject region after each.

        Raises:
            AnchorNotFound: anchor missing before enumeration
            IndexOutOfRange: a candidate vanished between count and selection
        """
        anchor = await self.enumerator.find_anchor()
        region = await AreaResolver(self.adapter).resolve(anchor)

        if await self.enumerator.reveal_surface():
            count = await self.enumerator.count()
        else:
            Outcome.failed(AffordanceTimeout("selection surface never appeared")).unwrap()
            count = 0

        driver = SelectionDriver(
            self.adapter,
            self.config,
            self.enumerator,
            FieldExtractor(self.adapter, self.config)
        )
        return await driver.run(region, count)

    async def _close_surface(self) -> None:
        """Best-effort close so the surface does not cover the page afterwards."""
        controls = await self.adapter.query_all(self.enumerator.surface, self.config.close_selector)
        if not controls or not await self.adapter.is_visible(controls[0]):
            return
        try:
            await self.adapter.click(controls[0], self.config.click_timeout_ms)
        except Exception as e:
            print(f"  ⚠ Close control failed: {e}")
            return
        if not await self.adapter.wait_for_state(
            self.enumerator.surface, "hidden", self.config.hide_timeout_ms
        ):
            print("  ⚠ Selection surface stayed open after close")
