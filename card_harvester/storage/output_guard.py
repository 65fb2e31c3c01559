"""Guarantee an output artifact on every exit path.

A failed run and an empty run both leave a header-only CSV behind; the two
are told apart by the exit status (and the console log), never by the file.
"""

import traceback
from typing import Awaitable, Callable, Dict, List

from ..core.config import HarvesterConfig
from .csv_storage import CSVStorage, unify_schema


EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_EMPTY = 3


class OutputGuard:
    """Wrap the pipeline and always write the CSV (or its fallback)."""

    def __init__(self, config: HarvesterConfig):
        self.config = config
        self.path = config.full_output_path

    async def run(self, pipeline: Callable[[], Awaitable[List[Dict[str, str]]]]) -> int:
        """Run ``pipeline`` and return the process exit status."""
        try:
            records = await pipeline()
            if records:
                header = unify_schema(records, self.config.preferred_fields)
                CSVStorage.save(self.path, records, header)
                print(f"[CSV] ✓ {len(records)} rows written: {self.path}")
                return EXIT_SUCCESS
        except Exception as e:
            print(f"[ERROR] ✗ Harvest failed: {e}")
            traceback.print_exc()
            self.write_fallback()
            return EXIT_FAILURE
        except BaseException:
            self.write_fallback()
            raise

        print("[CSV] ⚠ No records extracted, writing header-only CSV")
        if not self.write_fallback():
            return EXIT_FAILURE
        if self.config.empty_run_policy == 'degraded':
            return EXIT_EMPTY
        return EXIT_SUCCESS

    def write_fallback(self) -> bool:
        """Write the header-only artifact. False if even that failed."""
        try:
            CSVStorage.save_header_only(self.path, self.config.fallback_header)
        except OSError as e:
            print(f"[CSV] ✗ Could not write fallback CSV {self.path}: {e}")
            return False
        print(f"[CSV] Header-only CSV written: {self.path}")
        return True
