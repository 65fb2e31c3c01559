"""Post-processing for flat catalog harvests: clean, dedupe, order."""

from typing import Any, Dict, Iterable, List, Sequence

from ..utils.text_utils import collation_key, normalize_text


class CatalogNormalizer:
    """
    Normalize raw catalog items into records.

    Workflow:
        1. Whitespace-normalize every field
        2. Dedup key = name, else id; items without one are dropped
        3. Keep the first item per case-insensitive key
        4. Sort by name with Japanese collation
    """

    def __init__(
        self,
        fields: Sequence[str] = ('id', 'name', 'extra', 'source'),
        name_field: str = 'name',
        id_field: str = 'id',
        default_source: str = 'unknown'
    ):
        self.fields = list(fields)
        self.name_field = name_field
        self.id_field = id_field
        self.default_source = default_source

        self.stats = {
            'input_items': 0,
            'duplicates_removed': 0,
            'keyless_removed': 0,
            'output_items': 0
        }

    def normalize(self, items: Iterable[Dict[str, Any]]) -> List[Dict[str, str]]:
        seen = set()
        records = []

        for item in items or []:
            self.stats['input_items'] += 1
            record = {field: normalize_text(item.get(field)) for field in self.fields}
            if 'source' in record and not record['source']:
                record['source'] = self.default_source

            key = record.get(self.name_field) or record.get(self.id_field)
            if not key:
                self.stats['keyless_removed'] += 1
                continue

            folded = key.lower()
            if folded in seen:
                self.stats['duplicates_removed'] += 1
                continue
            seen.add(folded)
            records.append(record)

        records.sort(key=lambda r: collation_key(r.get(self.name_field, '')))
        self.stats['output_items'] = len(records)
        return records
