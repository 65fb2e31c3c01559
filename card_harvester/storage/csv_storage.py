import io
import re
from typing import Dict, Iterable, List, Sequence, Tuple

from ..utils.text_utils import collation_key


# A value containing any of these is quoted, with embedded quotes doubled
_NEEDS_QUOTING = re.compile(r'[,"\r\n]')


def format_field(value: str) -> str:
    """Render one CSV field."""
    text = '' if value is None else str(value)
    if _NEEDS_QUOTING.search(text):
        return '"' + text.replace('"', '""') + '"'
    return text


def unify_schema(records: Iterable[Dict[str, str]], preferred: Sequence[str] = ()) -> Tuple[str, ...]:
    """
    Build the header for a set of records with differing fields.

    Preferred fields that occur in any record come first, in their fixed
    order; every other observed key follows in Japanese collation order.
    The returned tuple is the frozen schema for the rest of the run.
    """
    observed = set()
    for record in records:
        observed.update(record.keys())

    leading = [name for name in preferred if name in observed]
    remaining = sorted((key for key in observed if key not in leading), key=collation_key)
    return tuple(leading + remaining)


class CSVStorage:
    """Serialize records as a comma-separated table."""

    @staticmethod
    def records_to_rows(records: Iterable[Dict[str, str]], header: Sequence[str]) -> List[List[str]]:
        """One row per record; fields missing from a record become ''."""
        return [[record.get(name, '') or '' for name in header] for record in records]

    @staticmethod
    def to_csv_string(records: Iterable[Dict[str, str]], header: Sequence[str]) -> str:
        """
        Convert records to a CSV string.

        Values containing a comma, a quote or a line break are quoted with
        embedded quotes doubled; everything else is written bare.
        """
        output = io.StringIO()
        rows = [list(header)] + CSVStorage.records_to_rows(records, header)
        for row in rows:
            output.write(','.join(format_field(value) for value in row))
            output.write('\n')
        return output.getvalue()

    @staticmethod
    def save(file_path: str, records: Iterable[Dict[str, str]], header: Sequence[str]) -> str:
        """Write the table to ``file_path`` (UTF-8) and return the path."""
        csv_str = CSVStorage.to_csv_string(records, header)
        with open(file_path, 'w', encoding='utf-8', newline='') as f:
            f.write(csv_str)
        return file_path

    @staticmethod
    def save_header_only(file_path: str, header: Sequence[str]) -> str:
        """Write the minimal artifact: the header row and nothing else."""
        return CSVStorage.save(file_path, [], header)
