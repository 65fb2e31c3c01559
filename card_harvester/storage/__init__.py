"""CSV output."""

from .csv_storage import CSVStorage, unify_schema
from .output_guard import OutputGuard

__all__ = ['CSVStorage', 'unify_schema', 'OutputGuard']
