"""Field and catalog extractors."""

from .field_extractor import FieldExtractor
from .catalog_extractor import CatalogExtractor

__all__ = ['FieldExtractor', 'CatalogExtractor']
