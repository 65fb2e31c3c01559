# card_harvester/core/__init__.py
"""Core harvest components."""

from .config import HarvesterConfig
from .harvester import CardHarvester

__all__ = [
    'HarvesterConfig',
    'CardHarvester'
]
