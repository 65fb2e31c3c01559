"""Browser-side harvesting.

Components:
    - adapter: interface the engine drives the target application through
    - browser_engine: Playwright browser lifecycle and adapter
    - area_resolver: subject region lookup
    - candidate_enumerator: selection surface and candidate discovery
    - selection_driver: per-candidate selection state machine
"""

from .adapter import ExtractionSpec, NodeInfo, UIAdapter
from .browser_engine import PlaywrightAdapter, PlaywrightEngine
from .area_resolver import AreaResolver
from .candidate_enumerator import Candidate, CandidateEnumerator
from .selection_driver import SelectionDriver

__all__ = [
    'ExtractionSpec',
    'NodeInfo',
    'UIAdapter',
    'PlaywrightAdapter',
    'PlaywrightEngine',
    'AreaResolver',
    'Candidate',
    'CandidateEnumerator',
    'SelectionDriver'
]
