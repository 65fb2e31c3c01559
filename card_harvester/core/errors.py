"""Failure taxonomy for a harvest run."""

from enum import Enum


class FailureKind(Enum):
    NAVIGATION = 'navigation_failure'
    ANCHOR_NOT_FOUND = 'anchor_not_found'
    AFFORDANCE_TIMEOUT = 'affordance_timeout'
    INDEX_OUT_OF_RANGE = 'index_out_of_range'
    EXTRACTION_EMPTY = 'extraction_empty'
    ADAPTER = 'adapter_failure'


class HarvestError(Exception):
    """Base class for every failure raised by the harvest engine."""

    kind = FailureKind.ADAPTER

    def __init__(self, message: str = ''):
        super().__init__(message or self.kind.value)


class NavigationFailure(HarvestError):
    """Target unreachable or the page never finished loading."""
    kind = FailureKind.NAVIGATION


class AnchorNotFound(HarvestError):
    """The control that reveals the selection surface is absent."""
    kind = FailureKind.ANCHOR_NOT_FOUND


class AffordanceTimeout(HarvestError):
    """A bounded visible/hidden wait expired."""
    kind = FailureKind.AFFORDANCE_TIMEOUT


class IndexOutOfRange(HarvestError):
    """A selection position is invalid against a freshly observed count."""
    kind = FailureKind.INDEX_OUT_OF_RANGE

    def __init__(self, position: int, count: int):
        self.position = position
        self.count = count
        super().__init__(
            f"candidate position {position} out of range (observed {count})"
        )


class ExtractionEmpty(HarvestError):
    """No fields were harvested for one candidate."""
    kind = FailureKind.EXTRACTION_EMPTY

    def __init__(self, position: int):
        self.position = position
        super().__init__(f"no fields harvested for candidate {position}")
