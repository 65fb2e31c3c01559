"""Per-operation results and the failure policy table.

Every engine step that may fail reports an ``Outcome`` with one of three
statuses. What the run does about a failure is decided in one place,
``FAILURE_POLICY``, keyed by the failure kind.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .errors import FailureKind, HarvestError


class Status(Enum):
    SUCCESS = 'success'
    RECOVERABLE = 'recoverable'
    FATAL = 'fatal'


class Action(Enum):
    PROCEED = 'proceed'                # keep going best-effort, keep the record
    SKIP_CANDIDATE = 'skip_candidate'  # log, drop the record, next position
    DEGRADE_SCOPE = 'degrade_scope'    # fall back to whole-document scope
    ABORT_RUN = 'abort_run'


FAILURE_POLICY: Dict[FailureKind, Action] = {
    FailureKind.NAVIGATION: Action.ABORT_RUN,
    FailureKind.ANCHOR_NOT_FOUND: Action.ABORT_RUN,
    FailureKind.AFFORDANCE_TIMEOUT: Action.PROCEED,
    FailureKind.INDEX_OUT_OF_RANGE: Action.ABORT_RUN,
    FailureKind.EXTRACTION_EMPTY: Action.PROCEED,
    FailureKind.ADAPTER: Action.SKIP_CANDIDATE,
}

# Catalog mode harvests the whole document when the anchor is missing
CATALOG_POLICY_OVERRIDES: Dict[FailureKind, Action] = {
    FailureKind.ANCHOR_NOT_FOUND: Action.DEGRADE_SCOPE,
}


def action_for(kind: FailureKind, overrides: Optional[Dict[FailureKind, Action]] = None) -> Action:
    """Look up the action for a failure kind, honoring mode overrides."""
    if overrides and kind in overrides:
        return overrides[kind]
    return FAILURE_POLICY[kind]


@dataclass
class Outcome:
    """Result of one engine operation."""
    status: Status
    value: Any = None
    error: Optional[HarvestError] = None

    @classmethod
    def ok(cls, value: Any = None) -> 'Outcome':
        return cls(Status.SUCCESS, value=value)

    @classmethod
    def failed(
        cls,
        error: HarvestError,
        value: Any = None,
        overrides: Optional[Dict[FailureKind, Action]] = None
    ) -> 'Outcome':
        """Classify ``error`` through the policy table."""
        fatal = action_for(error.kind, overrides) is Action.ABORT_RUN
        return cls(Status.FATAL if fatal else Status.RECOVERABLE, value=value, error=error)

    @property
    def succeeded(self) -> bool:
        return self.status is Status.SUCCESS

    @property
    def is_fatal(self) -> bool:
        return self.status is Status.FATAL

    def unwrap(self) -> Any:
        """Return the value, re-raising the error when the outcome is fatal."""
        if self.is_fatal:
            raise self.error
        return self.value
