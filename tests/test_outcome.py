import pytest

from card_harvester.core.errors import (
    AffordanceTimeout,
    AnchorNotFound,
    ExtractionEmpty,
    FailureKind,
    HarvestError,
    IndexOutOfRange,
)
from card_harvester.core.outcome import (
    CATALOG_POLICY_OVERRIDES,
    FAILURE_POLICY,
    Action,
    Outcome,
    Status,
    action_for,
)


def test_every_failure_kind_has_a_policy() -> None:
    assert set(FAILURE_POLICY) == set(FailureKind)


def test_policy_table() -> None:
    assert action_for(FailureKind.INDEX_OUT_OF_RANGE) is Action.ABORT_RUN
    assert action_for(FailureKind.NAVIGATION) is Action.ABORT_RUN
    assert action_for(FailureKind.AFFORDANCE_TIMEOUT) is Action.PROCEED
    assert action_for(FailureKind.EXTRACTION_EMPTY) is Action.PROCEED
    assert action_for(FailureKind.ADAPTER) is Action.SKIP_CANDIDATE


def test_anchor_not_found_degrades_only_in_catalog_mode() -> None:
    assert action_for(FailureKind.ANCHOR_NOT_FOUND) is Action.ABORT_RUN
    assert action_for(FailureKind.ANCHOR_NOT_FOUND, CATALOG_POLICY_OVERRIDES) is Action.DEGRADE_SCOPE


def test_fatal_outcome_unwrap_raises() -> None:
    outcome = Outcome.failed(IndexOutOfRange(4, 2))
    assert outcome.status is Status.FATAL
    with pytest.raises(IndexOutOfRange):
        outcome.unwrap()


def test_recoverable_outcome_unwrap_returns_value() -> None:
    outcome = Outcome.failed(ExtractionEmpty(1), value={"position": "1"})
    assert outcome.status is Status.RECOVERABLE
    assert outcome.unwrap() == {"position": "1"}

    assert not Outcome.failed(AffordanceTimeout()).is_fatal
    assert Outcome.ok(5).succeeded


def test_catalog_override_makes_missing_anchor_recoverable() -> None:
    outcome = Outcome.failed(AnchorNotFound("gone"), overrides=CATALOG_POLICY_OVERRIDES)
    assert outcome.status is Status.RECOVERABLE


def test_error_kinds() -> None:
    assert IndexOutOfRange(3, 3).kind is FailureKind.INDEX_OUT_OF_RANGE
    assert "3" in str(IndexOutOfRange(3, 3))
    assert HarvestError("x").kind is FailureKind.ADAPTER
