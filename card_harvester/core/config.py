"""Configuration management for the harvester."""

import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from dotenv import load_dotenv


MODES = ('catalog', 'detail')
EMPTY_RUN_POLICIES = ('success', 'degraded')

# Header written whenever a run produces no rows or fails
CATALOG_HEADER = ('id', 'name', 'extra', 'source')


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == '':
        return default
    return raw.strip().lower() != 'false'


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    return int(raw)


@dataclass
class HarvesterConfig:
    """Configuration for one harvest run.

    Built once at startup and handed to every component; nothing reads the
    environment after ``from_env`` returns.
    """

    # Target application
    base_url: str = "https://asmape0104.github.io/scshow-calculator/"
    headless: bool = True
    locale: str = "ja-JP"
    timezone_id: str = "Asia/Tokyo"

    # Timeouts (ms)
    timeout_ms: int = 30000
    nav_timeout_ms: int = 60000
    load_idle_timeout_ms: int = 10000
    anchor_timeout_ms: int = 3000
    surface_timeout_ms: int = 3000
    hide_timeout_ms: int = 5000
    click_timeout_ms: int = 10000

    # Retry / settle delays (ms)
    grace_delay_ms: int = 800
    settle_delay_ms: int = 500

    # Harvest scope
    mode: str = "detail"
    max_candidates: int = 500
    debug_limit: Optional[int] = None
    empty_run_policy: str = "success"

    # Target structure
    anchor_role: str = "button"
    anchor_name: str = "カードを選択して入力"
    surface_selector: str = (
        '[role="dialog"], .modal, .modal-dialog, .MuiDialog-root, .ant-modal-root'
    )
    candidate_selector: str = (
        'button:has-text("選択"), [role="option"], .list-group-item, '
        '.MuiMenuItem-root, .MuiListItem-root, .ant-select-item'
    )
    close_selector: str = (
        'button:has-text("OK"), button:has-text("閉じる"), [aria-label="Close"], '
        '.close, .modal-close, [data-test="close"]'
    )

    # Output
    output_path: str = "cards.csv"
    preferred_fields: List[str] = field(
        default_factory=lambda: ['position', 'display_name', 'candidate', 'id', 'name', 'extra', 'source']
    )
    fallback_header: Tuple[str, ...] = CATALOG_HEADER

    # Composite field synthesized from two harvested fields
    composite_field: Optional[str] = "display_name"
    group_field: Optional[str] = "ユニット"
    member_field: Optional[str] = "メンバー"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> 'HarvesterConfig':
        """Build a configuration from environment variables (and ``.env``)."""
        if dotenv:
            load_dotenv()

        defaults = cls()
        return cls(
            base_url=os.getenv("BASE_URL") or defaults.base_url,
            output_path=os.getenv("OUT_FILE") or defaults.output_path,
            headless=_env_bool("HEADLESS", defaults.headless),
            timeout_ms=_env_int("TIMEOUT_MS", defaults.timeout_ms),
            nav_timeout_ms=_env_int("NAV_TIMEOUT_MS", defaults.nav_timeout_ms),
            max_candidates=_env_int("MAX_CANDIDATES", defaults.max_candidates),
            debug_limit=_env_int("DEBUG_LIMIT", defaults.debug_limit),
            mode=(os.getenv("HARVEST_MODE") or defaults.mode).strip().lower(),
            empty_run_policy=(
                os.getenv("EMPTY_RUN_POLICY") or defaults.empty_run_policy
            ).strip().lower(),
        )

    @property
    def candidate_limit(self) -> int:
        """Upper bound on positions the selection driver visits."""
        if self.debug_limit is not None:
            return max(0, min(self.max_candidates, self.debug_limit))
        return max(0, self.max_candidates)

    @property
    def full_output_path(self) -> str:
        return os.path.abspath(self.output_path)

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty when valid)."""
        problems = []
        if self.mode not in MODES:
            problems.append(f"mode must be one of {MODES}, got {self.mode!r}")
        if self.empty_run_policy not in EMPTY_RUN_POLICIES:
            problems.append(
                f"empty_run_policy must be one of {EMPTY_RUN_POLICIES}, got {self.empty_run_policy!r}"
            )
        if not self.base_url:
            problems.append("base_url is empty")
        if not self.fallback_header:
            problems.append("fallback_header is empty")
        for name in ('timeout_ms', 'nav_timeout_ms', 'max_candidates'):
            if getattr(self, name) < 0:
                problems.append(f"{name} must not be negative")
        return problems
