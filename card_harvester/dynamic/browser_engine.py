"""Browser automation engine backed by Playwright."""

from typing import Any, List, Optional, Pattern

from playwright.async_api import (
    ElementHandle,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from ..core.config import HarvesterConfig
from ..core.errors import NavigationFailure
from .adapter import ExtractionSpec, NodeInfo, UIAdapter


_DESCRIBE_JS = """
el => ({
    tag: el.tagName.toLowerCase(),
    role: el.getAttribute('role') || '',
    className: typeof el.className === 'string' ? el.className : (el.getAttribute('class') || ''),
    style: el.getAttribute('style') || ''
})
"""

_READ_VALUE_JS = """
el => {
    const tag = el.tagName.toLowerCase();
    if (tag === 'select') {
        const opt = el.options[el.selectedIndex];
        return opt ? (opt.textContent || '') : '';
    }
    if (tag === 'input') {
        const type = (el.getAttribute('type') || '').toLowerCase();
        if (type === 'checkbox' || type === 'radio') return el.checked ? 'true' : 'false';
        return el.value || '';
    }
    if (tag === 'textarea') return el.value || '';
    return el.getAttribute('value') || '';
}
"""


class PlaywrightEngine:
    """
    Browser lifecycle using Playwright.

    Handles launch, page creation, navigation and cleanup.
    """

    def __init__(self, config: HarvesterConfig):
        self.config = config
        self.playwright = None
        self.browser = None
        self.context = None
        self.page = None

    async def initialize(self) -> None:
        """Launch the browser and open a page with the run's timeouts."""
        self.playwright = await async_playwright().start()
        self.browser = await self.playwright.chromium.launch(
            headless=self.config.headless
        )
        self.context = await self.browser.new_context(
            locale=self.config.locale,
            timezone_id=self.config.timezone_id
        )
        self.page = await self.context.new_page()
        self.page.set_default_timeout(self.config.timeout_ms)
        self.page.set_default_navigation_timeout(self.config.nav_timeout_ms)
        print(f"✓ Browser initialized (headless={self.config.headless})")

    async def goto(self, url: str) -> None:
        """
        Navigate to URL.

        Waits for ``domcontentloaded``; the ``networkidle`` wait afterwards is
        best effort because single-page apps may keep polling forever.

        Raises:
            NavigationFailure: target unreachable or load timed out
        """
        try:
            await self.page.goto(url, wait_until="domcontentloaded")
        except PlaywrightError as e:
            raise NavigationFailure(f"failed to load {url}: {e}") from e

        try:
            await self.page.wait_for_load_state(
                "networkidle", timeout=self.config.load_idle_timeout_ms
            )
        except PlaywrightTimeoutError:
            print("  ⚠ Network never went idle, continuing")
        print(f"  ✓ Loaded: {url}")

    async def cleanup(self):
        """Close browser and cleanup."""
        try:
            if self.context:
                await self.context.close()
            if self.browser:
                await self.browser.close()
            if self.playwright:
                await self.playwright.stop()
            print("✓ Browser cleanup complete")
        except PlaywrightError as e:
            print(f"⚠ Cleanup warning: {e}")


class PlaywrightAdapter(UIAdapter):
    """``UIAdapter`` over a live Playwright page.

    Lazy references are Playwright ``Locator`` objects; resolved ancestors
    (from ``parent``/``document_root``) are ``ElementHandle`` objects.
    """

    def __init__(self, page: Any):
        self.page = page

    async def find_by_role(self, role: str, name: Pattern, timeout_ms: int) -> Optional[Any]:
        locator = self.page.get_by_role(role, name=name).first
        if await self.wait_for_state(locator, "visible", timeout_ms):
            return locator
        return None

    def locate(self, selector: str) -> Any:
        return self.page.locator(selector).first

    async def query_all(self, root: Any, selector: str) -> List[Any]:
        if isinstance(root, ElementHandle):
            return await root.query_selector_all(selector)
        return await root.locator(selector).all()

    async def wait_for_state(self, target: Any, state: str, timeout_ms: int) -> bool:
        try:
            if isinstance(target, ElementHandle):
                await target.wait_for_element_state(state, timeout=timeout_ms)
            else:
                await target.wait_for(state=state, timeout=timeout_ms)
            return True
        except PlaywrightTimeoutError:
            return False

    async def is_visible(self, target: Any) -> bool:
        try:
            return await target.is_visible()
        except PlaywrightError:
            return False

    async def click(self, target: Any, timeout_ms: int) -> None:
        await target.click(timeout=timeout_ms)

    async def read_text(self, target: Any) -> str:
        aria_label = await target.get_attribute("aria-label")
        if aria_label and aria_label.strip():
            return aria_label
        return await target.inner_text()

    async def read_value(self, target: Any) -> str:
        return await target.evaluate(_READ_VALUE_JS)

    async def parent(self, target: Any) -> Optional[Any]:
        handle = target if isinstance(target, ElementHandle) else await target.element_handle()
        parent = await handle.evaluate_handle("el => el.parentElement")
        return parent.as_element()

    async def describe(self, target: Any) -> NodeInfo:
        info = await target.evaluate(_DESCRIBE_JS)
        return NodeInfo(
            tag=info.get('tag', ''),
            role=info.get('role', ''),
            class_name=info.get('className', ''),
            style=info.get('style', '')
        )

    async def document_root(self) -> Any:
        handle = await self.page.evaluate_handle("() => document.documentElement")
        return handle.as_element()

    async def evaluate(self, root: Any, spec: ExtractionSpec) -> Any:
        return await root.evaluate(spec.script, spec.arg)
