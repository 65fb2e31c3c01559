"""Interface the harvest engine uses to talk to the target application.

The engine never touches the automation backend directly. Everything it
needs (locating, waiting, clicking, reading and batch extraction) goes
through ``UIAdapter`` so the state machine can run against Playwright in
production and against an in-memory tree in tests.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional, Pattern


@dataclass(frozen=True)
class NodeInfo:
    """Structural metadata of one element, as seen by the area resolver."""
    tag: str
    role: str = ''
    class_name: str = ''
    style: str = ''


@dataclass(frozen=True)
class ExtractionSpec:
    """A read-only harvesting routine run against a subtree root.

    ``script`` is a JavaScript function taking ``(root, arg)``; ``name``
    identifies the routine for logging and for non-browser adapters.
    """
    name: str
    script: str
    arg: Any = None


class UIAdapter(ABC):
    """Query, wait, click and read primitives over the rendered UI tree."""

    @abstractmethod
    async def find_by_role(self, role: str, name: Pattern, timeout_ms: int) -> Optional[Any]:
        """Return a visible element with ``role`` whose name matches, or None."""

    @abstractmethod
    def locate(self, selector: str) -> Any:
        """Return a lazy reference to the first element matching ``selector``.

        The reference re-resolves on every use, so it survives the element
        being destroyed and rebuilt.
        """

    @abstractmethod
    async def query_all(self, root: Any, selector: str) -> List[Any]:
        """Return every element under ``root`` matching ``selector``."""

    @abstractmethod
    async def wait_for_state(self, target: Any, state: str, timeout_ms: int) -> bool:
        """Wait until ``target`` is 'visible' or 'hidden'. False on timeout."""

    @abstractmethod
    async def is_visible(self, target: Any) -> bool:
        ...

    @abstractmethod
    async def click(self, target: Any, timeout_ms: int) -> None:
        ...

    @abstractmethod
    async def read_text(self, target: Any) -> str:
        """Rendered text content; aria-label takes precedence when present."""

    @abstractmethod
    async def read_value(self, target: Any) -> str:
        """Current value of a control, or the selected option's text."""

    @abstractmethod
    async def parent(self, target: Any) -> Optional[Any]:
        ...

    @abstractmethod
    async def describe(self, target: Any) -> NodeInfo:
        ...

    @abstractmethod
    async def document_root(self) -> Any:
        ...

    @abstractmethod
    async def evaluate(self, root: Any, spec: ExtractionSpec) -> Any:
        """Run ``spec`` against ``root`` in a single round trip."""
