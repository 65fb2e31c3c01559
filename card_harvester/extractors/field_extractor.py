"""Harvest key/value fields from the subject region.

Four independent strategies run against the region, each as one batch
round trip that returns ``[key, value]`` pairs in document order:

    (a) definition pairs     <dt>term</dt><dd>definition</dd>
    (b) tabular rows         <tr><th>key</th><td>v1</td><td>v2</td></tr>
    (c) label-bound controls <label for=x>key</label> ... <select id=x>
    (d) emphasis markers     <b>key:</b> value text ...

Pairs are merged first-write-wins: a later duplicate key never replaces an
earlier value unless the earlier value was empty.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..core.config import HarvesterConfig
from ..dynamic.adapter import ExtractionSpec, UIAdapter
from ..utils.text_utils import normalize_text, strip_trailing_colon


ROW_SEPARATOR = ' | '


DEFINITION_PAIRS = ExtractionSpec(
    name='definition_pairs',
    script="""
    (root) => {
        const text = (el) => (el ? (el.innerText || el.textContent || '') : '');
        const pairs = [];
        root.querySelectorAll('dt').forEach((dt) => {
            const dd = dt.nextElementSibling;
            if (dd && dd.tagName.toLowerCase() === 'dd') {
                pairs.push([text(dt), text(dd)]);
            }
        });
        return pairs;
    }
    """
)

TABLE_ROWS = ExtractionSpec(
    name='table_rows',
    script="""
    (root, separator) => {
        const text = (el) => (el.innerText || el.textContent || '').trim();
        const pairs = [];
        root.querySelectorAll('tr').forEach((tr) => {
            const cells = Array.from(tr.querySelectorAll('th,td')).map(text);
            if (cells.length >= 2) {
                const [key, ...rest] = cells;
                pairs.push([key, rest.join(separator)]);
            }
        });
        return pairs;
    }
    """,
    arg=ROW_SEPARATOR
)

LABELED_CONTROLS = ExtractionSpec(
    name='labeled_controls',
    script="""
    (root) => {
        const INPUT = 'input:not([type="hidden"]), select, textarea';
        const LABEL = 'label, [role="label"]';
        const doc = root.ownerDocument || document;
        const text = (el) => (el.innerText || el.textContent || '');
        const valueOf = (el) => {
            const tag = el.tagName.toLowerCase();
            if (tag === 'select') {
                const opt = el.options[el.selectedIndex];
                return opt ? (opt.textContent || '') : '';
            }
            const type = (el.getAttribute('type') || '').toLowerCase();
            if (type === 'checkbox' || type === 'radio') return el.checked ? 'true' : 'false';
            return el.value || '';
        };
        const resolve = (label) => {
            const forId = label.getAttribute('for');
            if (forId) {
                const bound = doc.getElementById(forId);
                if (bound && bound.matches(INPUT)) return bound;
            }
            const sibling = label.nextElementSibling;
            if (sibling) {
                if (sibling.matches(INPUT)) return sibling;
                const nested = sibling.querySelector(INPUT);
                if (nested) return nested;
            }
            // an ancestor holding other labels belongs to them as well
            let ancestor = label.parentElement;
            while (ancestor) {
                if (ancestor.querySelectorAll(LABEL).length > 1) return null;
                const found = ancestor.querySelector(INPUT);
                if (found) return found;
                if (ancestor === root) break;
                ancestor = ancestor.parentElement;
            }
            return null;
        };
        const pairs = [];
        root.querySelectorAll(LABEL).forEach((label) => {
            if (label.matches(INPUT)) return;
            const control = resolve(label);
            if (control) pairs.push([text(label), valueOf(control)]);
        });
        return pairs;
    }
    """
)

EMPHASIS_MARKERS = ExtractionSpec(
    name='emphasis_markers',
    script="""
    (root) => {
        const pairs = [];
        root.querySelectorAll('b, strong, em').forEach((marker) => {
            const label = (marker.textContent || '').trim();
            if (!/[:：]$/.test(label)) return;
            const parts = [];
            for (let node = marker.nextSibling; node; node = node.nextSibling) {
                parts.push(node.nodeType === 1 ? (node.innerText || node.textContent || '') : (node.textContent || ''));
            }
            pairs.push([label, parts.join(' ')]);
        });
        return pairs;
    }
    """
)

DEFAULT_STRATEGIES: List[ExtractionSpec] = [
    DEFINITION_PAIRS,
    TABLE_ROWS,
    LABELED_CONTROLS,
    EMPHASIS_MARKERS,
]


def merge_pairs(record: Dict[str, str], pairs: Iterable[Sequence[Any]]) -> Dict[str, str]:
    """First-write-wins merge of ``[key, value]`` pairs into ``record`` (in place)."""
    for pair in pairs or []:
        if len(pair) < 2:
            continue
        key = normalize_text(pair[0])
        value = normalize_text(pair[1])
        if not key:
            continue
        if key not in record or (not record[key] and value):
            record[key] = value
    return record


def fold_colon_keys(record: Dict[str, str]) -> Dict[str, str]:
    """Strip trailing colons from keys, merging into an existing colon-free key."""
    folded: Dict[str, str] = {}
    for key, value in record.items():
        bare = strip_trailing_colon(key) or key
        if bare not in folded or (not folded[bare] and value):
            folded[bare] = value
    return folded


def compose_display_name(
    record: Dict[str, str],
    group_field: Optional[str],
    member_field: Optional[str],
    composite_field: Optional[str]
) -> Dict[str, str]:
    """Prepend ``"[group] member"`` (or ``member`` alone) as the leading field."""
    if not (group_field and member_field and composite_field):
        return record

    group = record.get(group_field, '')
    member = record.get(member_field, '')
    if not group and not member:
        return record

    composite = normalize_text(f"[{group}] {member}" if group else member)
    result = {composite_field: composite}
    for key, value in record.items():
        if key != composite_field:
            result[key] = value
    return result


class FieldExtractor:
    """Multi-strategy field harvester for one subject region."""

    def __init__(
        self,
        adapter: UIAdapter,
        config: HarvesterConfig,
        strategies: Optional[Sequence[ExtractionSpec]] = None
    ):
        self.adapter = adapter
        self.config = config
        self.strategies = list(strategies) if strategies is not None else list(DEFAULT_STRATEGIES)

    async def extract(self, region: Any) -> Dict[str, str]:
        """Run every strategy against ``region`` and return the merged record."""
        record: Dict[str, str] = {}
        for spec in self.strategies:
            pairs = await self.adapter.evaluate(region, spec)
            merge_pairs(record, pairs)

        record = fold_colon_keys(record)
        return compose_display_name(
            record,
            self.config.group_field,
            self.config.member_field,
            self.config.composite_field
        )
