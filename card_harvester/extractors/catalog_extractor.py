"""Single-pass harvest of the candidate catalog itself (flat mode).

Used when the candidates are listed rather than selected one by one. The
routine looks at several structures the list may be rendered as, in order:
table rows, list items, buttons/links and ``<select>`` options.
"""

from typing import Any, Dict, List

from ..dynamic.adapter import ExtractionSpec, UIAdapter


# Operational buttons on the surface that are not catalog entries
OPERATION_LABELS = r'選択して入力|検索|閉じる|OK|キャンセル'


CATALOG_ITEMS = ExtractionSpec(
    name='catalog_items',
    script="""
    (root, operationLabels) => {
        const seen = new Map();
        const norm = (s) => (s || '').replace(/\\u00A0/g, ' ').replace(/\\s+/g, ' ').trim();
        const skip = new RegExp(operationLabels, 'i');

        const push = (item) => {
            const key = norm(item.name || item.raw || item.id || JSON.stringify(item));
            if (key && !seen.has(key)) seen.set(key, item);
        };

        root.querySelectorAll('table').forEach((table) => {
            table.querySelectorAll('tbody tr').forEach((tr) => {
                const cells = Array.from(tr.querySelectorAll('th,td')).map((td) => norm(td.innerText));
                if (!cells.length) return;
                const [name, ...rest] = cells;
                if (!name) return;
                push({
                    id: tr.getAttribute('data-id') || '',
                    name,
                    extra: rest.join(' | '),
                    source: 'table',
                    raw: cells.join(' / ')
                });
            });
        });

        root.querySelectorAll(
            '[role="option"], li, .list-group-item, .MuiMenuItem-root, .MuiListItem-root, .ant-select-item'
        ).forEach((li) => {
            const txt = norm(li.innerText);
            if (!txt) return;
            push({
                id: li.getAttribute('data-card-id') || li.getAttribute('data-id') || li.getAttribute('data-key') || '',
                name: txt,
                extra: '',
                source: 'list',
                raw: txt
            });
        });

        root.querySelectorAll('button, a').forEach((el) => {
            const txt = norm(el.innerText || el.getAttribute('aria-label'));
            if (!txt || skip.test(txt)) return;
            const cls = typeof el.className === 'string' ? el.className : '';
            push({
                id: el.getAttribute('data-card-id') || el.getAttribute('data-id') || el.getAttribute('href') || '',
                name: txt,
                extra: cls ? `class:${cls}` : '',
                source: 'buttons',
                raw: txt
            });
        });

        root.querySelectorAll('select').forEach((sel) => {
            sel.querySelectorAll('option').forEach((op) => {
                const txt = norm(op.textContent);
                const val = norm(op.value);
                if (!txt && !val) return;
                push({id: val, name: txt || val, extra: '', source: 'select', raw: txt || val});
            });
        });

        return Array.from(seen.values());
    }
    """,
    arg=OPERATION_LABELS
)


class CatalogExtractor:
    """Harvest raw catalog items, preferring the selection surface over the page."""

    def __init__(self, adapter: UIAdapter):
        self.adapter = adapter

    async def extract(self, surface: Any = None) -> List[Dict[str, Any]]:
        """
        Harvest items from ``surface`` when given, else from the whole document.

        An empty surface harvest falls back to the document as well.
        """
        if surface is not None:
            items = await self.adapter.evaluate(surface, CATALOG_ITEMS) or []
            if items:
                print(f"  [EXTRACT] ✓ {len(items)} raw items from selection surface")
                return items
            print("  [EXTRACT] ⚠ Selection surface yielded nothing, trying whole page")

        root = await self.adapter.document_root()
        items = await self.adapter.evaluate(root, CATALOG_ITEMS) or []
        print(f"  [EXTRACT] {len(items)} raw items from page")
        return items
