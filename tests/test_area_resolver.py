import asyncio

from card_harvester.dynamic.adapter import NodeInfo
from card_harvester.dynamic.area_resolver import (
    MAX_ASCENT,
    AreaResolver,
    has_section_like_class,
    is_section_element,
)
from tests.fakes import FakeAdapter, FakeNode, FakeSurface, fast_config


def _chain(*nodes: FakeNode) -> FakeNode:
    """Link nodes child-first; returns the innermost one."""
    for child, parent in zip(nodes, nodes[1:]):
        child.parent = parent
    return nodes[0]


def _adapter() -> FakeAdapter:
    return FakeAdapter(fast_config(), FakeSurface([]))


def test_default_predicates() -> None:
    assert is_section_element(NodeInfo(tag="section"))
    assert has_section_like_class(NodeInfo(tag="div", class_name="Card-Panel"))
    assert has_section_like_class(NodeInfo(tag="div", style="grid-area: main"))
    assert not has_section_like_class(NodeInfo(tag="div", class_name="btn primary"))


def test_returns_first_matching_ancestor() -> None:
    target = FakeNode(tag="div", class_name="member-info", name="target")
    outer = FakeNode(tag="section", name="outer")
    anchor = _chain(FakeNode(tag="button", name="anchor"), FakeNode(tag="span"), target, outer)

    region = asyncio.run(AreaResolver(_adapter()).resolve(anchor))
    assert region is target


def test_anchor_itself_is_not_a_candidate() -> None:
    anchor = _chain(FakeNode(tag="section", name="anchor"), FakeNode(tag="div", class_name="row", name="row"))
    region = asyncio.run(AreaResolver(_adapter()).resolve(anchor))
    assert region.name == "row"


def test_falls_back_to_document_beyond_bound() -> None:
    nodes = [FakeNode(tag="button")] + [FakeNode(tag="div") for _ in range(MAX_ASCENT)]
    nodes.append(FakeNode(tag="section", name="too-far"))
    anchor = _chain(*nodes)

    adapter = _adapter()
    region = asyncio.run(AreaResolver(adapter).resolve(anchor))
    assert region is adapter.document


def test_falls_back_to_document_at_tree_top() -> None:
    adapter = _adapter()
    region = asyncio.run(AreaResolver(adapter).resolve(FakeNode(tag="button")))
    assert region is adapter.document


def test_predicates_are_swappable() -> None:
    plain = FakeNode(tag="div", name="plain")
    anchor = _chain(FakeNode(tag="button"), FakeNode(tag="div", class_name="card"), plain)
    resolver = AreaResolver(_adapter(), predicates=[lambda info: info.class_name == ""])

    region = asyncio.run(resolver.resolve(anchor))
    assert region.name == "plain"
