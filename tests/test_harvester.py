import asyncio
from pathlib import Path

import pytest

from card_harvester.core.errors import AnchorNotFound
from card_harvester.core.harvester import CardHarvester
from card_harvester.storage.output_guard import EXIT_FAILURE, EXIT_SUCCESS, OutputGuard
from tests.fakes import FakeAdapter, FakeCandidate, FakeNode, FakeSurface, fast_config


def _anchor_in_card():
    region = FakeNode(tag="div", class_name="card-body", name="region")
    wrapper = FakeNode(tag="span", parent=region)
    return FakeNode(tag="button", text="カードを選択して入力", name="anchor", parent=wrapper), region


def test_catalog_mode_dedupes_and_sorts() -> None:
    config = fast_config(mode="catalog")
    anchor, _ = _anchor_in_card()
    catalog = {"surface": [
        {"id": "", "name": "Beta", "extra": "", "source": "list"},
        {"id": "", "name": "Alpha", "extra": "", "source": "list"},
        {"id": "", "name": "Beta", "extra": "x", "source": "buttons"},
    ]}
    adapter = FakeAdapter(config, FakeSurface([]), anchor=anchor, catalog=catalog)

    records = asyncio.run(CardHarvester(config, adapter).harvest())
    assert [r["name"] for r in records] == ["Alpha", "Beta"]


def test_catalog_mode_without_anchor_uses_whole_page() -> None:
    config = fast_config(mode="catalog")
    catalog = {"document": [{"name": "Gamma", "source": "table"}]}
    adapter = FakeAdapter(config, FakeSurface([]), anchor=None, catalog=catalog)

    records = asyncio.run(CardHarvester(config, adapter).harvest())
    assert records == [{"id": "", "name": "Gamma", "extra": "", "source": "table"}]


def test_catalog_mode_falls_back_when_surface_is_empty() -> None:
    config = fast_config(mode="catalog")
    anchor, _ = _anchor_in_card()
    catalog = {"surface": [], "document": [{"name": "Delta"}]}
    adapter = FakeAdapter(config, FakeSurface([]), anchor=anchor, catalog=catalog)

    records = asyncio.run(CardHarvester(config, adapter).harvest())
    assert [r["name"] for r in records] == ["Delta"]


def test_catalog_mode_anchor_click_failure_uses_whole_page(capsys) -> None:
    config = fast_config(mode="catalog")
    anchor, _ = _anchor_in_card()
    anchor.fails = True
    catalog = {"document": [{"name": "Gamma"}]}
    adapter = FakeAdapter(config, FakeSurface([]), anchor=anchor, catalog=catalog)

    records = asyncio.run(CardHarvester(config, adapter).harvest())

    assert [r["name"] for r in records] == ["Gamma"]
    assert "extracting from the whole page" in capsys.readouterr().out


def test_catalog_rows_keep_catalog_columns_whatever_the_fallback_header() -> None:
    config = fast_config(mode="catalog", fallback_header=("position",))
    anchor, _ = _anchor_in_card()
    catalog = {"surface": [{"id": "c1", "name": "Alpha", "extra": "UR", "source": "list"}]}
    adapter = FakeAdapter(config, FakeSurface([]), anchor=anchor, catalog=catalog)

    records = asyncio.run(CardHarvester(config, adapter).harvest())
    assert records == [{"id": "c1", "name": "Alpha", "extra": "UR", "source": "list"}]


def test_detail_mode_harvests_subject_region() -> None:
    config = fast_config(mode="detail")
    anchor, region = _anchor_in_card()
    cards = [FakeCandidate("C1"), FakeCandidate("C2")]
    harvests = {
        "C1": {"table_rows": [["メンバー", "千歌"], ["ユニット", "Aqours"]]},
        "C2": {"table_rows": [["メンバー", "梨子"]]},
    }
    adapter = FakeAdapter(config, FakeSurface(cards), anchor=anchor, harvests=harvests)
    regions = []
    original = adapter.evaluate

    async def tracking(root, spec):
        regions.append(root)
        return await original(root, spec)

    adapter.evaluate = tracking
    records = asyncio.run(CardHarvester(config, adapter).harvest())

    assert [r["display_name"] for r in records] == ["[Aqours] 千歌", "梨子"]
    assert regions and all(root is region for root in regions)


def test_detail_mode_requires_anchor() -> None:
    config = fast_config(mode="detail")
    adapter = FakeAdapter(config, FakeSurface([FakeCandidate("C1")]), anchor=None)

    with pytest.raises(AnchorNotFound):
        asyncio.run(CardHarvester(config, adapter).harvest())


def test_detail_mode_without_surface_runs_empty() -> None:
    config = fast_config(mode="detail")
    anchor, _ = _anchor_in_card()
    adapter = FakeAdapter(config, FakeSurface([FakeCandidate("C1")], opens=False), anchor=anchor)

    assert asyncio.run(CardHarvester(config, adapter).harvest()) == []


def test_three_candidates_one_empty_produce_three_rows(tmp_path: Path) -> None:
    out = tmp_path / "cards.csv"
    config = fast_config(mode="detail", output_path=str(out))
    anchor, _ = _anchor_in_card()
    cards = [FakeCandidate("C1"), FakeCandidate("C2"), FakeCandidate("C3")]
    harvests = {"C1": {"table_rows": [["属性", "スマイル"]]}, "C3": {"table_rows": [["属性", "クール"]]}}
    adapter = FakeAdapter(config, FakeSurface(cards), anchor=anchor, harvests=harvests)

    status = asyncio.run(OutputGuard(config).run(CardHarvester(config, adapter).harvest))

    assert status == EXIT_SUCCESS
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines == [
        "position,candidate,属性",
        "0,C1,スマイル",
        "1,C2,",
        "2,C3,クール",
    ]


def test_index_out_of_range_leaves_only_fallback_header(tmp_path: Path) -> None:
    out = tmp_path / "cards.csv"
    config = fast_config(mode="detail", output_path=str(out))
    anchor, _ = _anchor_in_card()
    cards = [FakeCandidate("C1"), FakeCandidate("C2"), FakeCandidate("C3")]
    harvests = {c.text: {"table_rows": [["属性", c.text]]} for c in cards}
    # count sees 3, position 0 sees 3, position 1 sees only 1
    surface = FakeSurface(cards, counts=[3, 3, 1])
    adapter = FakeAdapter(config, surface, anchor=anchor, harvests=harvests)

    status = asyncio.run(OutputGuard(config).run(CardHarvester(config, adapter).harvest))

    assert status == EXIT_FAILURE
    assert out.read_text(encoding="utf-8") == "id,name,extra,source\n"


def test_detail_mode_survives_one_unreadable_candidate() -> None:
    config = fast_config(mode="detail")
    anchor, _ = _anchor_in_card()
    cards = [FakeCandidate("C1"), FakeCandidate("C2", unreadable=True), FakeCandidate("C3")]
    harvests = {c.text: {"table_rows": [["属性", c.text]]} for c in cards}
    adapter = FakeAdapter(config, FakeSurface(cards), anchor=anchor, harvests=harvests)

    records = asyncio.run(CardHarvester(config, adapter).harvest())
    assert [r["candidate"] for r in records] == ["C1", "C3"]
