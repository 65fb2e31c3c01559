from card_harvester.utils.text_utils import collation_key, normalize_text, strip_trailing_colon


def test_normalize_collapses_whitespace_and_nbsp() -> None:
    assert normalize_text("  a  b \n\t c  ") == "a b c"


def test_normalize_is_idempotent() -> None:
    samples = ["  x  y ", " ", "line1\r\nline2", "全角　スペース", ""]
    for sample in samples:
        once = normalize_text(sample)
        assert normalize_text(once) == once


def test_normalize_none_is_empty() -> None:
    assert normalize_text(None) == ""


def test_strip_trailing_colon_handles_both_widths() -> None:
    assert strip_trailing_colon("属性:") == "属性"
    assert strip_trailing_colon("属性：") == "属性"
    assert strip_trailing_colon("属性") == "属性"


def test_collation_ignores_case_and_kana_type() -> None:
    assert collation_key("カード")[0] == collation_key("かーど")[0]
    assert sorted(["beta", "Alpha"], key=collation_key) == ["Alpha", "beta"]


def test_collation_orders_kana_by_reading() -> None:
    names = ["ウ", "あ", "イ"]
    assert sorted(names, key=collation_key) == ["あ", "イ", "ウ"]
