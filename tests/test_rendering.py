import pytest

pytest.importorskip("bleach")

from kb_dashboard.ui.rendering import (
    ACTIVE_LABEL_COLOR,
    ACTIVE_NODE_COLOR,
    DIMMED_LABEL_COLOR,
    DIMMED_NODE_COLOR,
    build_tooltip,
    label_font_size,
    node_colors,
    node_size,
    sanitize_label,
    shorten_label,
)


def test_sanitize_label_strips_markup() -> None:
    raw = '<b onclick="x()">Acme</b> <script>alert(1)</script>Corp'

    cleaned = sanitize_label(raw)

    assert "<" not in cleaned
    assert "onclick" not in cleaned
    assert cleaned.startswith("Acme")
    assert cleaned.endswith("Corp")


def test_shorten_label_with_ellipsis() -> None:
    shortened = shorten_label("International Business Machines Corporation", max_len=16)

    assert len(shortened) <= 16
    assert shortened.endswith("…")


def test_shorten_label_non_positive_length_returns_empty() -> None:
    assert shorten_label("Anything", max_len=0) == ""


def test_node_colors_depend_on_selection_not_category() -> None:
    selected = frozenset({"ORG", "PERSON"})

    assert node_colors("ORG", selected) == (ACTIVE_NODE_COLOR, ACTIVE_LABEL_COLOR)
    assert node_colors("PERSON", selected) == node_colors("ORG", selected)
    assert node_colors("LOCATION", selected) == (DIMMED_NODE_COLOR, DIMMED_LABEL_COLOR)


def test_node_size_scales_with_square_root_of_weight() -> None:
    assert node_size(4) == pytest.approx(12.0)
    assert node_size(1) == pytest.approx(6.0)
    assert node_size(0) == pytest.approx(6.0)
    assert node_size(None) == pytest.approx(6.0)


def test_label_font_size_is_inverse_to_zoom() -> None:
    assert label_font_size(1.0) == pytest.approx(12.0)
    assert label_font_size(2.0) == pytest.approx(6.0)
    assert label_font_size(0.5) == pytest.approx(24.0)
    assert label_font_size(0) == pytest.approx(12.0)


def test_build_tooltip_is_plain_text_without_entity_escaping() -> None:
    tooltip = build_tooltip("Smith & Sons <i>Ltd</i>", "ORG")

    assert tooltip == "Smith & Sons Ltd\nCategory: ORG"
    assert "&amp;" not in tooltip


def test_build_tooltip_falls_back_for_blank_names() -> None:
    assert build_tooltip("  ", "PERSON") == "(unnamed)\nCategory: PERSON"


def test_shorten_label_breaks_at_word_boundary() -> None:
    assert shorten_label("International Business Machines", max_len=16) == "International…"


def test_shorten_label_cuts_single_long_word() -> None:
    assert shorten_label("Supercalifragilistic", max_len=6) == "Super…"


def test_shorten_label_keeps_whole_word_ending_at_limit() -> None:
    assert shorten_label("Acme Corp Holdings", max_len=10) == "Acme Corp…"
