"""Rendering helpers for graph nodes and labels."""

from __future__ import annotations

import html
import math
import re

import bleach

ACTIVE_NODE_COLOR = "#4299E1"
DIMMED_NODE_COLOR = "#E2E8F0"
ACTIVE_LABEL_COLOR = "#2D3748"
DIMMED_LABEL_COLOR = "#A0AEC0"
LINK_COLOR = "#CBD5E0"
LINK_WIDTH = 1
NODE_REL_SIZE = 6
BASE_LABEL_FONT_SIZE = 12


def sanitize_label(text: str) -> str:
    """Strip any markup from extracted entity names, keeping plain text only."""

    without_scripts = re.sub(r"(?is)<script.*?>.*?</script>", "", text)
    cleaned = bleach.clean(without_scripts, tags=[], attributes={}, strip=True)
    return " ".join(html.unescape(cleaned).replace("\x00", "").split())


def shorten_label(label: str, max_len: int) -> str:
    """Cut an entity name at a word boundary so it fits in ``max_len`` characters.

    A single word longer than the limit is cut mid-word. The ellipsis counts
    toward the limit.
    """

    compact = " ".join(label.split())
    if len(compact) <= max_len:
        return compact
    if max_len <= 1:
        return "…"[:max_len]

    head = compact[: max_len - 1]
    if compact[max_len - 1] != " " and " " in head:
        head = head.rsplit(" ", 1)[0]
    return head.rstrip() + "…"


def node_colors(category: str, selected: frozenset[str] | set[str]) -> tuple[str, str]:
    """Return ``(fill, label)`` colors keyed by selection membership only."""

    if category in selected:
        return ACTIVE_NODE_COLOR, ACTIVE_LABEL_COLOR
    return DIMMED_NODE_COLOR, DIMMED_LABEL_COLOR


def node_size(val: float | None) -> float:
    """Node radius grows with the square root of its size weight."""

    weight = val if isinstance(val, (int, float)) and val > 0 else 1.0
    return NODE_REL_SIZE * math.sqrt(weight)


def label_font_size(scale: float, base: float = BASE_LABEL_FONT_SIZE) -> float:
    """Font size that keeps labels visually constant at the given zoom scale."""

    if scale <= 0:
        return float(base)
    return base / scale


def build_tooltip(name: str, category: str) -> str:
    """Plain-text hover title; vis-network shows string titles verbatim."""

    return f"{sanitize_label(name) or '(unnamed)'}\nCategory: {sanitize_label(category)}"


def zoom_label_script(base: float = BASE_LABEL_FONT_SIZE) -> str:
    """vis-network hook rescaling label fonts by the inverse of the zoom scale."""

    return f"""
<script type="text/javascript">
  (function () {{
    function rescaleLabels() {{
      var scale = network.getScale();
      var size = scale > 0 ? {base} / scale : {base};
      nodes.update(nodes.get().map(function (node) {{
        return {{id: node.id, font: Object.assign({{}}, node.font, {{size: size}})}};
      }}));
    }}
    network.once("afterDrawing", rescaleLabels);
    network.on("zoom", rescaleLabels);
  }})();
</script>
"""
