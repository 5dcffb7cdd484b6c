"""Category-filtered knowledge graph view."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field

import streamlit as st
from pyvis.network import Network
from streamlit.components.v1 import html as components_html

from kb_dashboard.api.client import KBClient
from kb_dashboard.api.errors import KBClientError, KBTimeoutError
from kb_dashboard.api.models import GraphData, GraphLink, GraphNode, GraphResponse
from kb_dashboard.ui.rendering import (
    BASE_LABEL_FONT_SIZE,
    LINK_COLOR,
    LINK_WIDTH,
    build_tooltip,
    node_colors,
    node_size,
    sanitize_label,
    shorten_label,
    zoom_label_script,
)
from kb_dashboard.ui.session import fetch_once
from kb_dashboard.utils.logging import get_logger

logger = get_logger(__name__)

GRAPH_HEIGHT_PX = 600
MAX_LABEL_LEN = 40


@dataclass(frozen=True)
class FilteredGraph:
    nodes: list[GraphNode] = field(default_factory=list)
    links: list[GraphLink] = field(default_factory=list)
    dropped_links: int = 0


def category_options(response: GraphResponse) -> list[str]:
    """Declared categories first, then any node category the backend left out."""

    options = list(dict.fromkeys(response.categories))
    declared = set(options)
    extra = sorted({node.category for node in response.data.nodes} - declared)
    return options + extra


def initial_selection(response: GraphResponse) -> frozenset[str]:
    return frozenset(category_options(response))


def toggle_category(selected: Iterable[str], category: str) -> frozenset[str]:
    """Return a new selection with ``category`` flipped in or out."""

    current = set(selected)
    if category in current:
        current.discard(category)
    else:
        current.add(category)
    return frozenset(current)


def filter_graph(graph: GraphData, selected: Iterable[str]) -> FilteredGraph:
    """Keep nodes whose category is selected and links whose endpoints both survive.

    Links pointing at ids missing from the node list are dropped and counted
    rather than treated as errors.
    """

    selected_set = set(selected)
    category_by_id: dict[str, str] = {}
    for node in graph.nodes:
        category_by_id.setdefault(node.id, node.category)

    nodes = [node for node in graph.nodes if node.category in selected_set]

    links: list[GraphLink] = []
    dropped = 0
    for link in graph.links:
        source_category = category_by_id.get(link.source)
        target_category = category_by_id.get(link.target)
        if source_category is None or target_category is None:
            dropped += 1
            continue
        if source_category in selected_set and target_category in selected_set:
            links.append(link)

    if dropped:
        logger.warning("graph_links_dropped", dropped=dropped, total=len(graph.links))
    return FilteredGraph(nodes=nodes, links=links, dropped_links=dropped)


def build_network(filtered: FilteredGraph, selected: Iterable[str]) -> Network:
    selected_set = frozenset(selected)
    net = Network(height=f"{GRAPH_HEIGHT_PX}px", width="100%", bgcolor="#ffffff")

    for node in filtered.nodes:
        fill, label_color = node_colors(node.category, selected_set)
        net.add_node(
            node.id,
            label=shorten_label(sanitize_label(node.name), MAX_LABEL_LEN),
            title=build_tooltip(node.name, node.category),
            color=fill,
            shape="dot",
            size=node_size(node.val),
            font={"size": BASE_LABEL_FONT_SIZE, "color": label_color, "face": "Sans-Serif"},
        )

    for link in filtered.links:
        net.add_edge(
            link.source,
            link.target,
            title=f"weight {link.value:g}",
            color=LINK_COLOR,
            width=LINK_WIDTH,
        )

    options = {
        "interaction": {
            "hover": True,
            "tooltipDelay": 80,
            "zoomView": True,
            "dragView": True,
        },
        "physics": {
            "enabled": True,
            "stabilization": {"enabled": True, "fit": True},
        },
        "edges": {"smooth": False},
    }
    net.set_options(json.dumps(options))
    return net


def graph_html(filtered: FilteredGraph, selected: Iterable[str]) -> str:
    """Standalone HTML for the force-directed graph, with zoom-stable labels."""

    page = build_network(filtered, selected).generate_html()
    script = zoom_label_script()
    if "</body>" in page:
        return page.replace("</body>", f"{script}</body>", 1)
    return page + script


def _on_toggle(category: str) -> None:
    st.session_state["graph_selected"] = toggle_category(
        st.session_state.get("graph_selected", frozenset()),
        category,
    )


def render_graph_view(client: KBClient) -> None:
    with st.spinner("Loading knowledge graph…"):
        result = fetch_once("graph_data", client.get_graph_data)

    if isinstance(result, KBTimeoutError):
        st.warning(f"Timed out: {result}")
        return
    if isinstance(result, KBClientError):
        st.error(f"Error: {result}")
        return
    if not result.data.nodes:
        st.info("No graph data available")
        return

    categories = category_options(result)
    if "graph_selected" not in st.session_state:
        st.session_state["graph_selected"] = initial_selection(result)
    selected: frozenset[str] = st.session_state["graph_selected"]

    filtered = filter_graph(result.data, selected)

    graph_col, filter_col = st.columns([4, 1])
    with filter_col:
        st.markdown("**Filter by Category**")
        for category in categories:
            st.checkbox(
                category,
                value=category in selected,
                key=f"graph_category_{category}",
                on_change=_on_toggle,
                args=(category,),
            )

    with graph_col:
        if filtered.dropped_links:
            st.caption(
                f"{filtered.dropped_links} link(s) reference unknown nodes and were skipped."
            )
        if not filtered.nodes:
            st.info("No nodes match the selected categories.")
            return
        components_html(graph_html(filtered, selected), height=GRAPH_HEIGHT_PX + 40)
