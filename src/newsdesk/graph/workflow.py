from __future__ import annotations

from langgraph.graph import END, StateGraph

from newsdesk.graph.state import SiteState
from newsdesk.nodes.enrich import enrich_node
from newsdesk.nodes.ingest import ingest_node
from newsdesk.nodes.render import render_node


def build_workflow():
    graph = StateGraph(SiteState)

    graph.add_node("ingest", ingest_node)
    graph.add_node("enrich", enrich_node)
    graph.add_node("render", render_node)

    graph.set_entry_point("ingest")
    graph.add_edge("ingest", "enrich")
    graph.add_edge("enrich", "render")
    graph.add_edge("render", END)

    return graph.compile()
