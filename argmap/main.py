"""Streamlit UI for the argument map visualizer."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

import streamlit as st
from streamlit.delta_generator import DeltaGenerator

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from argmap.citations import KeywordCitationStrategy, citation_anchor, cited_lines  # noqa: E402
from argmap.errors import ArgmapError  # noqa: E402
from argmap.graph import build_argument_dot  # noqa: E402
from argmap.llm import fetch_analysis  # noqa: E402
from argmap.schemas import ArgumentMap, Premise  # noqa: E402
from argmap.session import AnalysisSession  # noqa: E402
from argmap.utils import configure_logging  # noqa: E402

configure_logging()
logger = logging.getLogger(__name__)

EXAMPLE_ARGUMENTS = {
    "Socrates Mortality": "All humans are mortal. Socrates is a human. Therefore, Socrates is mortal.",
    "Rain and Wet Streets": "If it's raining, the streets are wet. The streets are wet. Therefore, it must be raining.",
    "Birds and Penguins": "All birds can fly. Penguins are birds. Therefore, penguins can fly.",
}

LEVEL_STYLES = {
    "info": {"bg": "#eef5ff", "fg": "#0b3d91", "border": "#d6e4ff"},
    "info-running": {"bg": "#fff4e5", "fg": "#a15c00", "border": "#fdd8b1"},
    "success": {"bg": "#e6f4ea", "fg": "#0f5132", "border": "#bfe3c5"},
    "error": {"bg": "#fdecea", "fg": "#842029", "border": "#f5c1bc"},
}


def _session() -> AnalysisSession:
    if "analysis_session" not in st.session_state:
        st.session_state["analysis_session"] = AnalysisSession(citation_strategy=KeywordCitationStrategy())
    return st.session_state["analysis_session"]


async def _demo_fetch(text: str) -> str:
    """Canned model response: each sentence becomes an axiom feeding the conclusion."""
    sentences = [part.strip() for part in text.replace("\n", " ").split(".") if part.strip()]
    *body, last = sentences or [text.strip()]
    conclusion = last.removeprefix("Therefore,").strip() or last
    premises = [
        {"id": f"p{idx}", "text": sentence, "type": "axiom"}
        for idx, sentence in enumerate(body, start=1)
    ]
    connections = [
        {"id": f"c{idx}", "source": premise["id"], "target": "conclusion"}
        for idx, premise in enumerate(premises, start=1)
    ]
    payload = {"premises": premises, "connections": connections, "conclusion": conclusion}
    return "Here is the analysis:\n" + json.dumps(payload, indent=2)


def _status_style(level: str) -> dict[str, str]:
    return LEVEL_STYLES.get(level, LEVEL_STYLES["info"])


def _set_status_message(placeholder: DeltaGenerator, message: str, level: str = "info") -> None:
    placeholder.empty()
    style = _status_style(level)
    box_style = (
        "padding:0.8rem 1rem;border-radius:10px;margin-bottom:0.25rem;"
        f"background:{style['bg']};color:{style['fg']};"
        f"border:1px solid {style['border']};font-weight:600;"
    )
    placeholder.markdown(f"<div style=\"{box_style}\">{message}</div>", unsafe_allow_html=True)


def _build_placeholders() -> dict[str, DeltaGenerator]:
    placeholders: dict[str, DeltaGenerator] = {}
    placeholders["status"] = st.empty()

    with st.container():
        st.subheader("Argument Visualization")
        placeholders["graph"] = st.empty()

    with st.container():
        st.subheader("Premises")
        placeholders["premises"] = st.empty()

    with st.container():
        st.subheader("Diagnostics")
        placeholders["diagnostics"] = st.empty()

    return placeholders


def _render_graph(container: DeltaGenerator, session: AnalysisSession) -> None:
    container.empty()
    argument_map = session.state.argument_map
    if argument_map is None:
        container.info('Enter an argument and click "Analyze Argument" to see the visualization.')
        return
    highlighted = {connection.id for connection in session.highlighted_connections()}
    container.graphviz_chart(build_argument_dot(argument_map, highlighted=highlighted))


def _render_citations(premise: Premise, argument_map: ArgumentMap) -> None:
    if not premise.citations:
        return
    st.markdown("**Citations:**")
    source_text = argument_map.result.source_text
    for citation in premise.citations:
        anchor = citation_anchor(citation.line_range)
        label = f"Lines {citation.line_range}" + (f" (from line {anchor})" if anchor else "")
        st.caption(label)
        if source_text:
            st.code("\n".join(cited_lines(source_text, citation.line_range)), language=None)
        elif citation.text:
            st.caption(citation.text)


def _render_premises(container: DeltaGenerator, session: AnalysisSession) -> None:
    container.empty()
    body = container.container()
    argument_map = session.state.argument_map
    if argument_map is None:
        body.info("No analysis yet.")
        return
    for premise in argument_map.result.premises:
        level = argument_map.layout[premise.id].level
        with body.expander(f"{premise.id} · {premise.display_title} · {premise.type} (level {level})"):
            st.write(premise.text)
            _render_citations(premise, argument_map)
            if premise.child_assumptions:
                st.caption(f"Contains: {', '.join(premise.child_assumptions)}")
            if premise.supporting_theories:
                st.markdown("**Supporting Theories:**")
                for theory in premise.supporting_theories:
                    st.markdown(f"- **{theory.name}:** {theory.description}")


def _render_diagnostics(container: DeltaGenerator, session: AnalysisSession) -> None:
    container.empty()
    body = container.container()
    argument_map = session.state.argument_map
    if argument_map is None or not argument_map.diagnostics:
        body.caption("No repairs were needed.")
        return
    for diagnostic in argument_map.diagnostics:
        body.warning(f"{diagnostic.kind}: {diagnostic.message}")


def _update_sections(placeholders: dict[str, DeltaGenerator], session: AnalysisSession) -> None:
    _render_graph(placeholders["graph"], session)
    _render_premises(placeholders["premises"], session)
    _render_diagnostics(placeholders["diagnostics"], session)


def main() -> None:
    st.set_page_config(page_title="Argument Analysis Visualizer", layout="wide")
    session = _session()
    st.title("Argument Analysis Visualizer")
    placeholders = _build_placeholders()
    status_placeholder = placeholders["status"]

    with st.sidebar:
        demo_mode = st.toggle(
            "Demo mode (canned responses)",
            value=st.session_state.get("demo_mode", False),
            help="Build the graph from a canned response without calling the model.",
        )
        st.session_state["demo_mode"] = demo_mode

        st.header("Enter Your Argument")
        example = st.selectbox("Try an example", ["", *EXAMPLE_ARGUMENTS.keys()])
        default_text = EXAMPLE_ARGUMENTS.get(example, "")
        argument = st.text_area("Argument", value=default_text, height=220)
        analyze_btn = st.button("Analyze Argument", disabled=not argument.strip())
        if st.button("Reset"):
            session.reset()

        argument_map = session.state.argument_map
        if argument_map is not None:
            st.subheader("Analysis Summary")
            st.markdown(
                f"- Premises: {len(argument_map.result.premises)}\n"
                f"- Connections: {len(argument_map.result.connections)}\n"
                f"- Conclusion: {argument_map.result.conclusion}"
            )
            options = ["", *argument_map.result.premise_ids()]
            selected = st.selectbox("View connections of", options)
            session.select_premise(selected or None)

    if analyze_btn:
        _set_status_message(status_placeholder, "Breaking down the argument...", "info-running")
        fetch = _demo_fetch if demo_mode else fetch_analysis
        try:
            result = asyncio.run(session.analyze(argument, fetch))
        except (ArgmapError, ValueError) as exc:
            _set_status_message(status_placeholder, f"Failed to analyze the argument: {exc}", "error")
        else:
            if result is not None:
                _set_status_message(status_placeholder, "Analysis complete.", "success")
    elif session.state.error:
        _set_status_message(status_placeholder, f"Failed to analyze the argument: {session.state.error}", "error")

    _update_sections(placeholders, session)


if __name__ == "__main__":
    main()
