"""Streamlit view of the latent dataset.

Run with ``streamlit run dashboard.py -- --config config.json``.
"""

import argparse
import html

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from browser import LatentBrowser
from config import load_config
from dash_app import (
    GROK_BG,
    GROK_GRID,
    GROK_MUTED,
    GROK_TEXT,
    SEARCH_MODE_OPTIONS,
    SEARCH_PLACEHOLDERS,
    build_activation_figure,
    build_gc_figure,
    build_monosemantic_figure,
)
from explanations import GLOSSARY
from export import DEFAULT_EXPORT_NAME, export_csv
from metrics import split_context
from normalizer import DatasetLoadError, load_dataset
from thresholds import NO_ACTIVATION

PAGES = ["Latents", "Monosemantic", "Glossary"]


def inject_grok_css():
    st.markdown(
        f"""
        <style>
        @import url('https://fonts.googleapis.com/css2?family=Space+Grotesk:wght@400;500;600&display=swap');
        .stApp {{
            background: {GROK_BG};
            color: {GROK_TEXT};
            font-family: 'Space Grotesk', sans-serif;
        }}
        [data-testid="stSidebar"] {{
            background-color: #0d111a;
            border-right: 1px solid {GROK_GRID};
        }}
        .ctx-flank {{ color: {GROK_MUTED}; font-family: monospace; }}
        .ctx-motif {{ color: #44aaff; font-weight: 700; font-family: monospace; }}
        </style>
        """,
        unsafe_allow_html=True,
    )


def parse_args():
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", default=None)
    parser.add_argument("--data", action="append")
    args, _ = parser.parse_known_args()
    return args


@st.cache_resource(show_spinner="Loading genomic data...")
def load_browser(config_path, data_sources):
    config = load_config(config_path, data_sources=list(data_sources) if data_sources else None)
    dataset = load_dataset(config.data_sources)
    return LatentBrowser.from_config(dataset, config), config


def context_markup(record):
    prefix, motif, suffix = split_context(record.context, record.input)
    return (
        f'<span class="ctx-flank">{html.escape(prefix)}</span>'
        f'<span class="ctx-motif">|{html.escape(motif)}|</span>'
        f'<span class="ctx-flank">{html.escape(suffix)}</span>'
    )


def render_latent(browser, latent_id):
    latent = browser.dataset[latent_id]
    summary = browser.summary(latent_id)
    st.subheader(f"Latent {latent_id}")
    left, right = st.columns(2)
    with left:
        st.plotly_chart(build_activation_figure(latent, summary), use_container_width=True)
        st.plotly_chart(build_gc_figure(latent, summary), use_container_width=True)
        if summary.is_dead:
            st.warning(NO_ACTIVATION)
        else:
            st.info(browser.explanation(latent_id))
            st.caption(
                f"Threshold: {summary.threshold:.2f} | Mean: {summary.mean:.2f} | Max: {summary.max:.2f}"
            )
            st.markdown(
                "**Significant annotations:** "
                + (", ".join(summary.annotations) or "No annotations above threshold")
            )
            st.markdown(
                "**Significant motifs:** "
                + (", ".join(f"`{m}`" for m in summary.motifs) or "No motifs above threshold")
            )
    with right:
        st.markdown(f"**All Activating Inputs ({len(latent.activations)})**")
        for record in latent.activations:
            st.markdown(
                f"`{html.escape(record.input)}` **{record.value:.3f}**  \n"
                f"{context_markup(record)}  \n"
                f"Annotations: {html.escape(record.annotations) or '-'} | "
                f"E-value: {html.escape(record.e_value)} | GC: {record.gc_content:.0%}",
                unsafe_allow_html=True,
            )


def render_selector(browser, config):
    st.session_state.setdefault(
        "selected", browser.initial_selection(config.initial_selection_size)
    )
    mode_labels = {opt["label"]: opt["value"] for opt in SEARCH_MODE_OPTIONS}
    mode = mode_labels[st.sidebar.radio("Search mode", list(mode_labels), horizontal=True)]
    query = st.sidebar.text_input("Search", placeholder=SEARCH_PLACEHOLDERS[mode])

    found = browser.filtered(query, mode)
    if query.strip():
        st.sidebar.caption(f'{len(found)} latents match your search: "{query.strip()}"')

    actions = [
        ("Select All", "all"),
        ("Select None", "none"),
        ("Select All Found", "found"),
        ("Random", "random"),
        ("Random Explained", "random-explained"),
    ]
    cols = st.sidebar.columns(2)
    for idx, (label, action) in enumerate(actions):
        if cols[idx % 2].button(label, use_container_width=True):
            st.session_state.selected = browser.apply(
                action, st.session_state.selected, query=query, mode=mode
            )

    groups = browser.groups(query, mode)
    options = [latent_id for ids in groups.values() for latent_id in ids]
    current = [latent_id for latent_id in st.session_state.selected if latent_id in browser.dataset]
    chosen = st.sidebar.multiselect(
        "Selected latents",
        options=list(dict.fromkeys(current + options)),
        default=current,
        format_func=lambda latent_id: f"Latent {latent_id}",
    )
    st.session_state.selected = chosen
    return chosen


def render_monosemantic(browser):
    st.plotly_chart(build_monosemantic_figure(browser.monosemantic), use_container_width=True)
    rows = [
        {"Annotation": annotation, "Latents": ", ".join(browser.monosemantic.by_annotation[annotation]), "Count": count}
        for annotation, count in browser.monosemantic.counts()
    ]
    st.dataframe(pd.DataFrame(rows, columns=["Annotation", "Latents", "Count"]), use_container_width=True)


def render_glossary():
    for term, text in GLOSSARY.items():
        st.markdown(f"**{term}**: {text}")


st.set_page_config(page_title="SAE Latent Activations Dashboard", layout="wide")
inject_grok_css()
st.title("SAE Latent Activations Dashboard")

args = parse_args()
try:
    browser, config = load_browser(args.config, tuple(args.data or ()))
except DatasetLoadError as exc:
    st.error(f"Error loading genomic data. Please check the data source and try again.\n\n{exc}")
    st.stop()

page = st.sidebar.radio("View", PAGES)
st.sidebar.download_button(
    "Export CSV",
    data=export_csv(browser.dataset),
    file_name=DEFAULT_EXPORT_NAME,
    mime="text/csv",
)

if page == PAGES[0]:
    selected = render_selector(browser, config)
    if selected:
        st.caption(f"Showing {len(selected)} selected latents")
        for latent_id in selected:
            render_latent(browser, latent_id)
            st.divider()
    else:
        st.info("Please select one or more latents to visualize")
elif page == PAGES[1]:
    render_monosemantic(browser)
elif page == PAGES[2]:
    render_glossary()
