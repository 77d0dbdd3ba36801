import argparse
import json
import logging
import sys
from pathlib import Path

import numpy as np
import plotly.graph_objects as go
import plotly.io as pio
import dash
from dash import ALL, Dash, Input, Output, State, dcc, html

from browser import LatentBrowser
from config import load_config
from explanations import GLOSSARY
from export import DEFAULT_EXPORT_NAME, export_csv, write_csv
from metrics import split_context
from normalizer import DatasetLoadError, DatasetLoader
from search import SEARCH_RESULTS_LABEL
from thresholds import NO_ACTIVATION

logger = logging.getLogger(__name__)

GROK_BG = "#05070a"  # Deep clean background
GROK_PANEL = "rgba(13, 17, 26, 0.7)"  # Glassy panel
GROK_TEXT = "#e1e4e8"
GROK_MUTED = "#8b949e"
GROK_GRID = "#1f2430"
GROK_ACCENT = "#ff4b4b"
FONT_FAMILY = "'Space Grotesk', sans-serif"

pio.templates["grok"] = go.layout.Template(
    layout=go.Layout(
        font=dict(family=FONT_FAMILY, color=GROK_TEXT),
        paper_bgcolor=GROK_BG,
        plot_bgcolor=GROK_BG,
        xaxis=dict(
            tickfont=dict(family=FONT_FAMILY),
            title_font=dict(family=FONT_FAMILY),
        ),
        yaxis=dict(
            tickfont=dict(family=FONT_FAMILY),
            title_font=dict(family=FONT_FAMILY),
        ),
    )
)
pio.templates.default = "grok"

NEON_CYAN = "#00f0ff"
NEON_MAGENTA = "#ff00aa"
NEON_YELLOW = "#fcee0a"
NEON_BLUE = "#44aaff"
NEON_GREEN = "#0aff84"
NEON_RED = "#ff2a2a"

GROK_COLORWAY = [NEON_CYAN, NEON_MAGENTA, NEON_YELLOW, NEON_BLUE, NEON_GREEN, NEON_RED]

SEARCH_MODE_OPTIONS = [
    {"label": "Search by ID", "value": "id"},
    {"label": "Search by Content", "value": "content"},
]
SEARCH_PLACEHOLDERS = {
    "id": "Enter exact ID (e.g. 88) or partial match...",
    "content": "Search by annotations or sequences...",
}
SELECTION_BUTTONS = {
    "select-all": "all",
    "select-none": "none",
    "select-found": "found",
    "select-random": "random",
    "select-random-explained": "random-explained",
}
MONOSEMANTIC_TOP_N = 20

CUSTOM_CSS = """
<style>
@import url('https://fonts.googleapis.com/css2?family=Space+Grotesk:wght@300;400;500;600;700&display=swap');

:root {
    --bg-color: #05070a;
    --bg-gradient: radial-gradient(circle at 50% 0%, #1a1f2c 0%, #05070a 100%);
    --panel-bg: rgba(13, 17, 26, 0.6);
    --panel-border: 1px solid rgba(255, 255, 255, 0.08);
    --glass-blur: 20px;
    --text-primary: #e1e4e8;
    --text-secondary: #8b949e;
    --accent-red: #ff4b4b;
    --accent-blue: #44aaff;
    --radius-lg: 16px;
    --radius-md: 8px;
    --transition-speed: 0.2s;
}

body {
    margin: 0;
    background: var(--bg-color);
    background-image: var(--bg-gradient);
    background-attachment: fixed;
    color: var(--text-primary);
    font-family: 'Space Grotesk', sans-serif;
    font-size: 15px;
}

.grok-app { display: flex; min-height: 100vh; width: 100%; }

.grok-sidebar {
    width: 340px;
    background: var(--panel-bg);
    backdrop-filter: blur(var(--glass-blur));
    border-right: var(--panel-border);
    padding: 2rem 1.5rem;
    position: fixed;
    top: 0; left: 0; bottom: 0;
    overflow-y: auto;
    z-index: 100;
    transition: transform var(--transition-speed) ease-in-out;
}
.grok-sidebar.collapsed { transform: translateX(-100%); }

.grok-main {
    margin-left: 340px;
    flex-grow: 1;
    padding: 2.5rem 3rem 4rem 3rem;
    transition: margin-left var(--transition-speed) ease-in-out;
}
.grok-main.collapsed { margin-left: 0; }

.grok-title { margin: 0 0 2rem 0; font-weight: 700; font-size: 26px; }

.widget-group { margin-bottom: 1.5rem; }
.widget-label {
    display: block;
    font-size: 12px;
    text-transform: uppercase;
    letter-spacing: 0.08em;
    color: var(--text-secondary);
    margin-bottom: 6px;
}
.grok-input {
    width: 100%;
    box-sizing: border-box;
    padding: 8px 10px;
    background: rgba(255,255,255,0.04);
    border: var(--panel-border);
    border-radius: var(--radius-md);
    color: var(--text-primary);
}
.control-row { display: flex; flex-wrap: wrap; gap: 6px; }
.grok-button {
    background: rgba(68, 170, 255, 0.2);
    border: 1px solid var(--accent-blue);
    color: var(--text-primary);
    border-radius: var(--radius-md);
    padding: 6px 10px;
    cursor: pointer;
    font-family: inherit;
}
.grok-button:hover { background: rgba(68, 170, 255, 0.45); }
.grok-status { color: var(--text-secondary); font-size: 13px; margin-top: 6px; }

.group-header {
    cursor: pointer;
    color: var(--text-primary);
    font-weight: 500;
    padding: 4px 0;
}
.group-header:hover { color: var(--accent-blue); }
.group-list { margin-left: 12px; font-size: 14px; }

.grok-card {
    background: var(--panel-bg);
    border: var(--panel-border);
    border-radius: var(--radius-lg);
    padding: 1.5rem;
    margin-bottom: 2rem;
}
.card-title { margin-top: 0; color: var(--accent-blue); }
.card-columns { display: flex; flex-wrap: wrap; gap: 24px; }
.card-columns > div { flex: 1 1 420px; min-width: 0; }

.interpretation {
    border: 1px solid rgba(252, 238, 10, 0.25);
    border-radius: var(--radius-md);
    padding: 12px;
    margin-top: 12px;
}
.chip {
    display: inline-block;
    font-size: 12px;
    padding: 1px 6px;
    margin: 2px;
    border-radius: 4px;
    background: rgba(68, 170, 255, 0.15);
}
.chip.motif { background: rgba(10, 255, 132, 0.15); font-family: monospace; }

.activation-list { max-height: 520px; overflow-y: auto; }
.activation-item {
    border-bottom: 1px solid rgba(255,255,255,0.06);
    padding: 8px 4px;
    font-size: 13px;
}
.motif { font-family: monospace; font-weight: 600; }
.context-flank { color: var(--text-secondary); font-family: monospace; }
.context-motif { color: var(--accent-blue); font-weight: 700; font-family: monospace; }

.grok-error {
    margin: 4rem auto;
    max-width: 720px;
    border: 1px solid var(--accent-red);
    color: var(--accent-red);
}

.sidebar-toggle {
    position: fixed;
    top: 20px; left: 20px;
    z-index: 200;
    background: var(--panel-bg);
    border: var(--panel-border);
    color: var(--text-primary);
    border-radius: var(--radius-md);
    padding: 8px 12px;
    cursor: pointer;
}
</style>
"""

INDEX_STRING = """
<!DOCTYPE html>
<html>
    <head>
        {%metas%}
        <title>{%title%}</title>
        {%favicon%}
        {%css%}
        __CUSTOM_CSS__
    </head>
    <body>
        {%app_entry%}
        <footer>
            {%config%}
            {%scripts%}
            {%renderer%}
        </footer>
    </body>
</html>
"""


def apply_grok_layout(fig, height=300, showlegend=False):
    top_margin = 60 if showlegend else 30
    fig.update_layout(
        paper_bgcolor=GROK_BG,
        plot_bgcolor=GROK_BG,
        font=dict(color=GROK_TEXT, family=FONT_FAMILY, size=13),
        margin=dict(l=50, r=30, t=top_margin, b=30),
        height=height,
        showlegend=showlegend,
        legend=dict(
            orientation="h",
            x=0.0,
            xanchor="left",
            y=1.08,
            yanchor="bottom",
            font=dict(color=GROK_TEXT, family=FONT_FAMILY, size=11),
            bgcolor="rgba(0,0,0,0)",
        )
        if showlegend
        else None,
        colorway=GROK_COLORWAY,
    )
    fig.update_xaxes(
        showgrid=True,
        gridcolor=GROK_GRID,
        zeroline=False,
        tickfont=dict(color=GROK_MUTED, family=FONT_FAMILY, size=12),
        title_font=dict(color=GROK_TEXT, family=FONT_FAMILY),
    )
    fig.update_yaxes(
        showgrid=True,
        gridcolor=GROK_GRID,
        zeroline=False,
        tickfont=dict(color=GROK_MUTED, family=FONT_FAMILY, size=12),
        title_font=dict(color=GROK_TEXT, family=FONT_FAMILY),
    )
    return fig


def empty_figure(message, height=300):
    fig = go.Figure()
    fig.add_annotation(
        text=message,
        xref="paper",
        yref="paper",
        x=0.5,
        y=0.5,
        showarrow=False,
        font=dict(color=GROK_MUTED, size=16, family=FONT_FAMILY),
    )
    return apply_grok_layout(fig, height=height, showlegend=False)


def build_activation_figure(latent, summary):
    if summary.is_dead:
        return empty_figure(NO_ACTIVATION)

    values = latent.values
    motifs = [record.input for record in latent.activations]
    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=list(range(1, len(values) + 1)),
            y=values,
            customdata=np.array(
                [[record.input, record.context] for record in latent.activations],
                dtype=object,
            ),
            mode="lines+markers",
            name="Activation",
            line=dict(color=NEON_BLUE, width=2),
            marker=dict(size=5),
            hovertemplate="Input: %{customdata[0]}<br>Activation: %{y:.3f}<extra></extra>",
        )
    )
    fig.add_hline(
        y=summary.mean,
        line=dict(color=NEON_GREEN, dash="dash"),
        annotation_text="Mean",
        annotation_position="top left",
        annotation_font=dict(color=NEON_GREEN, size=12),
    )
    if summary.threshold is not None:
        fig.add_hline(
            y=summary.threshold,
            line=dict(color=NEON_RED, dash="dash"),
            annotation_text="Threshold",
            annotation_position="top left",
            annotation_font=dict(color=NEON_RED, size=12),
        )
    fig.update_xaxes(title_text="Rank", showticklabels=len(motifs) <= 40)
    fig.update_yaxes(
        title_text="Activation",
        range=[0, max(summary.max, summary.threshold or 0) * 1.1],
        tickformat=".1f",
    )
    return apply_grok_layout(fig, height=300)


def build_gc_figure(latent, summary):
    if summary.is_dead:
        return empty_figure(NO_ACTIVATION, height=240)

    cutoff = summary.threshold
    significant = [cutoff is not None and record.value >= cutoff for record in latent.activations]
    fig = go.Figure()
    for flag, name, color in ((True, "Significant", NEON_MAGENTA), (False, "Background", GROK_MUTED)):
        records = [r for r, is_sig in zip(latent.activations, significant) if is_sig == flag]
        if not records:
            continue
        fig.add_trace(
            go.Scatter(
                x=[r.gc_content for r in records],
                y=[r.value for r in records],
                text=[r.input for r in records],
                mode="markers",
                name=name,
                marker=dict(color=color, size=7, line=dict(width=0)),
                hovertemplate="%{text}<br>GC: %{x:.0%}<br>Activation: %{y:.3f}<extra></extra>",
            )
        )
    fig.update_xaxes(title_text="Context GC content", range=[0, 1], tickformat=".0%")
    fig.update_yaxes(title_text="Activation")
    return apply_grok_layout(fig, height=240, showlegend=True)


def build_overview_figure(dataset):
    if not len(dataset):
        return empty_figure("No latents loaded.")
    ids = dataset.ids()
    max_values = [dataset[latent_id].max_value for latent_id in ids]
    colors = [GROK_MUTED if dataset[latent_id].is_dead else NEON_CYAN for latent_id in ids]
    fig = go.Figure(
        go.Bar(
            x=ids,
            y=max_values,
            marker=dict(color=colors),
            hovertemplate="Latent %{x}<br>Max activation: %{y:.3f}<extra></extra>",
        )
    )
    fig.update_xaxes(title_text="Latent", type="category")
    fig.update_yaxes(title_text="Max activation")
    return apply_grok_layout(fig, height=360)


def build_monosemantic_figure(index, top_n=MONOSEMANTIC_TOP_N):
    counts = index.counts()[:top_n]
    if not counts:
        return empty_figure("No monosemantic latents found.")
    labels = [annotation for annotation, _ in counts][::-1]
    values = [count for _, count in counts][::-1]
    fig = go.Figure(go.Bar(x=values, y=labels, orientation="h", marker=dict(color=NEON_MAGENTA)))
    fig.update_xaxes(title_text="Monosemantic latents")
    return apply_grok_layout(fig, height=max(300, 24 * len(counts) + 80))


def build_context_view(record):
    prefix, motif, suffix = split_context(record.context, record.input)
    return html.Div(
        [
            html.Span(prefix, className="context-flank"),
            html.Span(f"|{motif}|", className="context-motif"),
            html.Span(suffix, className="context-flank"),
        ]
    )


def build_activation_item(record):
    return html.Div(
        className="activation-item",
        children=[
            html.Div(
                [
                    html.Span("DNA Motif: ", className="widget-label", style={"display": "inline"}),
                    html.Span(record.input, className="motif"),
                    html.Span(
                        f"{record.value:.3f}",
                        style={"float": "right", "color": NEON_BLUE, "fontWeight": 700},
                    ),
                ]
            ),
            build_context_view(record),
            html.Div(
                [
                    html.Span(f"Annotations: {record.annotations or '-'}"),
                    html.Span(f"  |  E-value: {record.e_value}", style={"color": GROK_MUTED}),
                    html.Span(f"  |  GC: {record.gc_content:.0%}", style={"color": GROK_MUTED}),
                ]
            ),
        ],
    )


def _chips(items, empty_text, class_name="chip"):
    if not items:
        return [html.Span(empty_text, className="grok-status")]
    return [html.Span(item, className=class_name) for item in items]


def build_interpretation(browser, latent_id, summary):
    children = [html.H4("Latent Interpretation", style={"marginTop": 0})]
    if summary.is_dead:
        children.append(html.P(NO_ACTIVATION))
        return html.Div(className="interpretation", children=children)
    children.extend(
        [
            html.P(browser.explanation(latent_id)),
            html.Div(
                f"Threshold: {summary.threshold:.2f}  |  Mean: {summary.mean:.2f}  |  Max: {summary.max:.2f}",
                className="grok-status",
            ),
            html.Label("Significant Annotations (above threshold)", className="widget-label"),
            html.Div(_chips(summary.annotations, "No annotations above threshold")),
            html.Label("Significant Motifs (above threshold)", className="widget-label"),
            html.Div(_chips(summary.motifs, "No motifs above threshold", "chip motif")),
        ]
    )
    return html.Div(className="interpretation", children=children)


def build_latent_card(browser, latent_id):
    latent = browser.dataset[latent_id]
    summary = browser.summary(latent_id)
    graph_config = {"displayModeBar": False}
    return html.Div(
        className="grok-card",
        children=[
            html.H2(f"Latent {latent_id}", className="card-title"),
            html.Div(
                className="card-columns",
                children=[
                    html.Div(
                        [
                            html.H3("Activation Pattern"),
                            dcc.Graph(figure=build_activation_figure(latent, summary), config=graph_config),
                            dcc.Graph(figure=build_gc_figure(latent, summary), config=graph_config),
                            build_interpretation(browser, latent_id, summary),
                        ]
                    ),
                    html.Div(
                        [
                            html.H3(f"All Activating Inputs ({len(latent.activations)})"),
                            html.Div(
                                [build_activation_item(record) for record in latent.activations]
                                or [html.Div(NO_ACTIVATION, className="grok-status")],
                                className="activation-list",
                            ),
                        ]
                    ),
                ],
            ),
        ],
    )


def build_latent_cards(browser, selected):
    selected = [latent_id for latent_id in (selected or []) if latent_id in browser.dataset]
    if not selected:
        return html.Div(
            "Please select one or more latents to visualize",
            className="grok-card grok-status",
        )
    return [build_latent_card(browser, latent_id) for latent_id in selected]


def group_state(group_ids, selected):
    selected = set(selected or [])
    if group_ids and all(latent_id in selected for latent_id in group_ids):
        return "[x]"
    if any(latent_id in selected for latent_id in group_ids):
        return "[-]"
    return "[+]"


def build_group_panels(browser, groups, selected, show_annotations=False):
    if not any(groups.values()):
        return html.Div("No latents found", className="grok-status")
    panels = []
    for label, group_ids in groups.items():
        title = label if label == SEARCH_RESULTS_LABEL else f"Group {label}"
        options = []
        for latent_id in group_ids:
            option_label = f"Latent {latent_id}"
            if show_annotations:
                annotations = browser.summary(latent_id).annotations
                if annotations:
                    option_label = f"{option_label}: {', '.join(annotations[:2])}"
            options.append({"label": option_label, "value": latent_id})
        panels.append(
            html.Div(
                [
                    html.Div(
                        f"{group_state(group_ids, selected)} {title}",
                        id={"type": "group-toggle", "index": label},
                        className="group-header",
                        n_clicks=0,
                    ),
                    dcc.Checklist(
                        id={"type": "group-checklist", "index": label},
                        options=options,
                        value=[latent_id for latent_id in group_ids if latent_id in set(selected or [])],
                        className="group-list",
                    ),
                ]
            )
        )
    return panels


def parse_trigger(ctx):
    if not ctx.triggered:
        return None
    prop_id = ctx.triggered[0]["prop_id"].rsplit(".", 1)[0]
    if prop_id.startswith("{"):
        return json.loads(prop_id)
    return prop_id


def resolve_selection_action(trigger, triggered_value=None):
    """Map a callback trigger onto a :meth:`LatentBrowser.apply` action."""
    if isinstance(trigger, dict):
        if trigger.get("type") == "group-toggle":
            return ("group", trigger["index"]) if triggered_value else (None, None)
        if trigger.get("type") == "group-checklist":
            return "sync", trigger["index"]
        return None, None
    if trigger in SELECTION_BUTTONS:
        return SELECTION_BUTTONS[trigger], None
    if trigger == "monosemantic-select":
        return ("annotation", triggered_value) if triggered_value else (None, None)
    return None, None


def build_sidebar(browser):
    return html.Div(
        id="grok-sidebar",
        className="grok-sidebar",
        children=[
            html.H1("SAE Latent Activations", className="grok-title"),
            html.Div(
                className="widget-group",
                children=[
                    html.Label("Select Latents to Visualize", className="widget-label"),
                    dcc.RadioItems(
                        id="search-mode",
                        options=SEARCH_MODE_OPTIONS,
                        value="id",
                        inline=True,
                    ),
                    dcc.Input(
                        id="search-query",
                        type="text",
                        value="",
                        debounce=True,
                        placeholder=SEARCH_PLACEHOLDERS["id"],
                        className="grok-input",
                    ),
                    html.Div(id="search-status", className="grok-status"),
                ],
            ),
            html.Div(
                className="widget-group control-row",
                children=[
                    html.Button("Select All", id="select-all", className="grok-button"),
                    html.Button("Select None", id="select-none", className="grok-button"),
                    html.Button("Select All Found", id="select-found", className="grok-button"),
                    html.Button("Random", id="select-random", className="grok-button"),
                    html.Button(
                        "Random Explained",
                        id="select-random-explained",
                        className="grok-button",
                        disabled=not browser.explained_ids(),
                    ),
                ],
            ),
            html.Div(
                className="widget-group",
                children=[
                    html.Label("Monosemantic Latents", className="widget-label"),
                    dcc.Dropdown(
                        id="monosemantic-select",
                        options=browser.annotation_options(),
                        placeholder="Select an annotation...",
                        clearable=True,
                    ),
                ],
            ),
            html.Div(
                className="widget-group",
                children=[
                    html.Button("Export CSV", id="export-csv", className="grok-button"),
                    dcc.Download(id="download-csv"),
                ],
            ),
            html.Div(id="selection-status", className="grok-status"),
            html.Div(id="latent-groups", className="widget-group"),
        ],
    )


def build_glossary():
    items = []
    for term, text in GLOSSARY.items():
        items.append(html.Dt(term, style={"fontWeight": 600, "marginTop": "10px"}))
        items.append(html.Dd(text, style={"color": GROK_MUTED, "marginLeft": 0}))
    return html.Div(className="grok-card", children=[html.Dl(items)])


def build_tabs(browser):
    tab_kwargs = dict(className="tab", selected_className="tab--selected")
    return dcc.Tabs(
        id="main-tabs",
        value="latents",
        className="grok-tabs",
        children=[
            dcc.Tab(
                label="Latents",
                value="latents",
                children=[html.Div(id="latent-cards")],
                **tab_kwargs,
            ),
            dcc.Tab(
                label="Overview",
                value="overview",
                children=[
                    html.Div(
                        className="grok-card",
                        children=[
                            html.H3("Max Activation per Latent"),
                            dcc.Graph(figure=build_overview_figure(browser.dataset)),
                            html.H3("Monosemantic Annotations"),
                            dcc.Graph(figure=build_monosemantic_figure(browser.monosemantic)),
                        ],
                    )
                ],
                **tab_kwargs,
            ),
            dcc.Tab(label="Glossary", value="glossary", children=[build_glossary()], **tab_kwargs),
        ],
    )


def build_layout(browser, initial_selection):
    return html.Div(
        className="grok-app",
        style={"background": GROK_BG, "minHeight": "100vh", "color": GROK_TEXT},
        children=[
            dcc.Store(id="sidebar-store", data={"collapsed": False}),
            dcc.Store(id="selection-store", data=initial_selection),
            html.Button("", id="sidebar-toggle", className="sidebar-toggle"),
            build_sidebar(browser),
            html.Div(id="grok-main", className="grok-main", children=[build_tabs(browser)]),
        ],
    )


def build_error_layout(message):
    return html.Div(
        className="grok-app",
        style={"background": GROK_BG, "minHeight": "100vh", "color": GROK_TEXT},
        children=[
            html.Div(
                className="grok-card grok-error",
                children=[
                    html.H2("Error loading genomic data"),
                    html.P("Please check the data source and try again."),
                    html.Pre(message, style={"whiteSpace": "pre-wrap"}),
                ],
            )
        ],
    )


def create_app(browser=None, initial_selection=None, error=None):
    app = Dash(__name__)
    app.title = "SAE Latent Activations Dashboard"
    app.index_string = INDEX_STRING.replace("__CUSTOM_CSS__", CUSTOM_CSS)
    if browser is None:
        app.layout = build_error_layout(error or "No dataset loaded.")
        return app
    app.layout = build_layout(browser, initial_selection or [])

    @app.callback(
        Output("search-query", "placeholder"),
        Input("search-mode", "value"),
    )
    def update_placeholder(mode):
        return SEARCH_PLACEHOLDERS.get(mode, SEARCH_PLACEHOLDERS["id"])

    @app.callback(
        Output("latent-groups", "children"),
        Output("search-status", "children"),
        Input("search-query", "value"),
        Input("search-mode", "value"),
        Input("selection-store", "data"),
    )
    def update_selector(query, mode, selected):
        groups = browser.groups(query, mode)
        show_annotations = mode == "content" and bool((query or "").strip())
        panels = build_group_panels(browser, groups, selected, show_annotations)
        if not (query or "").strip():
            return panels, ""
        found = sum(len(ids) for ids in groups.values())
        return panels, f'{found} latents match your search: "{query.strip()}"'

    @app.callback(
        Output("selection-store", "data"),
        Input("select-all", "n_clicks"),
        Input("select-none", "n_clicks"),
        Input("select-found", "n_clicks"),
        Input("select-random", "n_clicks"),
        Input("select-random-explained", "n_clicks"),
        Input("monosemantic-select", "value"),
        Input({"type": "group-toggle", "index": ALL}, "n_clicks"),
        Input({"type": "group-checklist", "index": ALL}, "value"),
        State("search-query", "value"),
        State("search-mode", "value"),
        State("selection-store", "data"),
        prevent_initial_call=True,
    )
    def update_selection(*args):
        query, mode, selected = args[-3:]
        ctx = dash.callback_context
        trigger = parse_trigger(ctx)
        triggered_value = ctx.triggered[0]["value"] if ctx.triggered else None
        action, target = resolve_selection_action(trigger, triggered_value)
        if action is None:
            return dash.no_update
        updated = browser.apply(
            action,
            selected,
            query=query,
            mode=mode,
            target=target,
            checked=triggered_value,
        )
        if updated == list(selected or []):
            return dash.no_update
        return updated

    @app.callback(
        Output("latent-cards", "children"),
        Output("selection-status", "children"),
        Input("selection-store", "data"),
    )
    def render_latents(selected):
        count = len(selected or [])
        if count:
            status = f"Showing {count} selected latent{'s' if count > 1 else ''}"
        else:
            status = "Please select latents to visualize"
        return build_latent_cards(browser, selected), status

    @app.callback(
        Output("download-csv", "data"),
        Input("export-csv", "n_clicks"),
        prevent_initial_call=True,
    )
    def download_csv(_n_clicks):
        return dict(content=export_csv(browser.dataset), filename=DEFAULT_EXPORT_NAME)

    @app.callback(
        Output("grok-sidebar", "className"),
        Output("grok-main", "className"),
        Output("sidebar-store", "data"),
        Input("sidebar-toggle", "n_clicks"),
        State("sidebar-store", "data"),
    )
    def toggle_sidebar(n_clicks, data):
        if n_clicks is None:
            return "grok-sidebar", "grok-main", data
        collapsed = not data.get("collapsed", False)
        sidebar_cls = "grok-sidebar collapsed" if collapsed else "grok-sidebar"
        main_cls = "grok-main collapsed" if collapsed else "grok-main"
        return sidebar_cls, main_cls, {"collapsed": collapsed}

    return app


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="SAE latent activations dashboard.")
    parser.add_argument(
        "--data",
        action="append",
        help="Dataset path or URL; repeat to add fallbacks (default: from config).",
    )
    parser.add_argument("--config", default=None, help="JSON config file.")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8050)
    parser.add_argument("--debug", action="store_true", help="Enable Dash debug + hot reload.")
    parser.add_argument("--export", default=None, help="Write the dataset as CSV and exit.")
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    # Suppress verbose werkzeug logging (GET / POST requests)
    log = logging.getLogger("werkzeug")
    log.setLevel(logging.ERROR)
    log.propagate = False
    log.disabled = True

    config = load_config(args.config, data_sources=args.data)
    loader = DatasetLoader(config.data_sources)
    try:
        dataset = loader.load()
    except DatasetLoadError as exc:
        logger.error("%s", exc)
        if args.export:
            return 1
        app = create_app(error=loader.error)
    else:
        if args.export:
            write_csv(dataset, Path(args.export))
            return 0
        browser = LatentBrowser.from_config(dataset, config)
        app = create_app(browser, browser.initial_selection(config.initial_selection_size))

    app.server.logger.setLevel(logging.ERROR)
    app.run(
        host=args.host,
        port=args.port,
        debug=args.debug,
        dev_tools_hot_reload=args.debug,
        dev_tools_ui=args.debug,
        dev_tools_silence_routes_logging=True,
        use_reloader=False,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
