import json
from types import SimpleNamespace

import pytest
from dash import html

import dash_app
from search import SEARCH_RESULTS_LABEL
from thresholds import NO_ACTIVATION


def _annotation_texts(fig):
    return [annotation.text for annotation in fig.layout.annotations]


def test_activation_figure_has_mean_and_threshold(browser):
    latent = browser.dataset["5"]
    fig = dash_app.build_activation_figure(latent, browser.summary("5"))
    assert list(fig.data[0].y) == [4.0, 3.0, 1.0, 0.0]
    texts = _annotation_texts(fig)
    assert "Mean" in texts
    assert "Threshold" in texts
    assert fig.layout.yaxis.range[1] == pytest.approx(4.4)


def test_dead_latent_figures(browser):
    latent = browser.dataset["199"]
    summary = browser.summary("199")
    assert _annotation_texts(dash_app.build_activation_figure(latent, summary)) == [NO_ACTIVATION]
    assert _annotation_texts(dash_app.build_gc_figure(latent, summary)) == [NO_ACTIVATION]


def test_gc_figure_splits_significant(browser):
    fig = dash_app.build_gc_figure(browser.dataset["5"], browser.summary("5"))
    names = [trace.name for trace in fig.data]
    assert names == ["Significant", "Background"]
    assert len(fig.data[0].x) == 2


def test_overview_and_monosemantic_figures(browser):
    overview = dash_app.build_overview_figure(browser.dataset)
    assert list(overview.data[0].x) == browser.dataset.ids()
    mono = dash_app.build_monosemantic_figure(browser.monosemantic)
    assert set(mono.data[0].y) == {"TATA-box", "GATA"}


def test_group_state_markers():
    assert dash_app.group_state(["1", "2"], ["1", "2"]) == "[x]"
    assert dash_app.group_state(["1", "2"], ["2"]) == "[-]"
    assert dash_app.group_state(["1", "2"], []) == "[+]"


def test_group_panels(browser):
    panels = dash_app.build_group_panels(browser, browser.groups("", "id"), ["5"])
    assert len(panels) == 3
    header, checklist = panels[0].children
    assert header.id == {"type": "group-toggle", "index": "0-99"}
    assert header.children == "[-] Group 0-99"
    assert checklist.value == ["5"]


def test_search_panel_shows_annotations(browser):
    groups = browser.groups("tata", "content")
    panels = dash_app.build_group_panels(browser, groups, [], show_annotations=True)
    header, checklist = panels[0].children
    assert header.children.endswith(SEARCH_RESULTS_LABEL)
    assert checklist.options[0]["label"] == "Latent 5: TATA-box"


def test_empty_group_panels(browser):
    panel = dash_app.build_group_panels(browser, {SEARCH_RESULTS_LABEL: []}, [])
    assert panel.children == "No latents found"


def test_latent_cards(browser):
    cards = dash_app.build_latent_cards(browser, ["5", "unknown", "199"])
    assert len(cards) == 2
    placeholder = dash_app.build_latent_cards(browser, [])
    assert isinstance(placeholder, html.Div)


@pytest.mark.parametrize(
    "trigger, value, expected",
    [
        ("select-all", 1, ("all", None)),
        ("select-random-explained", 2, ("random-explained", None)),
        ("monosemantic-select", "GATA", ("annotation", "GATA")),
        ("monosemantic-select", None, (None, None)),
        ({"type": "group-toggle", "index": "0-99"}, 1, ("group", "0-99")),
        ({"type": "group-toggle", "index": "0-99"}, 0, (None, None)),
        ({"type": "group-checklist", "index": "0-99"}, ["5"], ("sync", "0-99")),
        ({"type": "latent-card", "index": "5"}, 1, (None, None)),
        ("something-else", 1, (None, None)),
    ],
)
def test_resolve_selection_action(trigger, value, expected):
    assert dash_app.resolve_selection_action(trigger, value) == expected


def test_parse_trigger():
    pattern = {"index": "0-99", "type": "group-toggle"}
    ctx = SimpleNamespace(triggered=[{"prop_id": json.dumps(pattern) + ".n_clicks", "value": 1}])
    assert dash_app.parse_trigger(ctx) == pattern
    ctx = SimpleNamespace(triggered=[{"prop_id": "select-all.n_clicks", "value": 1}])
    assert dash_app.parse_trigger(ctx) == "select-all"
    assert dash_app.parse_trigger(SimpleNamespace(triggered=[])) is None


def test_create_app_layout(browser):
    app = dash_app.create_app(browser, ["5"])
    assert app.title == "SAE Latent Activations Dashboard"
    layout = app.layout
    store = next(child for child in layout.children if getattr(child, "id", None) == "selection-store")
    assert store.data == ["5"]


def test_create_app_error_state():
    app = dash_app.create_app(error="latents_data.json: File not found")
    text = str(app.layout)
    assert "Error loading genomic data" in text
    assert "File not found" in text


def test_main_export(tmp_path, raw_pre_shaped):
    data = tmp_path / "latents_data.json"
    data.write_text(json.dumps(raw_pre_shaped))
    out = tmp_path / "export.csv"
    assert dash_app.main(["--data", str(data), "--export", str(out)]) == 0
    assert out.exists()


def test_main_export_fails_without_data(tmp_path):
    out = tmp_path / "export.csv"
    assert dash_app.main(["--data", str(tmp_path / "missing.json"), "--export", str(out)]) == 1
    assert not out.exists()
