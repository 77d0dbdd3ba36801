import pytest

from models import ActivationRecord, Latent
from thresholds import NO_ACTIVATION, ThresholdEngine


def test_midpoint_between_mean_and_max(engine):
    assert engine.threshold("5", [4.0, 3.0, 1.0, 0.0]) == pytest.approx(3.0)


@pytest.mark.parametrize(
    "values",
    [[1.0], [2.0, 2.0, 2.0], [10.0, 0.1, 0.1, 0.1], [0.3, 0.2, 0.1]],
)
def test_threshold_lies_between_mean_and_max(engine, values):
    cutoff = engine.threshold("1", values)
    mean = sum(values) / len(values)
    assert mean <= cutoff <= max(values)


def test_override_takes_precedence():
    engine = ThresholdEngine({"5": 0.25, 7: "1.5"})
    assert engine.threshold("5", [4.0, 3.0]) == 0.25
    assert engine.threshold("7", []) == 1.5
    assert engine.threshold("8", [2.0, 0.0]) == pytest.approx(1.5)


def test_overrides_are_read_only():
    engine = ThresholdEngine({"5": 0.25})
    with pytest.raises(TypeError):
        engine.overrides["5"] = 1.0


@pytest.mark.parametrize("values", [[], [0.0, 0.0]])
def test_dead_values_have_no_threshold(engine, values):
    assert engine.threshold("1", values) is None


def test_significant_is_inclusive(dataset, engine):
    significant = engine.significant(dataset["5"])
    assert [r.value for r in significant] == [4.0, 3.0]

    flat = engine.significant(dataset["250"])
    assert len(flat) == 2


def test_dead_latent_has_no_significant_records(dataset):
    engine = ThresholdEngine({"199": 0.0})
    assert engine.significant(dataset["199"]) == ()
    assert engine.latent_threshold(dataset["199"]) is None


def test_summary(dataset, engine):
    summary = engine.summarize(dataset["5"])
    assert summary.mean == pytest.approx(2.0)
    assert summary.max == pytest.approx(4.0)
    assert summary.threshold == pytest.approx(3.0)
    assert summary.annotations == ("TATA-box",)
    assert summary.motifs == ("TATAAA", "TATAAT")
    assert "TATA-box" in summary.headline
    assert "TATAAA, TATAAT" in summary.headline


def test_summary_fallback_text(dataset, engine):
    summary = engine.summarize(dataset["88"])
    assert summary.annotations == ()
    assert "unknown functions" in summary.headline


def test_dead_summary(engine):
    latent = Latent(id="0", activations=(ActivationRecord("A", 0.0),))
    summary = engine.summarize(latent)
    assert summary.is_dead
    assert summary.threshold is None
    assert summary.headline == NO_ACTIVATION
