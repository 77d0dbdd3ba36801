import random

import pytest

from browser import LatentBrowser
from normalizer import normalize
from thresholds import ThresholdEngine


def _record(motif, value, annotations="", context=None, e_value="1e-5"):
    return {
        "input": motif,
        "value": value,
        "context": context if context is not None else f"ACGT|{motif}|TTGC",
        "annotations": annotations,
        "e-value": e_value,
    }


@pytest.fixture
def raw_pre_shaped():
    return {
        "5": {
            "activations": [
                _record("TATAAA", 4.0, "['TATA-box']"),
                _record("TATAAT", 3.0, "['TATA-box']"),
                _record("CCAAT", 1.0, "['CAAT-box', 'GC-box']"),
                _record("GGGCGG", 0.0, ""),
            ]
        },
        "105": {
            "activations": [
                _record("CACCTG", 2.0, "E-box, TATA-box"),
                _record("ACGTAC", 1.0, ""),
            ]
        },
        "199": {
            "activations": [
                _record("TATAAA", 0.0, "['TATA-box']"),
                _record("TATAAT", 0.0, ""),
            ]
        },
        "250": {
            "activations": [
                _record("AGATAA", 1.0, "['GATA']"),
                _record("TGATAA", 1.0, "['GATA']"),
            ]
        },
        "88": {
            "activations": [
                _record("CACGTG", 5.0, ""),
                _record("GGGACTTTCC", 1.0, "['NFKB']"),
            ]
        },
    }


@pytest.fixture
def dataset(raw_pre_shaped):
    return normalize(raw_pre_shaped)


@pytest.fixture
def engine():
    return ThresholdEngine()


@pytest.fixture
def browser(dataset, engine):
    return LatentBrowser(
        dataset,
        engine=engine,
        explanations={"88": "Binds NF-kB sites."},
        rng=random.Random(0),
    )
