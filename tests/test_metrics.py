import pytest

from metrics import clean_sequence, gc_content, split_context


@pytest.mark.parametrize(
    "sequence, expected",
    [
        ("", 0.0),
        (None, 0.0),
        ("NNNN", 0.0),
        ("GCGC", 1.0),
        ("ATGC", 0.5),
        ("ATATGC", 1 / 3),
        ("atgc", 0.5),
    ],
)
def test_gc_content(sequence, expected):
    assert gc_content(sequence) == pytest.approx(expected)


def test_gc_content_ignores_invalid_symbols():
    # Pipes, whitespace and IUPAC codes outside ATGCN are dropped before counting.
    assert clean_sequence("ac|gt R\n") == "ACGT"
    assert gc_content("ac|gt R\n") == pytest.approx(0.5)
    assert gc_content("|||xyz") == 0.0


def test_split_context_pipe_delimited():
    assert split_context("AAA|TATA|CCC", "TATA") == ("AAA", "TATA", "CCC")


def test_split_context_without_delimiters():
    assert split_context("AAATATACCC", "TATA") == ("AAATATACCC", "TATA", "")
    assert split_context(None, "TATA") == ("", "TATA", "")


def test_split_context_keeps_extra_pipes_in_suffix():
    assert split_context("A|B|C|D") == ("A", "B", "C|D")
