import dataclasses

import pytest

from models import ActivationRecord, Dataset, Latent, annotation_tokens


def test_annotation_tokens_strips_list_punctuation():
    assert annotation_tokens("['TATA-box', 'CAAT-box']") == ["TATA-box", "CAAT-box"]
    assert annotation_tokens('["E-box"]') == ["E-box"]
    assert annotation_tokens("") == []
    assert annotation_tokens(None) == []
    assert annotation_tokens(" , ,GATA") == ["GATA"]


def test_gc_content_is_derived_from_context():
    record = ActivationRecord(input="GC", value=1.0, context="AT|GC|AT")
    assert record.gc_content == pytest.approx(2 / 6)

    moved = dataclasses.replace(record, context="GG|GC|CC")
    assert moved.gc_content == 1.0
    assert record.gc_content == pytest.approx(2 / 6)


def test_gc_content_cannot_be_supplied():
    with pytest.raises(TypeError):
        ActivationRecord(input="GC", value=1.0, context="GC", gc_content=0.1)


def test_record_is_immutable():
    record = ActivationRecord(input="GC", value=1.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        record.value = 2.0


def test_dead_latent_detection():
    assert Latent(id="1").is_dead
    assert Latent(id="2", activations=(ActivationRecord("A", 0.0),)).is_dead
    assert not Latent(id="3", activations=(ActivationRecord("A", 0.5),)).is_dead


def test_empty_latent_statistics_do_not_fail():
    latent = Latent(id="1")
    assert latent.max_value == 0.0
    assert latent.mean_value == 0.0
    assert latent.is_sorted()


def test_dataset_is_read_only_and_ordered():
    latents = [Latent(id=i) for i in ("10", "2", "33")]
    dataset = Dataset(latents)
    assert dataset.ids() == ["10", "2", "33"]
    assert "2" in dataset
    with pytest.raises(TypeError):
        dataset["4"] = Latent(id="4")


def test_dataset_helpers(dataset):
    assert dataset.total_records() == 12
    assert dataset.dead_ids() == ["199"]
    assert dataset.explained_ids({"250": "x", "999": "y"}) == ["250"]
