import json
import logging

from config import DEFAULT_CONFIG, load_config


def test_defaults_without_file():
    config = load_config()
    assert list(config.data_sources) == DEFAULT_CONFIG["data_sources"]
    assert dict(config.threshold_overrides) == {}
    assert config.initial_selection_size == 5
    assert config.random_seed is None


def test_missing_file_is_not_an_error(tmp_path):
    assert load_config(tmp_path / "nope.json").initial_selection_size == 5


def test_file_values_and_overrides(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "data_sources": "https://example.org/latents.json",
                "threshold_overrides": {"12": 0.4, "13": "bad"},
                "explanations": {"12": "Binds TATA boxes.", "14": ""},
                "initial_selection_size": 3,
                "random_seed": 7,
            }
        )
    )
    config = load_config(path, data_sources=["local.json", "fallback.json"])
    assert config.data_sources == ("local.json", "fallback.json")
    assert dict(config.threshold_overrides) == {"12": 0.4}
    assert dict(config.explanations) == {"12": "Binds TATA boxes."}
    assert config.initial_selection_size == 3
    assert config.random_seed == 7


def test_none_overrides_keep_file_values(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"data_sources": ["a.json"]}))
    assert load_config(path, data_sources=None).data_sources == ("a.json",)


def test_invalid_json_falls_back_to_defaults(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text("{oops")
    with caplog.at_level(logging.WARNING, logger="config"):
        config = load_config(path)
    assert list(config.data_sources) == DEFAULT_CONFIG["data_sources"]
    assert "Ignoring invalid config file" in caplog.text


def test_bad_scalar_values_fall_back_to_defaults(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "initial_selection_size": "many",
                "random_seed": [1, 2],
                "threshold_overrides": ["12", 0.4],
                "explanations": "none",
            }
        )
    )
    with caplog.at_level(logging.WARNING, logger="config"):
        config = load_config(path)
    assert config.initial_selection_size == 5
    assert config.random_seed is None
    assert dict(config.threshold_overrides) == {}
    assert dict(config.explanations) == {}
    assert "initial_selection_size" in caplog.text
    assert "random_seed" in caplog.text


def test_numeric_strings_are_accepted(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"initial_selection_size": "3", "random_seed": "11"}))
    config = load_config(path)
    assert config.initial_selection_size == 3
    assert config.random_seed == 11
