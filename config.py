import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "data_sources": ["latents_data.json", "public/latents_data.json"],
    "threshold_overrides": {},
    "explanations": {},
    "initial_selection_size": 5,
    "random_seed": None,
}


@dataclass(frozen=True)
class Config:
    data_sources: tuple = tuple(DEFAULT_CONFIG["data_sources"])
    threshold_overrides: MappingProxyType = field(
        default_factory=lambda: MappingProxyType({})
    )
    explanations: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))
    initial_selection_size: int = DEFAULT_CONFIG["initial_selection_size"]
    random_seed: int = None


def read_config_file(path):
    if path is None:
        return {}
    path = Path(path)
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        logger.warning("Ignoring invalid config file %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: expected a JSON object", path)
        return {}
    return data


def _as_mapping(raw, key):
    if raw is None or isinstance(raw, dict):
        return raw or {}
    logger.warning("Ignoring config value for %s: expected a JSON object, got %r", key, raw)
    return {}


def _as_int(raw, key):
    default = DEFAULT_CONFIG[key]
    if raw is None:
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring config value for %s: %r is not an integer", key, raw)
        return default


def parse_threshold_overrides(raw):
    overrides = {}
    for latent_id, value in _as_mapping(raw, "threshold_overrides").items():
        try:
            overrides[str(latent_id)] = float(value)
        except (TypeError, ValueError):
            logger.warning("Dropping threshold override for latent %s: %r", latent_id, value)
    return overrides


def load_config(path=None, **overrides):
    """Merge defaults, an optional JSON file and keyword overrides into a Config.

    Keyword overrides set to ``None`` are ignored so CLI flags that were not
    passed leave the file values alone.
    """
    merged = dict(DEFAULT_CONFIG)
    merged.update(read_config_file(path))
    merged.update({k: v for k, v in overrides.items() if v is not None})

    sources = merged.get("data_sources") or DEFAULT_CONFIG["data_sources"]
    if isinstance(sources, str):
        sources = [sources]
    raw_explanations = _as_mapping(merged.get("explanations"), "explanations")
    explanations = {str(k): str(v) for k, v in raw_explanations.items() if v}
    size = _as_int(merged.get("initial_selection_size"), "initial_selection_size")
    return Config(
        data_sources=tuple(str(source) for source in sources),
        threshold_overrides=MappingProxyType(
            parse_threshold_overrides(merged.get("threshold_overrides"))
        ),
        explanations=MappingProxyType(explanations),
        initial_selection_size=max(0, size),
        random_seed=_as_int(merged.get("random_seed"), "random_seed"),
    )
