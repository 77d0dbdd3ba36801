import json
import logging
import math
from pathlib import Path

import requests

from models import ActivationRecord, Dataset, Latent

logger = logging.getLogger(__name__)

PRE_SHAPED = "pre_shaped"
TOKEN_EXPORT = "token_export"

ACTIVATION_KEY = "latent_{}_activation"
ANNOTATION_KEYS = ("annotations", "motif_annotations")
E_VALUE_KEYS = ("e-value", "eValue", "e_value")
DEFAULT_E_VALUE = "0"
REQUEST_TIMEOUT = 30


class DatasetLoadError(RuntimeError):
    pass


def detect_variant(raw):
    if not isinstance(raw, dict) or not raw:
        raise DatasetLoadError("Dataset must be a non-empty JSON object.")
    # Non-container entries are skipped when sampling and later load as dead latents.
    for sample in raw.values():
        if isinstance(sample, dict):
            return PRE_SHAPED
        if isinstance(sample, list):
            return TOKEN_EXPORT
    logger.warning("No latent in the dataset holds activation data; all latents are dead.")
    return PRE_SHAPED


def _as_value(value):
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(value) or value < 0:
        return 0.0
    return value


def _as_text(value):
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value if item is not None)
    return str(value)


def _first_present(item, keys, default):
    for key in keys:
        value = _as_text(item.get(key))
        if value:
            return value
    return default


def build_record(motif, value, context, annotations, e_value):
    return ActivationRecord(
        input=_as_text(motif),
        value=_as_value(value),
        context=_as_text(context),
        annotations=_as_text(annotations),
        e_value=_as_text(e_value) or DEFAULT_E_VALUE,
    )


def _records_from_pre_shaped(entry):
    records = []
    items = entry.get("activations")
    if not isinstance(items, list):
        if items is not None:
            logger.debug("Ignoring non-list activations field: %r", items)
        items = []
    for item in items:
        if not isinstance(item, dict):
            logger.debug("Skipping non-object activation record: %r", item)
            continue
        records.append(
            build_record(
                item.get("input"),
                item.get("value"),
                item.get("context"),
                item.get("annotations"),
                _first_present(item, E_VALUE_KEYS, DEFAULT_E_VALUE),
            )
        )
    return records


def _records_from_token_export(latent_id, tokens):
    activation_key = ACTIVATION_KEY.format(latent_id)
    records = []
    for item in tokens:
        if not isinstance(item, dict):
            logger.debug("Skipping non-object token for latent %s: %r", latent_id, item)
            continue
        records.append(
            build_record(
                item.get("token"),
                item.get(activation_key, 0),
                item.get("context"),
                _first_present(item, ANNOTATION_KEYS, ""),
                _first_present(item, ("e-value",), DEFAULT_E_VALUE),
            )
        )
    return records


def _check_descending(latent):
    if not latent.is_sorted():
        logger.warning(
            "Latent %s activations are not in descending order; keeping source order.",
            latent.id,
        )


def normalize(raw):
    """Build a canonical :class:`Dataset` from either supported JSON layout.

    ``pre_shaped`` payloads map latent ids to ``{"activations": [...]}``;
    ``token_export`` payloads map latent ids to a list of per-token objects
    carrying a ``latent_<id>_activation`` field. Record order is kept as given.
    """
    variant = detect_variant(raw)
    logger.info("Normalizing %d latents (%s layout)", len(raw), variant)
    latents = []
    for latent_id, entry in raw.items():
        latent_id = str(latent_id)
        if variant == PRE_SHAPED:
            entry = entry if isinstance(entry, dict) else {}
            records = _records_from_pre_shaped(entry)
        else:
            entry = entry if isinstance(entry, list) else []
            records = _records_from_token_export(latent_id, entry)
        latent = Latent(id=latent_id, activations=tuple(records))
        _check_descending(latent)
        latents.append(latent)
    dataset = Dataset(latents)
    dead = dataset.dead_ids()
    if dead:
        logger.info("%d dead latents in dataset", len(dead))
    return dataset


def read_source(source, timeout=REQUEST_TIMEOUT):
    source = str(source)
    if source.startswith(("http://", "https://")):
        response = requests.get(source, timeout=timeout)
        response.raise_for_status()
        return response.json()
    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")
    return json.loads(path.read_text())


def load_dataset(sources, timeout=REQUEST_TIMEOUT):
    """Try each source in order and normalize the first one that loads."""
    errors = []
    for source in sources:
        try:
            raw = read_source(source, timeout=timeout)
            dataset = normalize(raw)
        except (OSError, ValueError, requests.RequestException, DatasetLoadError) as exc:
            logger.warning("Failed to load %s: %s", source, exc)
            errors.append(f"{source}: {exc}")
            continue
        logger.info("Loaded %r from %s", dataset, source)
        return dataset
    if not errors:
        raise DatasetLoadError("No data sources configured.")
    raise DatasetLoadError("Error loading genomic data. " + "; ".join(errors))


class DatasetLoader:
    """Holds the one-shot load state for a dashboard session."""

    def __init__(self, sources, timeout=REQUEST_TIMEOUT):
        self.sources = tuple(sources)
        self.timeout = timeout
        self.loading = False
        self.dataset = None
        self.error = None

    def load(self):
        if self.loading:
            raise RuntimeError("A dataset load is already in progress.")
        if self.dataset is not None:
            return self.dataset
        if self.error is not None:
            raise DatasetLoadError(self.error)
        self.loading = True
        try:
            self.dataset = load_dataset(self.sources, timeout=self.timeout)
            self.error = None
        except DatasetLoadError as exc:
            self.error = str(exc)
            raise
        finally:
            self.loading = False
        return self.dataset
