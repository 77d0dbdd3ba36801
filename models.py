import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import numpy as np

from metrics import gc_content as compute_gc_content

ANNOTATION_PUNCT_RE = re.compile(r"[\[\]'\"]")


def annotation_tokens(annotations):
    """Split an annotation string like ``"['TATA-box', 'CAAT']"`` into labels."""
    if annotations is None:
        return []
    text = ANNOTATION_PUNCT_RE.sub("", str(annotations))
    return [token.strip() for token in text.split(",") if token.strip()]


@dataclass(frozen=True)
class ActivationRecord:
    input: str
    value: float
    context: str = ""
    annotations: str = ""
    e_value: str = "0"
    gc_content: float = field(init=False)

    def __post_init__(self):
        # Always derived from the context; dataclasses.replace() re-runs this.
        object.__setattr__(self, "gc_content", compute_gc_content(self.context))

    def as_dict(self):
        return {
            "input": self.input,
            "value": self.value,
            "context": self.context,
            "annotations": self.annotations,
            "e_value": self.e_value,
            "gc_content": self.gc_content,
        }


@dataclass(frozen=True)
class Latent:
    id: str
    activations: tuple = ()

    @property
    def values(self):
        return np.array([record.value for record in self.activations], dtype=float)

    @property
    def is_dead(self):
        return not self.activations or self.activations[0].value == 0

    @property
    def max_value(self):
        if not self.activations:
            return 0.0
        return float(self.values.max())

    @property
    def mean_value(self):
        if not self.activations:
            return 0.0
        return float(self.values.mean())

    def is_sorted(self):
        values = self.values
        return bool(np.all(values[:-1] >= values[1:])) if values.size > 1 else True


class Dataset(Mapping):
    """Read-only mapping of latent id to :class:`Latent`, in source order."""

    def __init__(self, latents):
        self._latents = MappingProxyType(
            {latent.id: latent for latent in latents}
        )

    def __getitem__(self, latent_id):
        return self._latents[latent_id]

    def __iter__(self):
        return iter(self._latents)

    def __len__(self):
        return len(self._latents)

    def __repr__(self):
        return f"Dataset({len(self)} latents, {self.total_records()} records)"

    def ids(self):
        return list(self._latents)

    def total_records(self):
        return sum(len(latent.activations) for latent in self._latents.values())

    def dead_ids(self):
        return [latent.id for latent in self._latents.values() if latent.is_dead]

    def explained_ids(self, explanations):
        return [latent_id for latent_id in self._latents if latent_id in explanations]
