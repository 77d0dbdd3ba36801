from dataclasses import dataclass
from types import MappingProxyType

import numpy as np

from models import annotation_tokens

THRESHOLD_RATIO = 0.5
NO_ACTIVATION = "No activation: this latent never fires in the dataset."


@dataclass(frozen=True)
class LatentSummary:
    latent_id: str
    is_dead: bool
    mean: float
    max: float
    threshold: float
    annotations: tuple
    motifs: tuple

    @property
    def headline(self):
        if self.is_dead:
            return NO_ACTIVATION
        top_annotations = ", ".join(self.annotations[:2]) or "unknown functions"
        top_motifs = ", ".join(self.motifs[:3]) or "not clearly defined"
        return (
            f"This latent appears to be detecting patterns related to {top_annotations}. "
            f"The significant motifs activating this latent are {top_motifs}."
        )


def _unique(items):
    return tuple(dict.fromkeys(items))


class ThresholdEngine:
    """Significance cutoffs per latent: fixed overrides first, else a midpoint.

    The computed cutoff is ``mean + (max - mean) * 0.5``. Dead latents have no
    cutoff; callers should check ``Latent.is_dead`` first.
    """

    def __init__(self, overrides=None, ratio=THRESHOLD_RATIO):
        self.overrides = MappingProxyType(
            {str(k): float(v) for k, v in (overrides or {}).items()}
        )
        self.ratio = ratio

    def threshold(self, latent_id, values):
        latent_id = str(latent_id)
        if latent_id in self.overrides:
            return self.overrides[latent_id]
        values = np.asarray(values, dtype=float)
        if values.size == 0:
            return None
        max_val = float(values.max())
        if max_val == 0:
            return None
        mean_val = float(values.mean())
        return mean_val + (max_val - mean_val) * self.ratio

    def latent_threshold(self, latent):
        if latent.is_dead:
            return None
        return self.threshold(latent.id, latent.values)

    def significant(self, latent):
        cutoff = self.latent_threshold(latent)
        if cutoff is None:
            return ()
        return tuple(record for record in latent.activations if record.value >= cutoff)

    def significant_annotations(self, latent):
        return _unique(
            token
            for record in self.significant(latent)
            for token in annotation_tokens(record.annotations)
        )

    def summarize(self, latent):
        if latent.is_dead:
            return LatentSummary(
                latent_id=latent.id,
                is_dead=True,
                mean=0.0,
                max=0.0,
                threshold=None,
                annotations=(),
                motifs=(),
            )
        significant = self.significant(latent)
        return LatentSummary(
            latent_id=latent.id,
            is_dead=False,
            mean=latent.mean_value,
            max=latent.max_value,
            threshold=self.latent_threshold(latent),
            annotations=self.significant_annotations(latent),
            motifs=_unique(record.input for record in significant if record.input),
        )
