import logging
import random

import selection as sel
from explanations import CURATED_EXPLANATIONS, explanation_for
from search import filter_latents, group_latents, monosemantic
from thresholds import ThresholdEngine

logger = logging.getLogger(__name__)

ACTIONS = (
    "all",
    "none",
    "found",
    "random",
    "random-explained",
    "group",
    "toggle",
    "sync",
    "annotation",
)


class LatentBrowser:
    """Search, grouping and selection over one loaded dataset.

    Both dashboards drive the selector through :meth:`apply`, which maps a
    named user action onto the pure transitions in :mod:`selection`.
    """

    def __init__(self, dataset, engine=None, explanations=None, rng=None):
        self.dataset = dataset
        self.engine = engine or ThresholdEngine()
        self.explanations = explanations if explanations is not None else CURATED_EXPLANATIONS
        self.rng = rng or random.Random()
        self.monosemantic = monosemantic(dataset, self.engine)
        logger.info(
            "%d of %d latents are monosemantic", len(self.monosemantic), len(dataset)
        )

    @classmethod
    def from_config(cls, dataset, config):
        return cls(
            dataset,
            engine=ThresholdEngine(config.threshold_overrides),
            explanations=config.explanations,
            rng=random.Random(config.random_seed),
        )

    def filtered(self, query, mode):
        return filter_latents(self.dataset, query, mode, self.engine)

    def groups(self, query, mode):
        return group_latents(self.filtered(query, mode), query, mode)

    def explained_ids(self):
        return self.dataset.explained_ids(self.explanations)

    def summary(self, latent_id):
        return self.engine.summarize(self.dataset[latent_id])

    def explanation(self, latent_id):
        return explanation_for(latent_id, self.explanations, self.summary(latent_id))

    def initial_selection(self, size):
        return sel.initial_selection(self.dataset.ids(), size)

    def annotation_options(self):
        return [
            {"label": f"{annotation} ({count})", "value": annotation}
            for annotation, count in self.monosemantic.counts()
        ]

    def apply(self, action, selection, query="", mode="id", target=None, checked=None):
        selection = list(selection or [])
        if action == "all":
            return sel.select_all(self.dataset.ids())
        if action == "none":
            return sel.select_none()
        if action == "found":
            return sel.select_found(self.filtered(query, mode))
        if action == "random":
            return sel.select_random(selection, self.dataset.ids(), rng=self.rng)
        if action == "random-explained":
            return sel.select_random_explained(selection, self.explained_ids(), rng=self.rng)
        if action == "group":
            group_ids = self.groups(query, mode).get(target, [])
            return sel.select_group(selection, group_ids)
        if action == "toggle":
            return sel.toggle(selection, target)
        if action == "sync":
            group_ids = self.groups(query, mode).get(target, [])
            return sel.sync_group(selection, group_ids, checked)
        if action == "annotation":
            return sel.select_found(self.monosemantic.by_annotation.get(target, []))
        raise ValueError(f"Unknown selection action: {action!r}")
