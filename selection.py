"""Pure transitions over the list of selected latent ids.

Selections are plain lists so they can live in a ``dcc.Store``. Order is the
display order; membership never holds duplicates.
"""

import logging
import random

logger = logging.getLogger(__name__)


def _dedupe(ids):
    return list(dict.fromkeys(ids))


def toggle(selection, latent_id):
    if latent_id in selection:
        return [item for item in selection if item != latent_id]
    return _dedupe(list(selection) + [latent_id])


def select_all(ids):
    return _dedupe(ids)


def select_none():
    return []


def select_group(selection, group_ids):
    current = set(selection)
    if all(latent_id in current for latent_id in group_ids):
        group = set(group_ids)
        return [item for item in selection if item not in group]
    return _dedupe(list(selection) + list(group_ids))


def select_found(filtered_ids):
    return _dedupe(filtered_ids)


def select_random(selection, pool, rng=None):
    pool = list(pool)
    if not pool:
        logger.info("Random selection requested from an empty pool")
        return list(selection)
    rng = rng or random
    return [rng.choice(pool)]


def select_random_explained(selection, explained_ids, rng=None):
    return select_random(selection, explained_ids, rng=rng)


def sync_group(selection, group_ids, checked):
    """Apply a group checklist's checked values as individual toggles."""
    checked = set(checked or [])
    current = set(selection)
    result = list(selection)
    for latent_id in group_ids:
        if (latent_id in checked) != (latent_id in current):
            result = toggle(result, latent_id)
    return result


def initial_selection(ids, size):
    return _dedupe(ids)[: max(0, int(size))]
