import re
from dataclasses import dataclass, field

from models import annotation_tokens

SEARCH_MODES = ("id", "content")
SEARCH_RESULTS_LABEL = "Search Results"
UNPARSED_LABEL = "Unparsed"
GROUP_SIZE = 100

DIGITS_RE = re.compile(r"[0-9]+")
HAS_DIGIT_RE = re.compile(r"\d")


def _normalize_query(query):
    return (query or "").strip()


def _contains(text, needle):
    return needle in (text or "").lower()


def matches_id(latent_id, query):
    if DIGITS_RE.fullmatch(query):
        return latent_id == query
    return _contains(latent_id, query.lower())


def matches_content(latent, query, engine):
    if latent.is_dead:
        return False
    needle = query.lower()
    for record in engine.significant(latent):
        if any(_contains(token, needle) for token in annotation_tokens(record.annotations)):
            return True
    if any(_contains(record.input, needle) for record in latent.activations):
        return True
    return any(
        _contains(token, needle)
        for record in latent.activations
        for token in annotation_tokens(record.annotations)
    )


def filter_latents(dataset, query, mode, engine):
    query = _normalize_query(query)
    if not query:
        return dataset.ids()
    if mode == "id":
        return [latent_id for latent_id in dataset.ids() if matches_id(latent_id, query)]
    if mode == "content":
        return [
            latent.id for latent in dataset.values() if matches_content(latent, query, engine)
        ]
    raise ValueError(f"Unknown search mode: {mode!r} (expected one of {SEARCH_MODES})")


def uses_decade_groups(query, mode):
    query = _normalize_query(query)
    return not query or (mode == "id" and not HAS_DIGIT_RE.search(query))


def decade_label(latent_id):
    latent_id = str(latent_id)
    if not DIGITS_RE.fullmatch(latent_id):
        return UNPARSED_LABEL
    number = int(latent_id)
    start = (number // GROUP_SIZE) * GROUP_SIZE
    return f"{start}-{start + GROUP_SIZE - 1}"


def group_latents(ids, query=None, mode="id"):
    """Bucket ids by hundreds, or return one search-results bucket.

    Ids that are not integers land in an ``Unparsed`` bucket rather than
    being folded into ``0-99``.
    """
    if not uses_decade_groups(query, mode):
        return {SEARCH_RESULTS_LABEL: list(ids)}
    groups = {}
    for latent_id in ids:
        groups.setdefault(decade_label(latent_id), []).append(latent_id)
    return groups


@dataclass
class MonosemanticIndex:
    by_annotation: dict = field(default_factory=dict)

    def counts(self):
        pairs = [(annotation, len(ids)) for annotation, ids in self.by_annotation.items()]
        return sorted(pairs, key=lambda pair: pair[1], reverse=True)

    def latent_ids(self):
        return [latent_id for ids in self.by_annotation.values() for latent_id in ids]

    def __len__(self):
        return sum(len(ids) for ids in self.by_annotation.values())


def monosemantic(dataset, engine):
    index = MonosemanticIndex()
    for latent in dataset.values():
        if latent.is_dead:
            continue
        labels = engine.significant_annotations(latent)
        if len(labels) == 1:
            index.by_annotation.setdefault(labels[0], []).append(latent.id)
    return index
