from types import MappingProxyType

_glossary_lists = {
    "Latent": [
        "A single unit of the sparse autoencoder's learned representation. ",
        "Each latent is trained to fire on a narrow pattern in the genomic language model's embeddings.",
    ],
    "Activation": [
        "How strongly a latent responds to a given input sequence. ",
        "Activations are non-negative; larger values mean a stronger response.",
    ],
    "Dead latent": [
        "A latent whose maximum observed activation across the dataset is zero. ",
        "Dead latents have no threshold and are shown with a 'No activation' panel.",
    ],
    "Monosemantic latent": [
        "A latent whose significant activations all share exactly one annotation label.",
    ],
    "GC content": [
        "The fraction of G and C bases in a DNA sequence, computed over the full ",
        "genomic context after dropping any character outside A, T, G, C and N.",
    ],
    "Threshold": [
        "The cutoff separating significant from background activations for a latent: ",
        "mean + (max - mean) * 0.5 unless a fixed override exists for that latent. ",
        "Values equal to the threshold count as significant.",
    ],
    "Motif": ["The short genomic token that produced the activation."],
    "Context": [
        "The longer genomic sequence around the motif, written as prefix|motif|suffix.",
    ],
    "E-value": [
        "Statistical significance of the annotation match reported by the upstream ",
        "motif scan. Shown as given; smaller is more significant.",
    ],
}

GLOSSARY = MappingProxyType({k: "".join(v) for k, v in _glossary_lists.items()})

CURATED_EXPLANATIONS = MappingProxyType({})


def explanation_for(latent_id, explanations=CURATED_EXPLANATIONS, summary=None):
    text = explanations.get(str(latent_id))
    if text:
        return text
    if summary is not None:
        return summary.headline
    return ""
