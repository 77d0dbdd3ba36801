VALID_BASES = frozenset("ATGCN")
CONTEXT_DELIMITER = "|"


def clean_sequence(sequence):
    if not sequence:
        return ""
    return "".join(base for base in str(sequence).upper() if base in VALID_BASES)


def gc_content(sequence):
    cleaned = clean_sequence(sequence)
    if not cleaned:
        return 0.0
    gc = cleaned.count("G") + cleaned.count("C")
    return gc / len(cleaned)


def split_context(context, motif=""):
    """Split a ``prefix|motif|suffix`` context into its three parts.

    Contexts without the delimiter are returned whole as the prefix so the
    caller can still show them.
    """
    context = context or ""
    parts = context.split(CONTEXT_DELIMITER)
    if len(parts) < 3:
        return context, motif, ""
    prefix, middle = parts[0], parts[1]
    suffix = CONTEXT_DELIMITER.join(parts[2:])
    return prefix, middle or motif, suffix
