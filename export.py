import csv
import logging
from pathlib import Path

import pandas as pd

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["Latent ID", "Sequence", "Activation", "Context", "Annotations", "E-Value"]
DEFAULT_EXPORT_NAME = "latent_activations.csv"


def dataset_to_frame(dataset):
    rows = [
        {
            "Latent ID": latent.id,
            "Sequence": record.input,
            "Activation": record.value,
            "Context": record.context,
            "Annotations": record.annotations,
            "E-Value": record.e_value,
        }
        for latent in dataset.values()
        for record in latent.activations
    ]
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


def export_csv(dataset):
    # Strings are always quoted and embedded quotes doubled; activations stay numeric.
    return dataset_to_frame(dataset).to_csv(
        index=False, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n"
    )


def write_csv(dataset, path):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(export_csv(dataset))
    logger.info("Wrote %d activation rows to %s", dataset.total_records(), path)
    return path
