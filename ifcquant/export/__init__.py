"""CSV and Markdown exports."""

from ifcquant.export.csv_export import (
    entities_to_csv,
    structural_params_to_csv,
    to_csv_bytes,
    write_csv,
)
from ifcquant.export.report import QuantityReport

__all__ = [
    "QuantityReport",
    "entities_to_csv",
    "structural_params_to_csv",
    "to_csv_bytes",
    "write_csv",
]
