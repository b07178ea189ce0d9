"""ifcquant — bounded IFC (STEP) parsing and heuristic quantity takeoff."""

__version__ = "1.0.0"

from ifcquant.api.facade import FileTooLargeError, IfcQuant
from ifcquant.config import ReaderSettings
from ifcquant.export.csv_export import entities_to_csv, structural_params_to_csv
from ifcquant.export.report import QuantityReport
from ifcquant.extraction.pipeline import build_model, load_model, parse_content
from ifcquant.models.element import Element, EntityRecord
from ifcquant.models.model import BuildingModel, Level, PivotRow, Quantity
from ifcquant.parsing.reader import (
    IfcQuantError,
    IncrementalReader,
    NoEntitiesFoundError,
    SourceReadError,
)
from ifcquant.quantities.aggregator import build_hierarchy, build_pivot
from ifcquant.visualization.scene import Scene

__all__ = [
    "__version__",
    # Facade
    "IfcQuant",
    # Errors
    "FileTooLargeError",
    "IfcQuantError",
    "NoEntitiesFoundError",
    "SourceReadError",
    # Models
    "BuildingModel",
    "Element",
    "EntityRecord",
    "Level",
    "PivotRow",
    "Quantity",
    # Pipeline
    "IncrementalReader",
    "ReaderSettings",
    "build_model",
    "load_model",
    "parse_content",
    # Views and exports
    "QuantityReport",
    "Scene",
    "build_hierarchy",
    "build_pivot",
    "entities_to_csv",
    "structural_params_to_csv",
]
