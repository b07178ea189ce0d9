"""Entity classification, level heuristics, and model building."""

from ifcquant.extraction.classifier import classify, synthesize_properties
from ifcquant.extraction.pipeline import build_model, load_model, parse_content

try:
    from ifcquant.extraction.net_volumes import compute_net_volumes
except ImportError:
    # ifcopenshell not installed; calls raise a helpful error
    def compute_net_volumes(*args, **kwargs):  # type: ignore[misc]
        raise ImportError(
            "ifcopenshell is required for net volume lookup. "
            "Install it with: pip install ifcquant[ifc]"
        )

__all__ = [
    "build_model",
    "classify",
    "compute_net_volumes",
    "load_model",
    "parse_content",
    "synthesize_properties",
]
