"""QuantityReport model and Markdown generation for QUANTITIES.md."""

from __future__ import annotations

import json
from typing import Any

from ifcquant.models.model import BuildingModel, Quantity


def _display_type(key: str) -> str:
    return key[3:] if key.startswith("IFC") else key


class QuantityReport:
    """Quantity takeoff summary for one parsed model."""

    def __init__(
        self,
        source: str = "",
        element_count: int = 0,
        bytes_read: int = 0,
        truncated: bool = False,
        by_type: dict[str, Quantity] | None = None,
        by_level: dict[str, Quantity] | None = None,
    ) -> None:
        self.source = source
        self.element_count = element_count
        self.bytes_read = bytes_read
        self.truncated = truncated
        self.by_type = by_type or {}
        self.by_level = by_level or {}

    @classmethod
    def from_model(cls, model: BuildingModel, source: str = "") -> QuantityReport:
        return cls(
            source=source,
            element_count=len(model.elements),
            bytes_read=model.bytes_read,
            truncated=model.truncated,
            by_type=model.quantities.by_type,
            by_level=model.quantities.by_level,
        )

    def to_markdown(self) -> str:
        """Generate QUANTITIES.md content."""
        lines: list[str] = []

        lines.append(f"# Quantity Report — {self.source or 'Unknown'}")
        lines.append("")
        lines.append(f"**Elements:** {self.element_count}")
        scope = "partial (bounded read)" if self.truncated else "complete"
        lines.append(f"**Bytes read:** {self.bytes_read:,} ({scope})")
        lines.append("")

        lines.extend(self._table("By Type", self.by_type, display=_display_type))
        lines.extend(self._table("By Level", self.by_level))

        lines.append("_Areas and volumes are heuristic approximations._")
        lines.append("")
        return "\n".join(lines)

    @staticmethod
    def _table(title: str, buckets: dict[str, Quantity], display=None) -> list[str]:
        if not buckets:
            return []
        lines = [
            f"## {title}",
            "",
            "| Key | Count | Area (m²) | Volume (m³) |",
            "|-----|-------|-----------|-------------|",
        ]
        for key, q in buckets.items():
            label = display(key) if display else key
            lines.append(f"| {label} | {q.count} | {q.total_area:.1f} | {q.total_volume:.1f} |")
        lines.append("")
        return lines

    def to_json(self) -> str:
        """Return structured JSON for downstream tools."""
        return json.dumps(self.to_dict(), indent=2, default=str)

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "element_count": self.element_count,
            "bytes_read": self.bytes_read,
            "truncated": self.truncated,
            "by_type": {k: q.summary() for k, q in self.by_type.items()},
            "by_level": {k: q.summary() for k, q in self.by_level.items()},
        }
