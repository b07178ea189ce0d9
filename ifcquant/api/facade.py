"""IfcQuant — the single entry point for loading, querying, and exporting.

Usage::

    from ifcquant import IfcQuant

    iq = IfcQuant()
    model = iq.load("building.ifc")
    iq.pivot("type", "material")
    iq.hierarchy()
    iq.export_csv("building.csv", mode="structural")
    iq.report().to_markdown()
    iq.scene().to_json()
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import random
from pathlib import Path

from ifcquant.config import MAX_UPLOAD_BYTES, ReaderSettings
from ifcquant.export.csv_export import entities_to_csv, structural_params_to_csv, write_csv
from ifcquant.export.report import QuantityReport
from ifcquant.extraction.pipeline import load_model
from ifcquant.models.element import Element
from ifcquant.models.model import BuildingModel, PivotRow
from ifcquant.parsing.reader import IfcQuantError, Source, SourceReadError
from ifcquant.quantities.aggregator import build_hierarchy, build_pivot
from ifcquant.visualization.scene import Scene, build_scene

logger = logging.getLogger(__name__)

CSV_MODES = ("entities", "structural")


class FileTooLargeError(IfcQuantError):
    """Raised when a source exceeds the upload size limit."""


class IfcQuant:
    """Load one IFC file at a time and serve views of it.

    Parameters
    ----------
    settings:
        Reader settings.  Defaults to :meth:`ReaderSettings.from_env`.
    level_strategy:
        ``"modulo"`` or ``"random"``; see :mod:`ifcquant.extraction.levels`.
    rng:
        Random source for placeholder quantities, random leveling, and scene
        scatter.  Without one all of these are deterministic.
    net_volumes:
        Look up measured volumes with ifcopenshell (file paths only).
    max_upload_bytes:
        Sources larger than this are rejected before parsing.
    """

    def __init__(
        self,
        *,
        settings: ReaderSettings | None = None,
        level_strategy: str = "modulo",
        rng: random.Random | None = None,
        net_volumes: bool = False,
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
    ) -> None:
        self.settings = settings or ReaderSettings.from_env()
        self.level_strategy = level_strategy
        self.rng = rng
        self.net_volumes = net_volumes
        self.max_upload_bytes = max_upload_bytes
        self.model: BuildingModel | None = None
        self.source_name = ""

    # -- Loading --------------------------------------------------------------

    async def load_async(self, source: Source) -> BuildingModel:
        """Parse *source* and replace the current model.

        On failure the previous model is discarded, leaving no model loaded.
        """
        self.model = None
        self.source_name = ""
        self._check_size(source)

        overrides = None
        if self.net_volumes and not isinstance(source, bytes):
            from ifcquant.extraction import compute_net_volumes

            overrides = await asyncio.to_thread(compute_net_volumes, source)

        model = await load_model(
            source,
            settings=self.settings,
            level_strategy=self.level_strategy,
            rng=self.rng,
            volume_overrides=overrides,
        )
        self.model = model
        self.source_name = "<bytes>" if isinstance(source, bytes) else Path(source).name
        return model

    def load(self, source: Source) -> BuildingModel:
        """Blocking wrapper around :meth:`load_async`.

        Inside a running event loop (notebooks, async handlers) the load runs
        on a worker thread with its own loop; async callers should prefer
        awaiting :meth:`load_async` directly.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.load_async(source))
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, self.load_async(source)).result()

    def _check_size(self, source: Source) -> None:
        if isinstance(source, bytes):
            size = len(source)
        else:
            try:
                size = Path(source).stat().st_size
            except OSError as exc:
                raise SourceReadError(f"Cannot read {source}: {exc}") from exc
        if size > self.max_upload_bytes:
            raise FileTooLargeError(
                f"Source is {size:,} bytes; the limit is {self.max_upload_bytes:,}"
            )

    def _require_model(self) -> BuildingModel:
        if self.model is None:
            raise IfcQuantError("No model loaded — call load() first")
        return self.model

    # -- Views ----------------------------------------------------------------

    @property
    def elements(self) -> list[Element]:
        return self._require_model().elements

    def pivot(self, row_field: str = "type", col_field: str = "level") -> dict[str, PivotRow]:
        return build_pivot(self.elements, row_field, col_field)

    def hierarchy(self) -> dict[str, dict[str, list[Element]]]:
        return build_hierarchy(self.elements)

    def report(self) -> QuantityReport:
        return QuantityReport.from_model(self._require_model(), source=self.source_name)

    def scene(self) -> Scene:
        return build_scene(self._require_model(), rng=self.rng)

    # -- Export ---------------------------------------------------------------

    def to_csv(self, mode: str = "entities") -> str:
        """Render the loaded elements as CSV text (no byte-order mark)."""
        if mode == "entities":
            return entities_to_csv(self.elements)
        if mode == "structural":
            return structural_params_to_csv(self.elements)
        raise ValueError(f"Unknown CSV mode {mode!r}; expected one of {CSV_MODES}")

    def export_csv(self, path: str | Path, mode: str = "entities") -> Path:
        """Write the CSV for *mode* to *path*, BOM-prefixed."""
        return write_csv(path, self.to_csv(mode))
