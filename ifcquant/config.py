"""Global configuration: read limits, rule defaults, settings."""

from __future__ import annotations

import logging
import os

from pydantic import BaseModel

logger = logging.getLogger(__name__)

# Bounded-read window: start at one chunk, grow one chunk at a time up to the cap
CHUNK_SIZE = 200 * 1024
MAX_READ_BYTES = 1024 * 1024

# Stop growing the read window once this many elements were parsed
MIN_ELEMENTS = 10

# Upload guard applied before a file ever reaches the parser
MAX_UPLOAD_BYTES = 100 * 1024 * 1024

# Bucket key used when an element attribute is unset
UNKNOWN_KEY = "Unknown"

# Fixed demo levels: (id, name, elevation in mm)
DEFAULT_LEVELS: tuple[tuple[str, str, float], ...] = (
    ("L1", "Ground Floor", 0.0),
    ("L2", "First Floor", 3000.0),
    ("L3", "Second Floor", 6000.0),
)

# Entity types exported by the structural-parameters CSV
STRUCTURAL_TYPES = frozenset({
    "IFCWALL",
    "IFCCOLUMN",
    "IFCBEAM",
    "IFCSLAB",
    "IFCMEMBER",
    "IFCBRACE",
    "IFCTRUSS",
    "IFCFOOTING",
    "IFCPILE",
    "IFCPLATE",
})

# Environment variable names for reader overrides
_ENV_CHUNK_SIZE = "IFCQUANT_CHUNK_SIZE"
_ENV_MAX_BYTES = "IFCQUANT_MAX_BYTES"
_ENV_MIN_ELEMENTS = "IFCQUANT_MIN_ELEMENTS"


class ReaderSettings(BaseModel):
    """Knobs for the incremental reader."""

    chunk_size: int = CHUNK_SIZE
    max_bytes: int = MAX_READ_BYTES
    min_elements: int = MIN_ELEMENTS

    @classmethod
    def from_env(cls) -> ReaderSettings:
        """Build settings from defaults overlaid with ``IFCQUANT_*`` env vars.

        Unparsable values are ignored with a warning.
        """
        overrides: dict[str, int] = {}
        for field_name, env_key in (
            ("chunk_size", _ENV_CHUNK_SIZE),
            ("max_bytes", _ENV_MAX_BYTES),
            ("min_elements", _ENV_MIN_ELEMENTS),
        ):
            raw = os.environ.get(env_key)
            if raw is None or not raw.strip():
                continue
            try:
                overrides[field_name] = int(raw)
            except ValueError:
                logger.warning("Ignoring non-integer %s=%r", env_key, raw)
        return cls(**overrides)
