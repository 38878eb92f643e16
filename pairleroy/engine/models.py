from __future__ import annotations

import math
import re
from urllib.parse import parse_qs, urlencode

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from pairleroy.config import settings
from pairleroy.engine.errors import ConfigurationError

PALETTE_SIZE = 4
TYPE_COUNT = 3

DEFAULT_TYPES_PCT: list[float] = [40, 40, 20]
DEFAULT_COLOR_PCT: list[float] = [25, 25, 25, 25]
DEFAULT_COLOR_HEX: list[str] = ["#e57373", "#64b5f6", "#81c784", "#ffd54f"]

_HEX_COLOR_RE = re.compile(r"^#?[0-9a-fA-F]{6}$")


def sanitize_hex_color(value: object, fallback: str) -> str:
    """Normalize ``value`` to ``#rrggbb`` or return ``fallback``."""
    text = str(value if value is not None else "").strip()
    if not _HEX_COLOR_RE.match(text):
        return fallback
    if not text.startswith("#"):
        text = f"#{text}"
    return text.lower()


def _format_number(value: float) -> str:
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


# --- Board configuration ---
class BoardConfig(BaseModel):
    """User-facing knobs for one board: percentages, palette, size, seed."""

    types_pct: list[float] = Field(default_factory=lambda: list(DEFAULT_TYPES_PCT))
    color_pct: list[float] = Field(default_factory=lambda: list(DEFAULT_COLOR_PCT))
    colors: list[str] = Field(default_factory=lambda: list(DEFAULT_COLOR_HEX))
    radius: int = Field(default_factory=lambda: settings.radius, ge=0)
    seed: int | None = None

    @field_validator("types_pct")
    @classmethod
    def _check_types_pct(cls, value: list[float]) -> list[float]:
        if len(value) != TYPE_COUNT:
            raise ValueError(f"types_pct needs {TYPE_COUNT} entries (mono, bi, tri), got {len(value)}")
        if any(v < 0 for v in value):
            raise ValueError("types_pct entries must be non-negative")
        return value

    @field_validator("color_pct")
    @classmethod
    def _check_color_pct(cls, value: list[float]) -> list[float]:
        if len(value) != PALETTE_SIZE:
            raise ValueError(f"color_pct needs {PALETTE_SIZE} entries, got {len(value)}")
        if any(v < 0 for v in value):
            raise ValueError("color_pct entries must be non-negative")
        return value

    @field_validator("colors", mode="before")
    @classmethod
    def _sanitize_colors(cls, value: object) -> list[str]:
        items = list(value) if isinstance(value, (list, tuple)) else []
        if len(items) != PALETTE_SIZE:
            raise ValueError(f"colors needs {PALETTE_SIZE} entries, got {len(items)}")
        return [sanitize_hex_color(v, DEFAULT_COLOR_HEX[i]) for i, v in enumerate(items)]

    @field_validator("seed")
    @classmethod
    def _check_seed(cls, value: int | None) -> int | None:
        if value is not None and value & 0xFFFFFFFF == 0:
            raise ValueError("seed must be nonzero modulo 2**32")
        return value

    @model_validator(mode="after")
    def _check_totals(self) -> BoardConfig:
        for label, values in (("Tile types", self.types_pct), ("Color split", self.color_pct)):
            total = sum(values)
            # Half-up, so 100.5 reads as 101
            if math.floor(total + 0.5) != 100:
                raise ValueError(f"{label} must total 100 (currently {_format_number(total)})")
        return self

    @classmethod
    def load(cls, **options) -> BoardConfig:
        """Build a config, surfacing validation failures as ``ConfigurationError``."""
        try:
            return cls(**options)
        except ValidationError as e:
            messages = [err["msg"] for err in e.errors()]
            raise ConfigurationError(
                f"Invalid board configuration: {'; '.join(messages)}", errors=messages
            ) from e

    # --- Query-string state ---

    def to_query(self) -> str:
        """Encode percentages and palette as ``pct=...&col=...``."""
        pct = ",".join(_format_number(v) for v in [*self.types_pct, *self.color_pct])
        return urlencode({"pct": pct, "col": ",".join(self.colors)}, safe=",")

    @classmethod
    def from_query(cls, query: str, **overrides) -> BoardConfig:
        """Decode a ``to_query`` string.

        Malformed ``pct`` (not 7 numbers) or ``col`` (not 4 entries) parameters
        are ignored and the defaults kept, matching how shared links degrade.
        """
        params = parse_qs(query.lstrip("?"))
        options: dict = {}

        pct_values = params.get("pct")
        if pct_values:
            try:
                numbers = [float(x) for x in pct_values[0].split(",")]
            except ValueError:
                numbers = []
            if len(numbers) == TYPE_COUNT + PALETTE_SIZE:
                options["types_pct"] = numbers[:TYPE_COUNT]
                options["color_pct"] = numbers[TYPE_COUNT:]

        col_values = params.get("col")
        if col_values:
            cols = col_values[0].split(",")
            if len(cols) == PALETTE_SIZE:
                options["colors"] = cols

        options.update(overrides)
        return cls.load(**options)
