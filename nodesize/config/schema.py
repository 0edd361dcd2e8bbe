"""Configuration schema for dynamic node sizing using Pydantic for validation.

The persisted record is a flat mapping with camelCase keys (the layout the
settings file has always used). Finite numeric values are clamped into sane
positive ranges rather than rejected, so the sizing core may assume every
number it reads is positive; NaN and infinities fail validation. Unknown
keys are kept as extra fields and survive a load/save round-trip.
"""

import logging
import math
from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nodesize.graph.schema import strip_hash

logger = logging.getLogger("nodesize.config.schema")

SIZE_MULTIPLIER_RANGE: Tuple[float, float] = (0.01, 100.0)
MULTIPLIER_SCALE_RANGE: Tuple[float, float] = (0.01, 100.0)
MAX_SIZE_RANGE: Tuple[float, float] = (1.0, 10000.0)
MAX_DEPTH_RANGE: Tuple[int, int] = (1, 100)

# Settings reset by "restore defaults"; exclusion lists are left alone.
NUMERIC_SETTINGS: Tuple[str, ...] = (
    "sizeMultiplier",
    "multiplierScale",
    "maxSize",
    "maxDepth",
)


def _clamp(name: str, value, bounds):
    low, high = bounds
    clamped = min(max(value, low), high)
    if clamped != value:
        logger.debug("Clamped %s from %r to %r", name, value, clamped)
    return clamped


def _as_list(value: Any, split_lines: bool = False) -> List[str]:
    """Coerce a list-ish setting into a list of trimmed, non-empty strings."""
    if value is None:
        return []
    if isinstance(value, str):
        items = value.splitlines() if split_lines else [value]
    else:
        items = list(value)
    return [str(item).strip() for item in items if str(item).strip()]


class SizingConfig(BaseModel):
    """Immutable snapshot of the node sizing settings.

    Attributes:
        size_multiplier: Factor applied to the reachable-node count.
        multiplier_scale: Additional fine-tuning factor.
        max_size: Upper bound for computed sizes (manual sizes ignore it).
        max_depth: Hop limit of the reachability traversal.
        exclude_folders: Path prefixes whose nodes are not sized.
        exclude_titles: Exact titles or ``/regex/`` patterns.
        exclude_tags: Tags (without ``#``) whose nodes are not sized.
        count_missing_links: Count unresolved link targets as one node each.
    """

    model_config = ConfigDict(
        extra="allow", frozen=True, populate_by_name=True, allow_inf_nan=False
    )

    size_multiplier: float = Field(default=2.0, alias="sizeMultiplier")
    multiplier_scale: float = Field(default=1.0, alias="multiplierScale")
    max_size: float = Field(default=50.0, alias="maxSize")
    max_depth: int = Field(default=3, alias="maxDepth")
    exclude_folders: List[str] = Field(default_factory=list, alias="excludeFolders")
    exclude_titles: List[str] = Field(default_factory=list, alias="excludeTitles")
    exclude_tags: List[str] = Field(default_factory=list, alias="excludeTags")
    count_missing_links: bool = Field(default=False, alias="countMissingLinks")

    @field_validator("size_multiplier")
    @classmethod
    def clamp_size_multiplier(cls, v: float) -> float:
        """Keep the multiplier within its supported range."""
        return _clamp("sizeMultiplier", v, SIZE_MULTIPLIER_RANGE)

    @field_validator("multiplier_scale")
    @classmethod
    def clamp_multiplier_scale(cls, v: float) -> float:
        """Keep the scale within its supported range."""
        return _clamp("multiplierScale", v, MULTIPLIER_SCALE_RANGE)

    @field_validator("max_size")
    @classmethod
    def clamp_max_size(cls, v: float) -> float:
        """Keep the size cap within its supported range."""
        return _clamp("maxSize", v, MAX_SIZE_RANGE)

    @field_validator("max_depth", mode="before")
    @classmethod
    def round_max_depth(cls, v: Any) -> Any:
        """Accept slider values such as ``3.0`` for the depth."""
        if isinstance(v, float) and math.isfinite(v):
            return int(round(v))
        return v

    @field_validator("max_depth")
    @classmethod
    def clamp_max_depth(cls, v: int) -> int:
        """Keep the depth within its supported range."""
        return _clamp("maxDepth", v, MAX_DEPTH_RANGE)

    @field_validator("exclude_folders", mode="before")
    @classmethod
    def normalize_folders(cls, v: Any) -> List[str]:
        """Trim folder prefixes and drop blank entries."""
        return _as_list(v)

    @field_validator("exclude_titles", mode="before")
    @classmethod
    def normalize_titles(cls, v: Any) -> List[str]:
        """Accept one title per line as well as a list."""
        return _as_list(v, split_lines=True)

    @field_validator("exclude_tags", mode="before")
    @classmethod
    def normalize_tags(cls, v: Any) -> List[str]:
        """Strip a leading ``#`` from every tag."""
        tags = [strip_hash(tag).strip() for tag in _as_list(v)]
        return [tag for tag in tags if tag]

    @classmethod
    def default(cls) -> "SizingConfig":
        """Return the built-in defaults."""
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SizingConfig":
        """Create configuration from a persisted mapping.

        Args:
            data: Flat mapping using camelCase (or snake_case) keys.

        Returns:
            SizingConfig instance.

        Raises:
            ValidationError: If a value cannot be coerced.
        """
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        """Return the persisted (camelCase) representation, extras included."""
        return self.model_dump(by_alias=True)

    def with_updates(self, **changes: Any) -> "SizingConfig":
        """Return a new snapshot with ``changes`` applied and re-validated.

        Keys may be given either as camelCase aliases or as attribute names.
        """
        data = self.to_dict()
        for key, value in changes.items():
            data[_alias_for(key)] = value
        return SizingConfig.from_dict(data)


def _alias_for(key: str) -> str:
    field = SizingConfig.model_fields.get(key)
    if field is not None and field.alias:
        return field.alias
    return key
