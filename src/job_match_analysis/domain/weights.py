"""Weighting configuration for job-match scoring.

A ``WeightSet`` governs how the category sub-scores combine into an overall
match score. Weight inputs arrive from three sources (built-in defaults, the
user's saved preference and a per-request override) and are normalised and
merged here before they reach the scoring oracle or the cache decision.

Usage example:
    from job_match_analysis.domain.weights import WeightModel, WeightSet

    model = WeightModel(defaults=WeightSet())
    preference = model.sanitize({"skills": 2})
    weights = model.resolve(preference, {"education": "0.5"})
    assert weights.skills == 2.0
    assert weights.education == 0.5
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

MIN_WEIGHT = 0.1
MAX_WEIGHT = 3.0
DEFAULT_WEIGHT = 1.0

WEIGHT_FIELDS: tuple[str, ...] = ("skills", "experience", "education", "requirements")

# Equality tolerance: numbers are compared after rounding to this many places.
_EQUALITY_PLACES = 4


def round_half_up(value: float, places: int = 0) -> float:
    """Round halves away from zero for positive input (2.5 -> 3, 0.125 -> 0.13)."""
    factor = 10**places
    return math.floor(value * factor + 0.5) / factor


def _as_number(value: object) -> float | None:
    """Return a finite float for numeric input, otherwise None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def clamp_weight(value: object) -> float | None:
    """Clamp a raw weight into the supported range.

    Returns None for missing, non-numeric, non-finite or non-positive input.
    Never raises.
    """
    number = _as_number(value)
    if number is None or number <= 0:
        return None
    bounded = min(MAX_WEIGHT, max(MIN_WEIGHT, number))
    return round_half_up(bounded, 2)


def sanitize_custom_criteria(value: object) -> MappingProxyType[str, float] | None:
    """Trim criterion names and drop entries without a usable weight."""
    if not isinstance(value, Mapping):
        return None
    cleaned: dict[str, float] = {}
    for raw_key, raw_weight in value.items():
        if not isinstance(raw_key, str):
            continue
        key = raw_key.strip()
        if not key:
            continue
        weight = clamp_weight(raw_weight)
        if weight is None:
            continue
        cleaned[key] = weight
    if not cleaned:
        return None
    return MappingProxyType(cleaned)


def _custom_criteria_input(partial: Mapping[str, object]) -> object:
    if "customCriteria" in partial:
        return partial["customCriteria"]
    return partial.get("custom_criteria")


@dataclass(frozen=True, eq=False)
class WeightSet:
    """Immutable weighting configuration.

    Equality is structural and tolerant: numbers are compared after rounding
    to four decimal places and custom criteria ignore key order.
    """

    skills: float = DEFAULT_WEIGHT
    experience: float = DEFAULT_WEIGHT
    education: float = DEFAULT_WEIGHT
    requirements: float = DEFAULT_WEIGHT
    custom_criteria: MappingProxyType[str, float] | None = field(default=None)

    def __post_init__(self) -> None:
        if self.custom_criteria is not None:
            if not self.custom_criteria:
                object.__setattr__(self, "custom_criteria", None)
            elif not isinstance(self.custom_criteria, MappingProxyType):
                object.__setattr__(
                    self, "custom_criteria", MappingProxyType(dict(self.custom_criteria))
                )

    def field_values(self) -> dict[str, float]:
        """Return the four named weights keyed by field name."""
        return {name: getattr(self, name) for name in WEIGHT_FIELDS}

    def to_payload(self) -> dict[str, object]:
        """Render as a JSON-ready mapping (camelCase keys)."""
        payload: dict[str, object] = dict(self.field_values())
        if self.custom_criteria:
            payload["customCriteria"] = dict(self.custom_criteria)
        return payload

    def _canonical(self) -> tuple[tuple[float, ...], tuple[tuple[str, float], ...]]:
        named = tuple(round(getattr(self, name), _EQUALITY_PLACES) for name in WEIGHT_FIELDS)
        custom = tuple(
            (key, round(value, _EQUALITY_PLACES))
            for key, value in sorted((self.custom_criteria or {}).items())
        )
        return named, custom

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeightSet):
            return NotImplemented
        return weights_equal(self, other)

    def __hash__(self) -> int:
        return hash(self._canonical())


def weights_equal(a: WeightSet | None, b: WeightSet | None) -> bool:
    """Compare two weight sets, insensitive to key order and sub-4dp noise."""
    if a is None or b is None:
        return a is b
    return a._canonical() == b._canonical()


def sanitize_weight_input(partial: object, *, defaults: WeightSet) -> WeightSet | None:
    """Build a full ``WeightSet`` from a partial override.

    Fields the partial omits or invalidates fall back to ``defaults``. Returns
    None when the partial supplies nothing usable, so callers can fall through
    to the next weight source instead of silently applying defaults.
    """
    if isinstance(partial, WeightSet):
        return partial
    if not isinstance(partial, Mapping):
        return None

    resolved = defaults.field_values()
    supplied = False
    for name in WEIGHT_FIELDS:
        weight = clamp_weight(partial.get(name))
        if weight is not None:
            resolved[name] = weight
            supplied = True

    custom = sanitize_custom_criteria(_custom_criteria_input(partial))
    if custom is not None:
        supplied = True

    if not supplied:
        return None
    return WeightSet(**resolved, custom_criteria=custom)


def _source_values(
    source: WeightSet | Mapping[str, object],
) -> tuple[dict[str, float], dict[str, float]]:
    """Return the fields and custom criteria a source actually supplies."""
    if isinstance(source, WeightSet):
        return source.field_values(), dict(source.custom_criteria or {})

    named: dict[str, float] = {}
    for name in WEIGHT_FIELDS:
        number = _as_number(source.get(name))
        if number is not None:
            named[name] = number

    custom: dict[str, float] = {}
    raw_custom = _custom_criteria_input(source)
    if isinstance(raw_custom, Mapping):
        for raw_key, raw_weight in raw_custom.items():
            if not isinstance(raw_key, str) or not raw_key.strip():
                continue
            number = _as_number(raw_weight)
            if number is not None:
                custom[raw_key.strip()] = number
    return named, custom


def merge_weight_sets(
    base: WeightSet,
    preference: WeightSet | Mapping[str, object] | None = None,
    override: WeightSet | Mapping[str, object] | None = None,
    *,
    defaults: WeightSet | None = None,
) -> WeightSet:
    """Layer ``preference`` then ``override`` over ``base``.

    Present fields replace, absent fields pass through. Custom criteria are
    merged key by key with later sources winning. When every merged value is
    non-positive the result is ``defaults`` (``base`` when not given).
    """
    fallback = defaults or base
    named = base.field_values()
    custom = dict(base.custom_criteria or {})

    for source in (preference, override):
        if source is None:
            continue
        source_named, source_custom = _source_values(source)
        named.update(source_named)
        custom.update(source_custom)

    if all(value <= 0 for value in (*named.values(), *custom.values())):
        return fallback

    fallback_values = fallback.field_values()
    clamped: dict[str, float] = {}
    for name, value in named.items():
        weight = clamp_weight(value)
        clamped[name] = fallback_values[name] if weight is None else weight
    return WeightSet(**clamped, custom_criteria=sanitize_custom_criteria(custom))


def weight_percentages(weights: WeightSet) -> dict[str, float]:
    """Return each weight's share of the total, in percent to one decimal place."""
    values: dict[str, float] = dict(weights.field_values())
    for key, value in (weights.custom_criteria or {}).items():
        values[key] = value
    total = sum(values.values())
    if total <= 0:
        return {}
    return {key: round_half_up(value / total * 100, 1) for key, value in values.items()}


@dataclass(frozen=True)
class WeightModel:
    """Weight normalisation bound to an injected default configuration."""

    defaults: WeightSet = field(default_factory=WeightSet)

    def sanitize(
        self, partial: object, *, fallback: WeightSet | None = None
    ) -> WeightSet | None:
        return sanitize_weight_input(partial, defaults=fallback or self.defaults)

    def merge(
        self,
        preference: WeightSet | Mapping[str, object] | None = None,
        override: WeightSet | Mapping[str, object] | None = None,
    ) -> WeightSet:
        return merge_weight_sets(self.defaults, preference, override, defaults=self.defaults)

    def resolve(self, preference: WeightSet | None, override: object) -> WeightSet:
        """Resolve request weights: default, then saved preference, then override.

        An override with no usable field falls through to the preference.
        """
        base = self.merge(preference)
        requested = self.sanitize(override, fallback=base)
        return self.merge(preference, requested)
