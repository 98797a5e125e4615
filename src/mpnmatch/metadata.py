"""Per-type comparison metadata and similarity profiles.

A TypeMetadata lists the attributes that matter when comparing two parts of a
component type, how important each is, and which tolerance rule compares them.
SimilarityProfiles scale the importance weights for a use case (design review,
obsolescence replacement, emergency sourcing, ...) and set the acceptance bar.
"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

from .component_types import ComponentType
from .exceptions import InvalidMetadata, RegistryFrozenError
from .packages import normalize_package
from .parsers import ATTRIBUTE_PARSERS, parse_range, parse_value, to_number
from .tolerance import (
    ExactMatch,
    MaximumAllowed,
    MinimumRequired,
    PercentageTolerance,
    RangeOverlap,
    ToleranceRule,
)

logger = logging.getLogger(__name__)


# =============================================================================
# IMPORTANCE
# =============================================================================


class Importance(Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    OPTIONAL = "optional"

    @property
    def base_weight(self) -> float:
        return _BASE_WEIGHTS[self]

    @property
    def mandatory(self) -> bool:
        """Missing data on a mandatory attribute cannot be skipped silently."""
        return self is Importance.CRITICAL


_BASE_WEIGHTS: dict[Importance, float] = {
    Importance.CRITICAL: 1.0,
    Importance.HIGH: 0.7,
    Importance.MEDIUM: 0.4,
    Importance.LOW: 0.2,
    Importance.OPTIONAL: 0.0,
}


# =============================================================================
# SIMILARITY PROFILES
# =============================================================================


@dataclass(frozen=True, eq=False)
class SimilarityProfile:
    """Named strictness setting: per-importance multipliers and acceptance threshold."""

    name: str
    description: str
    minimum_score: float
    multipliers: Mapping[Importance, float]

    def __post_init__(self):
        if not 0.0 <= self.minimum_score <= 1.0:
            raise ValueError(f"minimum_score must be within [0, 1], got {self.minimum_score}")
        missing = [i.name for i in Importance if i not in self.multipliers]
        if missing:
            raise ValueError(f"Profile {self.name} has no multiplier for {', '.join(missing)}")
        object.__setattr__(self, "multipliers", MappingProxyType(dict(self.multipliers)))

    def multiplier(self, importance: Importance) -> float:
        return self.multipliers[importance]

    def effective_weight(self, importance: Importance) -> float:
        return importance.base_weight * self.multipliers[importance]

    def meets_threshold(self, score: float) -> bool:
        return score >= self.minimum_score

    def __repr__(self) -> str:
        return f"SimilarityProfile({self.name}, minimum_score={self.minimum_score})"


def _profile(name: str, description: str, minimum_score: float, *weights: float) -> SimilarityProfile:
    return SimilarityProfile(name, description, minimum_score, dict(zip(Importance, weights)))


#                                                                 CRIT  HIGH  MED   LOW  OPT
DESIGN_PHASE = _profile(
    "DESIGN_PHASE", "Strict matching during the design phase", 0.85, 1.0, 0.9, 0.7, 0.4, 0.0)
REPLACEMENT = _profile(
    "REPLACEMENT", "Direct replacement for an existing design", 0.75, 1.0, 0.7, 0.4, 0.2, 0.0)
PERFORMANCE_UPGRADE = _profile(
    "PERFORMANCE_UPGRADE", "Upgrade to a better performing part", 0.70, 1.0, 0.8, 0.5, 0.2, 0.0)
COST_OPTIMIZATION = _profile(
    "COST_OPTIMIZATION", "Cheaper part with acceptable specifications", 0.60, 1.0, 0.4, 0.2, 0.0, 0.0)
EMERGENCY_SOURCING = _profile(
    "EMERGENCY_SOURCING", "Any workable part during a shortage", 0.50, 0.8, 0.4, 0.2, 0.0, 0.0)

# Strictest first
PROFILES: tuple[SimilarityProfile, ...] = (
    DESIGN_PHASE,
    REPLACEMENT,
    PERFORMANCE_UPGRADE,
    COST_OPTIMIZATION,
    EMERGENCY_SOURCING,
)
_PROFILES_BY_NAME = {p.name: p for p in PROFILES}


def get_profile(profile: "SimilarityProfile | str") -> SimilarityProfile:
    """Resolve a profile object or a case-insensitive profile name.

    An unknown name is a caller error and raises ValueError.
    """
    if isinstance(profile, SimilarityProfile):
        return profile
    key = profile.strip().upper().replace("-", "_").replace(" ", "_")
    if key not in _PROFILES_BY_NAME:
        raise ValueError(f"Unknown similarity profile: {profile!r}")
    return _PROFILES_BY_NAME[key]


# =============================================================================
# ATTRIBUTE SPECS AND TYPE METADATA
# =============================================================================


@dataclass(frozen=True)
class AttributeSpec:
    """One compared attribute: name, importance and tolerance rule."""

    name: str
    importance: Importance
    rule: ToleranceRule
    parser: Callable[[str], Any] | None = None

    def coerce(self, value: Any) -> Any:
        """Turn a raw attribute value into what the rule compares.

        Numeric rules get floats where the text parses; range rules get
        (low, high) tuples; anything unparseable is passed through as-is and
        compared as text.
        """
        if value is None:
            return None
        if isinstance(value, str) and not value.strip():
            return None
        if isinstance(self.rule, RangeOverlap):
            if isinstance(value, (tuple, list)) and len(value) == 2:
                bounds = tuple(to_number(v, self.name) for v in value)
                return bounds if None not in bounds else value
            if isinstance(value, str):
                parser = self.parser or ATTRIBUTE_PARSERS.get(self.name, parse_value)
                parsed = parse_range(value, parser)
                return parsed if parsed is not None else value
            number = to_number(value, self.name)
            return number if number is not None else value
        if not self.rule.numeric:
            return value
        if self.parser is not None and isinstance(value, str):
            parsed = self.parser(value)
            return float(parsed) if parsed is not None else value
        number = to_number(value, self.name)
        return number if number is not None else value


@dataclass(frozen=True)
class TypeMetadata:
    """Attributes compared for one component type, plus its default profile."""

    component_type: ComponentType
    specs: tuple[AttributeSpec, ...]
    default_profile: SimilarityProfile = REPLACEMENT
    _by_name: Mapping[str, AttributeSpec] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        specs = tuple(self.specs)
        if not specs:
            raise InvalidMetadata(f"Metadata for {self.component_type.value} has no attribute specs")
        by_name: dict[str, AttributeSpec] = {}
        for spec in specs:
            if spec.name in by_name:
                raise InvalidMetadata(f"Duplicate attribute {spec.name!r} in metadata for {self.component_type.value}")
            by_name[spec.name] = spec
        object.__setattr__(self, "specs", specs)
        object.__setattr__(self, "_by_name", MappingProxyType(by_name))

    def spec(self, name: str) -> AttributeSpec | None:
        return self._by_name.get(name)

    @property
    def attribute_names(self) -> tuple[str, ...]:
        return tuple(s.name for s in self.specs)

    @property
    def critical_specs(self) -> tuple[AttributeSpec, ...]:
        return tuple(s for s in self.specs if s.importance is Importance.CRITICAL)

    @property
    def non_critical_specs(self) -> tuple[AttributeSpec, ...]:
        return tuple(s for s in self.specs if s.importance is not Importance.CRITICAL)


class TypeMetadataRegistry:
    """TypeMetadata by component type, with parent-chain fallback on lookup.

    Build phase: register() (replaces any existing entry wholesale).
    Read phase: after freeze(), lookups are lock-free and writes raise.
    """

    def __init__(self, metadata: Iterable[TypeMetadata] = ()):
        self._entries: dict[ComponentType, TypeMetadata] = {}
        self._frozen = False
        self._lock = threading.Lock()
        for entry in metadata:
            self.register(entry)

    def register(self, metadata: TypeMetadata) -> None:
        with self._lock:
            if self._frozen:
                raise RegistryFrozenError(f"Cannot register metadata for {metadata.component_type.value}: registry is frozen")
            if metadata.component_type in self._entries:
                logger.debug(f"Replacing metadata for {metadata.component_type.value}")
            self._entries[metadata.component_type] = metadata

    def freeze(self) -> "TypeMetadataRegistry":
        with self._lock:
            if not self._frozen:
                self._entries = MappingProxyType(dict(self._entries))
                self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, component_type: ComponentType) -> TypeMetadata | None:
        """Metadata for `component_type`, else for the nearest registered ancestor.

        Walks up one parent level at a time; None only if the whole chain up to
        the base type is unregistered.
        """
        for candidate in component_type.ancestors():
            entry = self._entries.get(candidate)
            if entry is not None:
                if candidate is not component_type:
                    logger.debug(f"Metadata for {component_type.value} taken from {candidate.value}")
                return entry
        return None

    def get_exact(self, component_type: ComponentType) -> TypeMetadata | None:
        return self._entries.get(component_type)

    def registered_types(self) -> tuple[ComponentType, ...]:
        return tuple(t for t in ComponentType if t in self._entries)

    def __contains__(self, component_type: ComponentType) -> bool:
        return component_type in self._entries

    def __len__(self) -> int:
        return len(self._entries)


# =============================================================================
# DEFAULT METADATA
# =============================================================================

_C, _H, _M, _L = Importance.CRITICAL, Importance.HIGH, Importance.MEDIUM, Importance.LOW

_PACKAGE_MATCH = ExactMatch(normalize_package)

DEFAULT_SPECS: dict[ComponentType, list[tuple[str, Importance, ToleranceRule]]] = {
    ComponentType.RESISTOR: [
        ("resistance", _C, PercentageTolerance(1.0)),
        ("tolerance", _C, ExactMatch()),
        ("package", _H, _PACKAGE_MATCH),
        ("power_rating", _M, MinimumRequired()),
        ("temperature_coefficient", _L, PercentageTolerance(20.0)),
        ("composition", _L, ExactMatch()),
    ],
    ComponentType.CAPACITOR: [
        ("capacitance", _C, PercentageTolerance(5.0)),
        ("voltage", _C, MinimumRequired()),
        ("dielectric", _C, ExactMatch()),
        ("package", _H, _PACKAGE_MATCH),
        ("tolerance", _M, ExactMatch()),
        ("temperature_characteristic", _M, ExactMatch()),
        ("esr", _L, MaximumAllowed(1.5)),
    ],
    ComponentType.INDUCTOR: [
        ("inductance", _C, PercentageTolerance(5.0)),
        ("current_rating", _C, MinimumRequired()),
        ("package", _H, _PACKAGE_MATCH),
        ("saturation_current", _H, MinimumRequired()),
        ("dc_resistance", _M, MaximumAllowed(1.2)),
        ("tolerance", _L, ExactMatch()),
    ],
    ComponentType.MOSFET: [
        ("voltage_rating", _C, MinimumRequired()),
        ("current_rating", _C, MinimumRequired()),
        ("channel", _C, ExactMatch()),
        ("rds_on", _H, MaximumAllowed(1.2)),
        ("package", _M, _PACKAGE_MATCH),
        ("gate_charge", _L, PercentageTolerance(30.0)),
        ("threshold", _L, RangeOverlap(0.8, 1.2)),
    ],
    ComponentType.TRANSISTOR: [
        ("polarity", _C, ExactMatch()),
        ("voltage_rating", _C, MinimumRequired()),
        ("current_rating", _C, MinimumRequired()),
        ("package", _H, _PACKAGE_MATCH),
        ("hfe", _M, RangeOverlap(0.7, 1.5)),
        ("power_rating", _M, MinimumRequired()),
    ],
    ComponentType.DIODE: [
        ("type", _C, ExactMatch()),
        ("voltage_rating", _C, MinimumRequired()),
        ("current_rating", _C, MinimumRequired()),
        ("package", _H, _PACKAGE_MATCH),
        ("forward_voltage", _M, MaximumAllowed(1.2)),
        ("reverse_recovery", _L, MaximumAllowed(1.5)),
    ],
    ComponentType.OPAMP: [
        ("configuration", _C, ExactMatch()),
        ("input_type", _H, ExactMatch()),
        ("package", _H, _PACKAGE_MATCH),
        ("gbw", _M, MinimumRequired()),
        ("slew_rate", _M, MinimumRequired()),
        ("input_offset", _L, MaximumAllowed(1.5)),
    ],
    ComponentType.VOLTAGE_REGULATOR: [
        ("output_voltage", _C, PercentageTolerance(2.0)),
        ("output_type", _C, ExactMatch()),
        ("output_current", _H, MinimumRequired()),
        ("package", _H, _PACKAGE_MATCH),
        ("dropout_voltage", _M, MaximumAllowed(1.2)),
        ("quiescent_current", _L, MaximumAllowed(1.5)),
    ],
    ComponentType.MICROCONTROLLER: [
        ("family", _C, ExactMatch()),
        ("series", _H, ExactMatch()),
        ("flash_size", _H, MinimumRequired()),
        ("ram_size", _H, MinimumRequired()),
        ("io_count", _M, MinimumRequired()),
        ("package", _M, _PACKAGE_MATCH),
        ("frequency", _L, MinimumRequired()),
    ],
    ComponentType.MEMORY: [
        ("type", _C, ExactMatch()),
        ("capacity", _C, MinimumRequired()),
        ("interface", _C, ExactMatch()),
        ("voltage", _H, ExactMatch()),
        ("package", _M, _PACKAGE_MATCH),
        ("speed", _L, MinimumRequired()),
    ],
    ComponentType.LED: [
        ("color", _C, ExactMatch()),
        ("package", _H, _PACKAGE_MATCH),
        ("brightness", _M, MinimumRequired()),
        ("forward_voltage", _M, RangeOverlap(0.9, 1.1)),
        ("viewing_angle", _L, MinimumRequired()),
        ("wavelength", _L, PercentageTolerance(5.0)),
    ],
    ComponentType.CONNECTOR: [
        ("pin_count", _C, ExactMatch()),
        ("pitch", _C, ExactMatch()),
        ("gender", _C, ExactMatch()),
        ("mounting_type", _H, ExactMatch()),
        ("current_rating", _M, MinimumRequired()),
        ("voltage_rating", _M, MinimumRequired()),
    ],
}

# Types compared in a stricter setting by default
_DEFAULT_PROFILES: dict[ComponentType, SimilarityProfile] = {
    ComponentType.MICROCONTROLLER: DESIGN_PHASE,
}


def build_metadata(
    component_type: ComponentType,
    specs: Iterable[tuple[str, Importance, ToleranceRule]],
    default_profile: SimilarityProfile = REPLACEMENT,
) -> TypeMetadata:
    """TypeMetadata from (name, importance, rule) rows."""
    return TypeMetadata(
        component_type,
        tuple(AttributeSpec(name, importance, rule) for name, importance, rule in specs),
        default_profile,
    )


def default_metadata() -> list[TypeMetadata]:
    return [
        build_metadata(component_type, rows, _DEFAULT_PROFILES.get(component_type, REPLACEMENT))
        for component_type, rows in DEFAULT_SPECS.items()
    ]


def default_metadata_registry(extra: Iterable[TypeMetadata] = ()) -> TypeMetadataRegistry:
    """Registry preloaded with the default metadata, plus `extra` entries. Not frozen."""
    registry = TypeMetadataRegistry(default_metadata())
    for entry in extra:
        registry.register(entry)
    return registry
