"""MPN classification: which manufacturer made a part and what kind of part it is.

Resolution is a two-stage algorithm:

1. Manufacturer shortcuts. An ordered list of literal prefixes that identify a
   manufacturer unambiguously (STM32 -> ST, ATMEGA -> Microchip). A hit ranks
   that manufacturer's matching types first with HIGH confidence. If the
   manufacturer has no rule for the part, resolution falls through.
2. Specificity-ranked scan. Every owner (sorted by owner id) and each of its
   types (enum declaration order) is asked whether the MPN is its part. A
   manufacturer-specific type scores SPECIFICITY_MANUFACTURER_BONUS, a generic
   type SPECIFICITY_GENERIC_PENALTY. Highest score wins; ties go to the earlier
   owner, then the deeper type, then the earlier declared type.

The outcome never depends on provider registration order or on call history.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from . import config
from .component_types import ComponentType
from .mpn import candidate_tokens, normalize_mpn, strip_package_suffix
from .patterns import PatternRegistry
from .providers.base import RuleProvider

logger = logging.getLogger(__name__)


# =============================================================================
# MANUFACTURER SHORTCUTS
# =============================================================================
# Checked in order before the pattern scan. Each prefix belongs to exactly one
# manufacturer; generic patterns of other owners must not override them.

MANUFACTURER_SHORTCUTS: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(prefix), owner_id)
    for prefix, owner_id in (
        (r"^(?:DSPIC|PIC)[0-9]", "microchip"),
        (r"^AT(?:MEGA|TINY)", "microchip"),
        (r"^STM32", "st"),
        (r"^STM8", "st"),
        (r"^MSP430", "ti"),
        (r"^ESP32", "espressif"),
        (r"^ESP8266", "espressif"),
        (r"^1N400[1-7]", "vishay"),
        (r"^1N4148", "vishay"),
        (r"^1N47[0-9]{2}", "onsemi"),
        (r"^CRCW", "vishay"),
        (r"^R[CTL][0-9]{4}", "yageo"),
        (r"^ERJ", "panasonic"),
        (r"^(?:GRM|LQG|LQW)", "murata"),
        (r"^LM[0-9]", "ti"),
        (r"^TL[0-9]", "ti"),
        (r"^TPS", "ti"),
        (r"^IR[FL]", "infineon"),
    )
)


# =============================================================================
# RESULT TYPES
# =============================================================================


class Confidence(Enum):
    HIGH = "high"        # Manufacturer shortcut
    MEDIUM = "medium"    # Manufacturer-specific type
    LOW = "low"          # Generic type

    @property
    def rank(self) -> int:
        return _CONFIDENCE_RANKS[self]


_CONFIDENCE_RANKS = {Confidence.HIGH: 0, Confidence.MEDIUM: 1, Confidence.LOW: 2}


@dataclass(frozen=True)
class Candidate:
    """One (owner, type) pair that matched an MPN."""

    owner_id: str
    component_type: ComponentType
    confidence: Confidence
    score: int


@dataclass(frozen=True)
class ResolvedPart:
    """A classified MPN with what its manufacturer's rules could read out of it."""

    mpn: str
    normalized_mpn: str
    component_type: ComponentType
    manufacturer: str
    manufacturer_name: str = ""
    package_code: str = ""
    series: str = ""
    attributes: Mapping[str, Any] = field(default_factory=dict, hash=False)
    confidence: Confidence = Confidence.MEDIUM

    def __post_init__(self):
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    @property
    def is_resolved(self) -> bool:
        return True

    @property
    def base_type(self) -> ComponentType:
        return self.component_type.base_type


@dataclass(frozen=True)
class Unknown:
    """No registered rule matched the MPN. An expected outcome, not an error."""

    mpn: str
    reason: str = "no matching rule"

    @property
    def is_resolved(self) -> bool:
        return False


@dataclass(frozen=True)
class MalformedInput:
    """The input was not a usable MPN (None, not a string, or blank)."""

    mpn: Any
    reason: str

    @property
    def is_resolved(self) -> bool:
        return False


ClassificationResult = ResolvedPart | Unknown | MalformedInput

_TYPE_ORDER: dict[ComponentType, int] = {t: i for i, t in enumerate(ComponentType)}


def specificity_score(component_type: ComponentType) -> int:
    if component_type.is_manufacturer_specific:
        return config.SPECIFICITY_MANUFACTURER_BONUS
    return config.SPECIFICITY_GENERIC_PENALTY


def check_input(mpn: Any) -> MalformedInput | None:
    """MalformedInput for None, non-string or blank input, else None."""
    if mpn is None:
        return MalformedInput(mpn, "MPN is None")
    if not isinstance(mpn, str):
        return MalformedInput(mpn, f"MPN must be a string, got {type(mpn).__name__}")
    if not mpn.strip():
        return MalformedInput(mpn, "MPN is empty")
    return None


def match_forms(mpn: str) -> list[str]:
    """Normalized forms tried in order: suffix-stripped first, then the full MPN."""
    forms = []
    for form in (normalize_mpn(strip_package_suffix(mpn)), normalize_mpn(mpn)):
        if form and form not in forms:
            forms.append(form)
    return forms


# =============================================================================
# RESOLVER
# =============================================================================


class Resolver:
    """Classifies MPNs against a frozen PatternRegistry and its rule providers."""

    def __init__(
        self,
        registry: PatternRegistry,
        providers: Iterable[RuleProvider],
        shortcuts: tuple[tuple[re.Pattern[str], str], ...] = MANUFACTURER_SHORTCUTS,
    ):
        self._registry = registry
        self._providers: dict[str, RuleProvider] = {p.owner_id: p for p in providers}
        self._shortcuts = shortcuts
        self._owner_rank = {owner_id: i for i, owner_id in enumerate(sorted(registry.owners()))}

    @property
    def registry(self) -> PatternRegistry:
        return self._registry

    def provider(self, owner_id: str) -> RuleProvider | None:
        return self._providers.get(owner_id)

    def classify(self, mpn: Any) -> ClassificationResult:
        """Best (manufacturer, type) for an MPN, or Unknown / MalformedInput."""
        malformed = check_input(mpn)
        if malformed is not None:
            return malformed
        candidates = self.classify_all(mpn)
        if not candidates:
            logger.debug(f"No rule matched {mpn!r}")
            return Unknown(mpn.strip())
        best = candidates[0]
        if len(candidates) > 1:
            logger.debug(f"{mpn!r}: {len(candidates)} candidates, picked {best.owner_id}/{best.component_type.value}")
        return self._resolved_part(mpn.strip(), best)

    def classify_all(self, mpn: Any) -> list[Candidate]:
        """Every matching (owner, type) pair, best first.

        Ordered by confidence tier (HIGH shortcut owner, MEDIUM manufacturer
        specific, LOW generic), then specificity score, owner order, type
        depth and declaration order. Malformed input gives [].
        """
        if check_input(mpn) is not None:
            return []
        for text in match_forms(mpn):
            candidates = self._candidates(text)
            if candidates:
                return candidates
        return []

    def _candidates(self, text: str) -> list[Candidate]:
        shortcut_owner = self._shortcut_owner(text)
        candidates = []
        for owner_id in self._owner_rank:
            for component_type in self._matching_types(owner_id, text):
                if owner_id == shortcut_owner:
                    confidence = Confidence.HIGH
                elif component_type.is_manufacturer_specific:
                    confidence = Confidence.MEDIUM
                else:
                    confidence = Confidence.LOW
                candidates.append(Candidate(owner_id, component_type, confidence, specificity_score(component_type)))
        candidates.sort(key=self._rank_key)
        return candidates

    def _rank_key(self, candidate: Candidate) -> tuple[int, int, int, int, int]:
        return (
            candidate.confidence.rank,
            -candidate.score,
            self._owner_rank[candidate.owner_id],
            -candidate.component_type.depth,
            _TYPE_ORDER[candidate.component_type],
        )

    def _shortcut_owner(self, text: str) -> str | None:
        for pattern, owner_id in self._shortcuts:
            if pattern.match(text):
                if owner_id not in self._owner_rank:
                    return None
                return owner_id
        return None

    def _matching_types(self, owner_id: str, text: str) -> list[ComponentType]:
        provider = self._providers.get(owner_id)
        matched = []
        for component_type in self._registry.types_for_owner(owner_id):
            if provider is not None:
                hit = provider.matches(text, component_type, self._registry)
            else:
                hit = self._registry.matches_owner(text, component_type, owner_id)
            if hit:
                matched.append(component_type)
        return matched

    def _resolved_part(self, mpn: str, candidate: Candidate) -> ResolvedPart:
        provider = self._providers.get(candidate.owner_id)
        if provider is None:
            return ResolvedPart(
                mpn=mpn,
                normalized_mpn=normalize_mpn(strip_package_suffix(mpn)),
                component_type=candidate.component_type,
                manufacturer=candidate.owner_id,
                manufacturer_name=candidate.owner_id,
                confidence=candidate.confidence,
            )
        return ResolvedPart(
            mpn=mpn,
            normalized_mpn=normalize_mpn(strip_package_suffix(mpn)),
            component_type=candidate.component_type,
            manufacturer=candidate.owner_id,
            manufacturer_name=provider.name or candidate.owner_id,
            package_code=provider.extract_package_code(mpn),
            series=provider.extract_series(mpn),
            attributes=provider.extract_attributes(mpn, candidate.component_type),
            confidence=candidate.confidence,
        )

    # -------------------------------------------------------------------------
    # Convenience queries
    # -------------------------------------------------------------------------

    def manufacturer_of(self, mpn: Any) -> str | None:
        result = self.classify(mpn)
        return result.manufacturer if isinstance(result, ResolvedPart) else None

    def component_type_of(self, mpn: Any) -> ComponentType | None:
        result = self.classify(mpn)
        return result.component_type if isinstance(result, ResolvedPart) else None

    def is_type(self, mpn: Any, component_type: ComponentType) -> bool:
        """True if any matching rule identifies the MPN as `component_type` or a subtype."""
        return any(c.component_type.is_a(component_type) for c in self.classify_all(mpn))

    def find_mpn_in_text(self, text: str | None) -> ResolvedPart | None:
        """First token of free text that classifies: 'P/N: LM358DR qty 10' -> LM358DR."""
        for token in candidate_tokens(text):
            result = self.classify(token)
            if isinstance(result, ResolvedPart):
                return result
        return None

    def is_official_replacement(self, mpn_a: Any, mpn_b: Any) -> bool:
        """True if both MPNs resolve to one manufacturer that declares them interchangeable."""
        part_a = self.classify(mpn_a)
        part_b = self.classify(mpn_b)
        if not isinstance(part_a, ResolvedPart) or not isinstance(part_b, ResolvedPart):
            return False
        if part_a.manufacturer != part_b.manufacturer:
            return False
        provider = self._providers.get(part_a.manufacturer)
        return provider is not None and provider.is_official_replacement(part_a.mpn, part_b.mpn)
