"""Similarity scoring between two classified parts.

Scoring order:

1. Parts from different component families score 0 (short circuit).
2. Critical attributes are checked first. A critical value known on both sides
   that the tolerance rule rejects returns LOW_SIMILARITY_FLOOR immediately.
   A critical value known on one side only caps the result at LOW_SIMILARITY.
3. Remaining known pairs are combined as a weighted mean, each attribute
   weighted by importance.base_weight * profile multiplier.
4. Identical MPNs score 1.0. Documented cross-references and manufacturer
   official replacements are raised to at least HIGH_SIMILARITY.

Scores are symmetric unless directional scoring is requested, in which case
the result answers "can part B replace part A". In symmetric mode a critical
attribute must be acceptable in both directions.

Profiles are given as SimilarityProfile objects or names. An unknown name
raises ValueError before anything is scored.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from . import config
from .component_types import ComponentType
from .equivalents import are_equivalent
from .metadata import Importance, SimilarityProfile, TypeMetadata, TypeMetadataRegistry, get_profile
from .resolver import ResolvedPart, Resolver

logger = logging.getLogger(__name__)

SCORED = "scored"
SHORT_CIRCUITED = "short_circuited"
UNSCORED = "unscored"


@dataclass(frozen=True)
class AttributeScore:
    """How one attribute contributed to a similarity score."""

    name: str
    importance: Importance
    raw_score: float
    weight: float
    contribution: float
    skipped: bool = False


@dataclass(frozen=True)
class SimilarityResult:
    score: float
    acceptable: bool
    profile: str
    breakdown: tuple[AttributeScore, ...] = ()
    short_circuited: bool = False
    reason: str = ""
    unscored: bool = False

    @property
    def status(self) -> str:
        """'scored', 'short_circuited' or 'unscored'."""
        if self.unscored:
            return UNSCORED
        if self.short_circuited:
            return SHORT_CIRCUITED
        return SCORED

    def attribute(self, name: str) -> AttributeScore | None:
        for entry in self.breakdown:
            if entry.name == name:
                return entry
        return None


def common_type(type_a: ComponentType, type_b: ComponentType) -> ComponentType | None:
    """Most specific type both arguments descend from, or None across families."""
    for candidate in type_a.ancestors():
        if type_b.is_a(candidate):
            return candidate
    return None


class SimilarityEngine:
    """Metadata-driven comparison of two parts.

    `resolver` is needed for compare_mpns() and for official-replacement
    checks; compare_attributes() works without one.
    """

    def __init__(
        self,
        metadata: TypeMetadataRegistry,
        resolver: Resolver | None = None,
        directional: bool = False,
    ):
        self._metadata = metadata
        self._resolver = resolver
        self._directional = directional

    @property
    def metadata(self) -> TypeMetadataRegistry:
        return self._metadata

    def similarity(
        self,
        part_a: Any,
        part_b: Any,
        profile: SimilarityProfile | str | None = None,
        directional: bool | None = None,
    ) -> SimilarityResult:
        """Score two classification results.

        Anything other than a ResolvedPart (Unknown, MalformedInput) gives an
        unscored 0.0 result.
        """
        selected = _resolve_profile(profile)
        for label, part in (("first", part_a), ("second", part_b)):
            if not isinstance(part, ResolvedPart):
                reason = getattr(part, "reason", "not classified")
                return self._unscored(selected, f"{label} part could not be classified: {reason}")

        attributes_a = self._part_attributes(part_a)
        attributes_b = self._part_attributes(part_b)
        return self._score(
            part_a.component_type,
            attributes_a,
            part_b.component_type,
            attributes_b,
            selected,
            directional,
            part_a,
            part_b,
        )

    def compare_mpns(
        self,
        mpn_a: Any,
        mpn_b: Any,
        profile: SimilarityProfile | str | None = None,
        directional: bool | None = None,
    ) -> SimilarityResult:
        """Classify both MPNs, then score them."""
        if self._resolver is None:
            raise RuntimeError("compare_mpns() needs a SimilarityEngine constructed with a resolver")
        selected = _resolve_profile(profile)
        return self.similarity(self._resolver.classify(mpn_a), self._resolver.classify(mpn_b), selected, directional)

    def compare_attributes(
        self,
        type_a: ComponentType,
        attributes_a: Mapping[str, Any],
        type_b: ComponentType,
        attributes_b: Mapping[str, Any],
        profile: SimilarityProfile | str | None = None,
        directional: bool | None = None,
    ) -> SimilarityResult:
        """Score two already-extracted attribute sets."""
        return self._score(type_a, attributes_a, type_b, attributes_b, _resolve_profile(profile), directional)

    def rank(
        self,
        reference: Any,
        candidates: Iterable[Any],
        profile: SimilarityProfile | str | None = None,
        directional: bool | None = None,
    ) -> list[tuple[Any, SimilarityResult]]:
        """Candidates scored against `reference`, best first.

        Items are MPN strings (classified through the resolver) or
        ResolvedParts. Equal scores keep their input order.
        """
        selected = _resolve_profile(profile)
        reference_part = self._as_part(reference)
        scored = [
            (candidate, self.similarity(reference_part, self._as_part(candidate), selected, directional))
            for candidate in candidates
        ]
        scored.sort(key=lambda item: -item[1].score)
        return scored

    # -------------------------------------------------------------------------
    # Scoring
    # -------------------------------------------------------------------------

    def _score(
        self,
        type_a: ComponentType,
        attributes_a: Mapping[str, Any],
        type_b: ComponentType,
        attributes_b: Mapping[str, Any],
        profile: SimilarityProfile | None,
        directional: bool | None,
        part_a: ResolvedPart | None = None,
        part_b: ResolvedPart | None = None,
    ) -> SimilarityResult:
        if directional is None:
            directional = self._directional

        if type_a.base_type is not type_b.base_type:
            logger.debug(f"{type_a.value} vs {type_b.value}: different component families")
            return SimilarityResult(
                score=0.0,
                acceptable=False,
                profile=profile.name if profile else "",
                short_circuited=True,
                reason="different component families",
            )

        shared_type = common_type(type_a, type_b)
        metadata = self._metadata.get(shared_type)
        if metadata is None:
            logger.debug(f"No similarity metadata for {shared_type.value}")
            return self._unscored(profile, f"no similarity metadata for {shared_type.value}")

        selected = profile if profile is not None else metadata.default_profile
        breakdown: list[AttributeScore] = []

        # Critical attributes: a known mismatch ends the comparison
        undetermined = []
        for spec in metadata.critical_specs:
            value_a = spec.coerce(attributes_a.get(spec.name))
            value_b = spec.coerce(attributes_b.get(spec.name))
            if value_a is None and value_b is None:
                continue
            if value_a is None or value_b is None:
                undetermined.append(spec.name)
                continue
            if directional:
                accepted = spec.rule.accepts_replacement(value_a, value_b)
            else:
                accepted = spec.rule.accepts(value_a, value_b)
            if not accepted:
                raw = spec.rule.score(value_a, value_b) if directional else spec.rule.symmetric_score(value_a, value_b)
                weight = selected.effective_weight(spec.importance)
                breakdown.append(AttributeScore(spec.name, spec.importance, raw, weight, 0.0))
                logger.debug(f"Critical mismatch on {spec.name}: {value_a!r} vs {value_b!r}")
                return SimilarityResult(
                    score=config.LOW_SIMILARITY_FLOOR,
                    acceptable=False,
                    profile=selected.name,
                    breakdown=tuple(breakdown),
                    short_circuited=True,
                    reason=f"critical attribute {spec.name} does not match ({value_a} vs {value_b})",
                )

        total, max_possible = self._accumulate(metadata, attributes_a, attributes_b, selected, directional, breakdown)
        score = total / max_possible if max_possible > 0 else 0.0
        reasons = []
        unscored = max_possible <= 0

        if undetermined:
            score = min(score, config.LOW_SIMILARITY)
            reasons.append(f"cannot determine critical {', '.join(undetermined)}")

        if part_a is not None and part_b is not None:
            if part_a.normalized_mpn == part_b.normalized_mpn and part_a.component_type is part_b.component_type:
                score = 1.0
                unscored = False
                reasons.append("identical part number")
            else:
                boost = self._boost_reason(part_a, part_b)
                if boost:
                    score = min(1.0, max(score, config.HIGH_SIMILARITY))
                    unscored = False
                    reasons.append(boost)

        if unscored:
            reasons.append("no attribute known on both sides")
        score = max(0.0, min(1.0, score))
        logger.debug(f"{type_a.value} vs {type_b.value} [{selected.name}]: {score:.3f}")
        return SimilarityResult(
            score=score,
            acceptable=not unscored and selected.meets_threshold(score),
            profile=selected.name,
            breakdown=tuple(breakdown),
            reason="; ".join(reasons),
            unscored=unscored,
        )

    def _accumulate(
        self,
        metadata: TypeMetadata,
        attributes_a: Mapping[str, Any],
        attributes_b: Mapping[str, Any],
        profile: SimilarityProfile,
        directional: bool,
        breakdown: list[AttributeScore],
    ) -> tuple[float, float]:
        total = 0.0
        max_possible = 0.0
        for spec in metadata.specs:
            weight = profile.effective_weight(spec.importance)
            value_a = spec.coerce(attributes_a.get(spec.name))
            value_b = spec.coerce(attributes_b.get(spec.name))
            if value_a is None or value_b is None:
                breakdown.append(AttributeScore(spec.name, spec.importance, 0.0, weight, 0.0, skipped=True))
                continue
            raw = spec.rule.score(value_a, value_b) if directional else spec.rule.symmetric_score(value_a, value_b)
            total += raw * weight
            max_possible += weight
            breakdown.append(AttributeScore(spec.name, spec.importance, raw, weight, raw * weight))
        return total, max_possible

    def _boost_reason(self, part_a: ResolvedPart, part_b: ResolvedPart) -> str:
        """Why the pair is lifted to HIGH_SIMILARITY, or '' if it is not."""
        if are_equivalent(part_a.normalized_mpn, part_b.normalized_mpn):
            return "documented equivalent"
        if self._resolver is None or part_a.manufacturer != part_b.manufacturer:
            return ""
        provider = self._resolver.provider(part_a.manufacturer)
        if provider is not None and provider.is_official_replacement(part_a.mpn, part_b.mpn):
            return "official replacement"
        return ""

    def _part_attributes(self, part: ResolvedPart) -> dict[str, Any]:
        attributes = dict(part.attributes)
        if part.package_code:
            attributes.setdefault("package", part.package_code)
        if part.series:
            attributes.setdefault("series", part.series)
        return attributes

    def _as_part(self, item: Any) -> Any:
        if isinstance(item, str) and self._resolver is not None:
            return self._resolver.classify(item)
        return item

    def _unscored(self, profile: SimilarityProfile | None, reason: str) -> SimilarityResult:
        return SimilarityResult(
            score=0.0,
            acceptable=False,
            profile=profile.name if profile else "",
            reason=reason,
            unscored=True,
        )


def _resolve_profile(profile: SimilarityProfile | str | None) -> SimilarityProfile | None:
    return get_profile(profile) if profile is not None else None
