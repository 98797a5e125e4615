"""MPN classification and part similarity scoring."""

import logging

from .catalog import Catalog, build_catalog, classify, classify_all, get_default_catalog, similarity
from .component_types import ComponentType
from .exceptions import InvalidMetadata, InvalidPattern, RegistryFrozenError
from .metadata import (
    AttributeSpec,
    Importance,
    SimilarityProfile,
    TypeMetadata,
    TypeMetadataRegistry,
    get_profile,
)
from .patterns import BuildReport, MatchRule, PatternRegistry
from .providers import RuleProvider
from .resolver import Candidate, Confidence, MalformedInput, ResolvedPart, Resolver, Unknown
from .similarity import AttributeScore, SimilarityEngine, SimilarityResult
from .tolerance import ExactMatch, MaximumAllowed, MinimumRequired, PercentageTolerance, RangeOverlap, ToleranceRule

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "AttributeScore",
    "AttributeSpec",
    "BuildReport",
    "Candidate",
    "Catalog",
    "ComponentType",
    "Confidence",
    "ExactMatch",
    "Importance",
    "InvalidMetadata",
    "InvalidPattern",
    "MalformedInput",
    "MatchRule",
    "MaximumAllowed",
    "MinimumRequired",
    "PatternRegistry",
    "PercentageTolerance",
    "RangeOverlap",
    "RegistryFrozenError",
    "ResolvedPart",
    "Resolver",
    "RuleProvider",
    "SimilarityEngine",
    "SimilarityProfile",
    "SimilarityResult",
    "ToleranceRule",
    "TypeMetadata",
    "TypeMetadataRegistry",
    "Unknown",
    "build_catalog",
    "classify",
    "classify_all",
    "get_default_catalog",
    "get_profile",
    "similarity",
]
