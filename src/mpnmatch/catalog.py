"""Startup wiring: providers -> frozen registries -> resolver and similarity engine.

build_catalog() runs the build phase once and freezes everything it creates.
The default catalog is built lazily on first use and shared by the module-level
classify(), classify_all() and similarity() helpers.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Iterable

from .exceptions import InvalidPattern
from .metadata import SimilarityProfile, TypeMetadata, TypeMetadataRegistry, default_metadata_registry
from .patterns import BuildReport, PatternRegistry, build_registry
from .providers import RuleProvider, default_providers
from .resolver import Candidate, ClassificationResult, Resolver
from .similarity import SimilarityEngine, SimilarityResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Catalog:
    """Everything needed to classify and compare parts. Read-only."""

    patterns: PatternRegistry
    metadata: TypeMetadataRegistry
    resolver: Resolver
    engine: SimilarityEngine
    report: BuildReport

    @property
    def errors(self) -> list[InvalidPattern]:
        """Rules rejected during the build phase."""
        return list(self.report.errors)

    def classify(self, mpn: Any) -> ClassificationResult:
        return self.resolver.classify(mpn)

    def classify_all(self, mpn: Any) -> list[Candidate]:
        return self.resolver.classify_all(mpn)

    def similarity(
        self,
        mpn_a: Any,
        mpn_b: Any,
        profile: SimilarityProfile | str | None = None,
        directional: bool | None = None,
    ) -> SimilarityResult:
        return self.engine.compare_mpns(mpn_a, mpn_b, profile, directional)


def build_catalog(
    providers: Iterable[RuleProvider] | None = None,
    metadata: Iterable[TypeMetadata] = (),
    directional: bool = False,
) -> Catalog:
    """Register providers and metadata, freeze both registries, wire the engine.

    `providers` defaults to every bundled provider. `metadata` entries are
    added on top of the default metadata, replacing entries of the same type.
    Rejected rules are logged and listed in `Catalog.errors`; they do not stop
    the build.
    """
    provider_list = list(default_providers() if providers is None else providers)
    patterns, report = build_registry(provider_list)
    metadata_registry = default_metadata_registry(metadata).freeze()
    resolver = Resolver(patterns, provider_list)
    engine = SimilarityEngine(metadata_registry, resolver, directional=directional)
    logger.info(
        f"Catalog built: {len(report.providers)} providers, {report.rules_registered} rules, "
        f"{len(metadata_registry)} metadata entries, {len(report.errors)} rejected rules"
    )
    return Catalog(patterns, metadata_registry, resolver, engine, report)


# =============================================================================
# DEFAULT CATALOG
# =============================================================================

_default_catalog: Catalog | None = None
_default_catalog_lock = threading.Lock()


def get_default_catalog() -> Catalog:
    """Process-wide catalog of the bundled providers, built on first call."""
    global _default_catalog
    if _default_catalog is None:
        with _default_catalog_lock:
            if _default_catalog is None:
                _default_catalog = build_catalog()
    return _default_catalog


def classify(mpn: Any) -> ClassificationResult:
    return get_default_catalog().classify(mpn)


def classify_all(mpn: Any) -> list[Candidate]:
    return get_default_catalog().classify_all(mpn)


def similarity(
    mpn_a: Any,
    mpn_b: Any,
    profile: SimilarityProfile | str | None = None,
    directional: bool | None = None,
) -> SimilarityResult:
    """Classify both MPNs with the default catalog and score them."""
    return get_default_catalog().similarity(mpn_a, mpn_b, profile, directional)
