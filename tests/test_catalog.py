"""Tests for catalog construction and the module-level helpers."""

import threading

import pytest

import mpnmatch
from mpnmatch import catalog as catalog_module
from mpnmatch.catalog import build_catalog, get_default_catalog
from mpnmatch.component_types import ComponentType as T
from mpnmatch.exceptions import RegistryFrozenError
from mpnmatch.metadata import Importance, build_metadata
from mpnmatch.providers import TIProvider, YageoProvider
from mpnmatch.providers.base import RuleProvider, rules
from mpnmatch.resolver import ResolvedPart, Unknown
from mpnmatch.tolerance import ExactMatch


class SloppyProvider(RuleProvider):
    owner_id = "sloppy"
    name = "Sloppy"
    RULES = (
        rules(r"SLP[0-9", T.OPAMP),
        rules(r"SLP[0-9]+", T.OPAMP),
    )


class TestBuildCatalog:
    def test_default_catalog_builds_cleanly(self, catalog):
        assert catalog.errors == []
        assert catalog.patterns.frozen
        assert catalog.metadata.frozen

    def test_rejected_rules_surface_as_errors(self):
        built = build_catalog([SloppyProvider()])
        assert len(built.errors) == 1
        assert built.errors[0].owner_id == "sloppy"
        assert isinstance(built.classify("SLP100"), ResolvedPart)

    def test_subset_of_providers(self):
        built = build_catalog([TIProvider(), YageoProvider()])
        assert built.patterns.owners() == ("ti", "yageo")
        assert isinstance(built.classify("STM32F103C8T6"), Unknown)
        assert built.classify("LM358DR").manufacturer == "ti"

    def test_registries_frozen_after_build(self, catalog):
        with pytest.raises(RegistryFrozenError):
            catalog.patterns.register(T.OPAMP, "ti", r"XX[0-9]+")
        with pytest.raises(RegistryFrozenError):
            catalog.metadata.register(build_metadata(T.LOGIC_IC, [("family", Importance.CRITICAL, ExactMatch())]))

    def test_extra_metadata(self):
        logic = build_metadata(T.LOGIC_IC, [
            ("series", Importance.CRITICAL, ExactMatch()),
            ("package", Importance.HIGH, ExactMatch()),
        ])
        built = build_catalog(metadata=[logic])
        result = built.similarity("SN74HC595N", "SN74HC595DR")
        assert not result.unscored
        assert result.score > 0.0

    def test_directional_catalog(self):
        built = build_catalog(directional=True)
        assert built.similarity("IRF540N", "IRF9540N").score == 0.0


class TestDefaultCatalog:
    """Lazily built, shared process-wide catalog."""

    def test_singleton(self):
        assert get_default_catalog() is get_default_catalog()

    def test_concurrent_first_use(self, monkeypatch):
        monkeypatch.setattr(catalog_module, "_default_catalog", None)
        seen = []

        def worker():
            seen.append(get_default_catalog())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len({id(c) for c in seen}) == 1

    def test_module_level_helpers(self):
        assert mpnmatch.classify("LM358DR").component_type is T.OPAMP_TI
        assert mpnmatch.classify_all("LM358DR")[0].owner_id == "ti"
        assert mpnmatch.similarity("LM358DR", "LM358DR").score == 1.0
        assert mpnmatch.classify(None).reason == "MPN is None"
