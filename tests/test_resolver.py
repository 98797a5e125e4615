"""Tests for MPN classification."""

import re
from concurrent.futures import ThreadPoolExecutor

import pytest

from mpnmatch.catalog import build_catalog
from mpnmatch.component_types import ComponentType as T
from mpnmatch.patterns import build_registry
from mpnmatch.providers import default_providers
from mpnmatch.providers.base import RuleProvider, rules
from mpnmatch.resolver import (
    Confidence,
    MalformedInput,
    ResolvedPart,
    Resolver,
    Unknown,
    check_input,
    match_forms,
    specificity_score,
)


class AcmeProvider(RuleProvider):
    owner_id = "acme"
    name = "Acme"
    RULES = (rules(r"ACM[0-9]+", T.MICROCONTROLLER),)


class ZenithProvider(RuleProvider):
    owner_id = "zenith"
    name = "Zenith"
    RULES = (rules(r"ACM1[0-9]+", T.MICROCONTROLLER),)


def _resolver(providers, shortcuts=()):
    registry, _ = build_registry(providers)
    return Resolver(registry, providers, shortcuts=shortcuts)


class TestClassify:
    """Classification of well-known part numbers."""

    @pytest.mark.parametrize("mpn,owner,component_type,confidence", [
        ("LM358DR", "ti", T.OPAMP_TI, Confidence.HIGH),
        ("STM32F103C8T6", "st", T.MICROCONTROLLER_ST, Confidence.HIGH),
        ("ATmega328P-PU", "microchip", T.MICROCONTROLLER_MICROCHIP, Confidence.HIGH),
        ("RC0805FR-0710KL", "yageo", T.RESISTOR_CHIP_YAGEO, Confidence.HIGH),
        ("GRM188R71H104KA93D", "murata", T.CAPACITOR_CERAMIC_MURATA, Confidence.HIGH),
        ("IRF540NPBF", "infineon", T.MOSFET_INFINEON, Confidence.HIGH),
        ("1N4007", "vishay", T.DIODE_VISHAY, Confidence.HIGH),
        ("ESP32-WROOM-32E-N8", "espressif", T.MICROCONTROLLER_ESPRESSIF, Confidence.HIGH),
        ("MAX3483EESA+", "maxim", T.INTERFACE_IC_MAXIM, Confidence.MEDIUM),
        ("2N2222A", "onsemi", T.TRANSISTOR_ONSEMI, Confidence.MEDIUM),
        ("STP55NF06", "st", T.MOSFET_ST, Confidence.MEDIUM),
        ("TLE4275", "infineon", T.VOLTAGE_REGULATOR_INFINEON, Confidence.MEDIUM),
    ])
    def test_known_parts(self, resolver, mpn, owner, component_type, confidence):
        result = resolver.classify(mpn)
        assert isinstance(result, ResolvedPart)
        assert result.manufacturer == owner
        assert result.component_type is component_type
        assert result.confidence is confidence

    def test_resolved_part_fields(self, resolver):
        result = resolver.classify("  lm358dr ")
        assert result.mpn == "lm358dr"
        assert result.normalized_mpn == "LM358DR"
        assert result.manufacturer_name == "Texas Instruments"
        assert result.package_code == "SOIC"
        assert result.series == "LM358"
        assert result.attributes["configuration"] == "dual"
        assert result.base_type is T.OPAMP
        assert result.is_resolved

    def test_attributes_are_read_only(self, resolver):
        result = resolver.classify("LM358DR")
        with pytest.raises(TypeError):
            result.attributes["configuration"] = "quad"

    def test_resolved_part_hashable(self, resolver):
        first = resolver.classify("LM358DR")
        second = resolver.classify("LM358DR")
        assert first.attributes
        assert hash(first) == hash(second)
        assert len({first, second, resolver.classify("IRF540N")}) == 2

    def test_ordering_suffix_does_not_change_classification(self, resolver):
        with_suffix = resolver.classify("MAX3483EESA+")
        without = resolver.classify("MAX3483EESA")
        assert with_suffix.component_type is without.component_type
        assert with_suffix.manufacturer == without.manufacturer
        assert with_suffix.normalized_mpn == without.normalized_mpn == "MAX3483EESA"

    def test_second_sourced_part_picks_lowest_owner(self, resolver):
        # BC547 is made by both Nexperia and onsemi; equal scores fall to owner order
        result = resolver.classify("BC547B")
        assert result.manufacturer == "nexperia"
        assert result.component_type is T.TRANSISTOR_NEXPERIA


class TestUnknownAndMalformed:
    def test_unknown(self, resolver):
        result = resolver.classify("XYZZY123")
        assert isinstance(result, Unknown)
        assert result.mpn == "XYZZY123"
        assert result.reason == "no matching rule"
        assert not result.is_resolved

    @pytest.mark.parametrize("value", [None, "", "   ", 42, b"LM358"])
    def test_malformed(self, resolver, value):
        result = resolver.classify(value)
        assert isinstance(result, MalformedInput)
        assert not result.is_resolved
        assert resolver.classify_all(value) == []

    def test_check_input(self):
        assert check_input("LM358") is None
        assert check_input(None).reason == "MPN is None"
        assert "int" in check_input(7).reason

    def test_queries_on_unknown(self, resolver):
        assert resolver.manufacturer_of("XYZZY123") is None
        assert resolver.component_type_of(None) is None
        assert not resolver.is_type("XYZZY123", T.OPAMP)


class TestClassifyAll:
    """Candidate list ordering."""

    def test_tiers(self, resolver):
        candidates = resolver.classify_all("LM358DR")
        assert [(c.owner_id, c.component_type) for c in candidates] == [
            ("ti", T.OPAMP_TI),
            ("ti", T.OPAMP),
            ("st", T.OPAMP),
        ]
        assert [c.confidence for c in candidates] == [Confidence.HIGH, Confidence.HIGH, Confidence.LOW]
        assert candidates[0].score == 150
        assert candidates[1].score == -50

    def test_first_candidate_is_classification(self, resolver):
        for mpn in ("LM358DR", "BC547B", "MMBT3904", "NCP1117ST33T3G"):
            best = resolver.classify_all(mpn)[0]
            result = resolver.classify(mpn)
            assert (result.manufacturer, result.component_type) == (best.owner_id, best.component_type)

    def test_stripped_form_tried_first(self):
        assert match_forms("MAX3483EESA+") == ["MAX3483EESA", "MAX3483EESA+"]
        assert match_forms("lm358") == ["LM358"]

    def test_specificity_score(self):
        assert specificity_score(T.OPAMP_TI) == 150
        assert specificity_score(T.OPAMP) == -50


class TestShortcuts:
    """Manufacturer shortcuts rank their owner first, and fall through on no match."""

    def test_shortcut_owner_wins(self):
        providers = [AcmeProvider(), ZenithProvider()]
        resolver = _resolver(providers, shortcuts=((re.compile(r"^ACM1"), "zenith"),))
        result = resolver.classify("ACM150")
        assert result.manufacturer == "zenith"
        assert result.confidence is Confidence.HIGH

    def test_without_shortcut_owner_order_decides(self):
        resolver = _resolver([ZenithProvider(), AcmeProvider()])
        result = resolver.classify("ACM150")
        assert result.manufacturer == "acme"
        assert result.confidence is Confidence.LOW

    def test_shortcut_falls_through_when_owner_has_no_rule(self):
        providers = [AcmeProvider(), ZenithProvider()]
        resolver = _resolver(providers, shortcuts=((re.compile(r"^ACM"), "zenith"),))
        result = resolver.classify("ACM200")
        assert result.manufacturer == "acme"
        assert result.confidence is Confidence.LOW

    def test_shortcut_to_unregistered_owner_ignored(self):
        resolver = _resolver([AcmeProvider()], shortcuts=((re.compile(r"^ACM"), "nobody"),))
        assert resolver.classify("ACM200").manufacturer == "acme"


class TestDeterminism:
    def test_provider_order_irrelevant(self, resolver):
        reversed_resolver = build_catalog(list(reversed(default_providers()))).resolver
        for mpn in ("LM358DR", "BC547B", "MMBT3904", "2N7002", "1N4148W", "MCP1700-3302E/TT"):
            assert reversed_resolver.classify(mpn) == resolver.classify(mpn)
            assert reversed_resolver.classify_all(mpn) == resolver.classify_all(mpn)

    def test_concurrent_classification(self, resolver):
        mpns = ["LM358DR", "STM32F103C8T6", "BC547B", "IRF540N", "XYZZY123", "RC0805FR-0710KL"] * 50
        expected = [resolver.classify(m) for m in mpns]
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(resolver.classify, mpns))
        assert results == expected

    def test_repeated_calls_stable(self, resolver):
        first = resolver.classify("MMBT3904")
        resolver.classify("LM358DR")
        resolver.classify("XYZZY123")
        assert resolver.classify("MMBT3904") == first


class TestQueries:
    def test_is_type_checks_hierarchy(self, resolver):
        assert resolver.is_type("LM358DR", T.OPAMP)
        assert resolver.is_type("LM358DR", T.OPAMP_TI)
        assert not resolver.is_type("LM358DR", T.MOSFET)

    def test_manufacturer_and_type_of(self, resolver):
        assert resolver.manufacturer_of("STM32F103C8T6") == "st"
        assert resolver.component_type_of("STM32F103C8T6") is T.MICROCONTROLLER_ST

    def test_find_mpn_in_text(self, resolver):
        part = resolver.find_mpn_in_text("P/N: LM358DR qty 10")
        assert part is not None
        assert part.normalized_mpn == "LM358DR"
        assert resolver.find_mpn_in_text("nothing to see") is None
        assert resolver.find_mpn_in_text(None) is None

    def test_official_replacement(self, resolver):
        assert resolver.is_official_replacement("LM358D", "LM358DR")
        assert not resolver.is_official_replacement("LM358D", "LM358N")
        assert not resolver.is_official_replacement("LM358DR", "STM32F103C8T6")
        assert not resolver.is_official_replacement("XYZZY123", "LM358DR")
