"""Tests for the similarity engine."""

import pytest

from mpnmatch.component_types import ComponentType as T
from mpnmatch.config import HIGH_SIMILARITY, LOW_SIMILARITY, LOW_SIMILARITY_FLOOR
from mpnmatch.metadata import DESIGN_PHASE, EMERGENCY_SOURCING, TypeMetadataRegistry, default_metadata_registry
from mpnmatch.resolver import MalformedInput, ResolvedPart, Unknown
from mpnmatch.similarity import SCORED, SHORT_CIRCUITED, UNSCORED, SimilarityEngine, common_type

RESISTOR_10K_5 = {"resistance": "10kΩ", "tolerance": "±5%", "package": "0805"}
CAP_100N_50V = {"capacitance": "100nF", "voltage": "50V", "dielectric": "X7R", "package": "0603"}
CAP_100N_25V = {"capacitance": "100nF", "voltage": "25V", "dielectric": "X7R", "package": "0603"}
N_MOSFET = {"channel": "N", "voltage_rating": 60, "current_rating": 30}
P_MOSFET = {"channel": "P", "voltage_rating": 60, "current_rating": 30}


class TestCommonType:
    def test_shared_ancestor(self):
        assert common_type(T.RESISTOR_CHIP_YAGEO, T.RESISTOR_CHIP_VISHAY) is T.RESISTOR_CHIP
        assert common_type(T.RESISTOR_CHIP_YAGEO, T.RESISTOR_THROUGH_HOLE) is T.RESISTOR
        assert common_type(T.OPAMP_TI, T.OPAMP_TI) is T.OPAMP_TI

    def test_different_families(self):
        assert common_type(T.RESISTOR, T.CAPACITOR) is None


class TestCompareAttributes:
    """Scoring of already-extracted attribute sets."""

    def test_equivalent_resistors(self, engine):
        other = {"resistance": "10k", "tolerance": "5%", "package": "0805"}
        result = engine.compare_attributes(T.RESISTOR_CHIP, RESISTOR_10K_5, T.RESISTOR_CHIP, other)
        assert result.score >= 0.9
        assert result.acceptable
        assert result.status == SCORED
        assert result.profile == "REPLACEMENT"

    def test_breakdown(self, engine):
        result = engine.compare_attributes(T.RESISTOR, RESISTOR_10K_5, T.RESISTOR, RESISTOR_10K_5)
        resistance = result.attribute("resistance")
        assert resistance.raw_score == 1.0
        assert not resistance.skipped
        assert result.attribute("power_rating").skipped
        assert result.attribute("missing") is None

    def test_critical_mismatch_short_circuits(self, engine):
        result = engine.compare_attributes(T.MOSFET, N_MOSFET, T.MOSFET, P_MOSFET)
        assert result.score == LOW_SIMILARITY_FLOOR
        assert not result.acceptable
        assert result.short_circuited
        assert result.status == SHORT_CIRCUITED
        assert "channel" in result.reason
        # Later attributes are never evaluated
        assert result.attribute("rds_on") is None

    def test_different_families_score_zero(self, engine):
        result = engine.compare_attributes(T.RESISTOR, RESISTOR_10K_5, T.CAPACITOR, CAP_100N_50V)
        assert result.score == 0.0
        assert result.short_circuited
        assert result.reason == "different component families"

    def test_missing_critical_caps_score(self, engine):
        partial = {"resistance": "10k", "package": "0805"}
        result = engine.compare_attributes(T.RESISTOR, RESISTOR_10K_5, T.RESISTOR, partial)
        assert result.score == pytest.approx(LOW_SIMILARITY)
        assert not result.acceptable
        assert "cannot determine critical tolerance" in result.reason

    def test_resistance_outside_tolerance(self, engine):
        far = {"resistance": "12k", "tolerance": "5%", "package": "0805"}
        result = engine.compare_attributes(T.RESISTOR, RESISTOR_10K_5, T.RESISTOR, far)
        assert result.score == LOW_SIMILARITY_FLOOR
        assert "resistance" in result.reason

    def test_symmetric_by_default(self, engine):
        # 48V is within the rating margin of 50V; the package differs
        close = {"capacitance": "100nF", "voltage": "48V", "dielectric": "X7R", "package": "0805"}
        forward = engine.compare_attributes(T.CAPACITOR, CAP_100N_50V, T.CAPACITOR, close)
        backward = engine.compare_attributes(T.CAPACITOR, close, T.CAPACITOR, CAP_100N_50V)
        assert forward.score == pytest.approx(backward.score)
        assert 0.0 < forward.score < 1.0
        assert forward.status == SCORED

    @pytest.mark.parametrize("first,second", [
        (CAP_100N_50V, CAP_100N_25V),
        (CAP_100N_25V, CAP_100N_50V),
    ])
    def test_rating_downgrade_short_circuits_either_order(self, engine, first, second):
        result = engine.compare_attributes(T.CAPACITOR, first, T.CAPACITOR, second)
        assert result.score == LOW_SIMILARITY_FLOOR
        assert result.short_circuited
        assert "voltage" in result.reason

    def test_mosfet_voltage_downgrade(self, engine):
        low_voltage = {"channel": "N", "voltage_rating": 20, "current_rating": 30}
        result = engine.compare_attributes(T.MOSFET, N_MOSFET, T.MOSFET, low_voltage)
        assert result.score == LOW_SIMILARITY_FLOOR
        assert not result.acceptable
        assert result.status == SHORT_CIRCUITED
        assert "voltage_rating" in result.reason

    def test_directional_replacement(self, engine):
        # A 25V part cannot replace a 50V one; the reverse is fine
        downgrade = engine.compare_attributes(T.CAPACITOR, CAP_100N_50V, T.CAPACITOR, CAP_100N_25V, directional=True)
        upgrade = engine.compare_attributes(T.CAPACITOR, CAP_100N_25V, T.CAPACITOR, CAP_100N_50V, directional=True)
        assert downgrade.score == LOW_SIMILARITY_FLOOR
        assert "voltage" in downgrade.reason
        assert upgrade.score == pytest.approx(1.0)

    def test_directional_engine_default(self):
        engine = SimilarityEngine(default_metadata_registry().freeze(), directional=True)
        result = engine.compare_attributes(T.CAPACITOR, CAP_100N_50V, T.CAPACITOR, CAP_100N_25V)
        assert result.score == LOW_SIMILARITY_FLOOR

    def test_profile_changes_threshold(self, engine):
        partial_match = {"resistance": "10k", "tolerance": "5%", "package": "1206"}
        strict = engine.compare_attributes(T.RESISTOR, RESISTOR_10K_5, T.RESISTOR, partial_match, profile=DESIGN_PHASE)
        relaxed = engine.compare_attributes(
            T.RESISTOR, RESISTOR_10K_5, T.RESISTOR, partial_match, profile="emergency_sourcing")
        assert not strict.acceptable
        assert relaxed.acceptable
        assert relaxed.profile == EMERGENCY_SOURCING.name

    def test_microcontroller_default_profile(self, engine):
        result = engine.compare_attributes(
            T.MICROCONTROLLER_ST, {"family": "STM32"}, T.MICROCONTROLLER_ST, {"family": "STM32"})
        assert result.profile == DESIGN_PHASE.name


class TestUnscored:
    """Missing metadata or data is reported, never scored as a placeholder."""

    def test_no_metadata(self, engine):
        result = engine.compare_attributes(T.LOGIC_IC_TI, {}, T.LOGIC_IC_NEXPERIA, {})
        assert result.unscored
        assert result.status == UNSCORED
        assert result.score == 0.0
        assert not result.acceptable
        assert "no similarity metadata" in result.reason

    def test_nothing_comparable(self, engine):
        result = engine.compare_attributes(T.OPAMP, {"gbw": "1MHz"}, T.OPAMP, {"slew_rate": "0.5V/us"})
        assert result.unscored
        assert not result.acceptable
        assert result.reason == "no attribute known on both sides"

    def test_empty_metadata_registry(self):
        engine = SimilarityEngine(TypeMetadataRegistry().freeze())
        result = engine.compare_attributes(T.RESISTOR, RESISTOR_10K_5, T.RESISTOR, RESISTOR_10K_5)
        assert result.unscored

    @pytest.mark.parametrize("part", [Unknown("XYZZY123"), MalformedInput(None, "MPN is None"), None])
    def test_unclassified_input(self, engine, part):
        resolved = ResolvedPart("LM358", "LM358", T.OPAMP, "ti")
        result = engine.similarity(resolved, part)
        assert result.unscored
        assert result.score == 0.0

    def test_unscored_distinct_from_low_score(self, engine):
        low = engine.compare_attributes(T.MOSFET, N_MOSFET, T.MOSFET, P_MOSFET)
        unscored = engine.compare_attributes(T.LOGIC_IC, {}, T.LOGIC_IC, {})
        assert low.score == unscored.score
        assert low.status != unscored.status


class TestCompareMpns:
    """End-to-end: classify both MPNs, then score."""

    def test_identical_mpn(self, engine):
        result = engine.compare_mpns("LM358DR", "lm358dr")
        assert result.score == 1.0
        assert "identical part number" in result.reason

    def test_documented_equivalent_boosted(self, engine):
        result = engine.compare_mpns("2N2222A", "PN2222A")
        assert result.score >= HIGH_SIMILARITY
        assert result.acceptable
        assert "documented equivalent" in result.reason

    def test_cross_reference_within_series(self, engine):
        result = engine.compare_mpns("LM358D", "LM358DR")
        assert result.score >= HIGH_SIMILARITY

    def test_official_replacement_boosted(self, engine):
        result = engine.compare_mpns("TPS73633DBVR", "TPS73633DBVT")
        assert result.score >= HIGH_SIMILARITY
        assert "official replacement" in result.reason
        assert "documented equivalent" not in result.reason

    def test_different_pin_count_not_boosted(self, engine):
        result = engine.compare_mpns("STM32F103C8T6", "STM32F103RBT6")
        assert result.score < HIGH_SIMILARITY
        assert not result.acceptable
        assert "official replacement" not in result.reason
        assert result.attribute("package").raw_score == 0.0

    def test_rating_downgrade_not_rescued(self, engine):
        result = engine.compare_mpns("IRLML2502", "IRF540N")
        assert result.score == LOW_SIMILARITY_FLOOR
        assert result.short_circuited

    def test_mosfet_channel_mismatch(self, engine):
        result = engine.compare_mpns("IRF540N", "IRF9540N")
        assert result.score == LOW_SIMILARITY_FLOOR
        assert result.short_circuited

    def test_different_families(self, engine):
        result = engine.compare_mpns("LM358DR", "RC0805FR-0710KL")
        assert result.score == 0.0
        assert result.short_circuited

    def test_symmetric(self, engine):
        forward = engine.compare_mpns("IRF540N", "FQP50N06")
        backward = engine.compare_mpns("FQP50N06", "IRF540N")
        assert forward.score == pytest.approx(backward.score)

    def test_unknown_mpn(self, engine):
        result = engine.compare_mpns("LM358DR", "XYZZY123")
        assert result.unscored
        assert "could not be classified" in result.reason

    def test_requires_resolver(self):
        engine = SimilarityEngine(default_metadata_registry().freeze())
        with pytest.raises(RuntimeError):
            engine.compare_mpns("LM358DR", "LM358N")


class TestProfileNames:
    """An unknown profile name is a caller error, raised before scoring."""

    def test_unknown_name_raises_for_unclassified_parts(self, engine):
        with pytest.raises(ValueError, match="Unknown similarity profile"):
            engine.compare_mpns("XYZZY123", "QQQ999", profile="bargain")

    def test_unknown_name_raises_for_empty_rank(self, engine):
        with pytest.raises(ValueError):
            engine.rank("LM358DR", [], profile="bargain")

    def test_name_reported_on_result(self, engine):
        result = engine.compare_mpns("LM358DR", "XYZZY123", profile="design-phase")
        assert result.unscored
        assert result.profile == DESIGN_PHASE.name


class TestRank:
    def test_best_first(self, engine):
        ranked = engine.rank("IRF540N", ["IRF9540N", "IRF540NPBF", "IRLML2502"])
        names = [candidate for candidate, _ in ranked]
        assert names[0] == "IRF540NPBF"
        results = dict(ranked)
        assert results["IRF9540N"].short_circuited
        assert results["IRLML2502"].short_circuited
        scores = [result.score for _, result in ranked]
        assert scores == sorted(scores, reverse=True)

    def test_stable_for_equal_scores(self, engine):
        ranked = engine.rank("LM358DR", ["XYZZY123", "QQQ999"])
        assert [candidate for candidate, _ in ranked] == ["XYZZY123", "QQQ999"]
