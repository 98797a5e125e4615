"""Tests for MPN normalization and ordering suffixes."""

import pytest

from mpnmatch.mpn import (
    candidate_tokens,
    is_equivalent_mpn,
    normalize_mpn,
    package_suffix,
    search_variations,
    strip_package_suffix,
)


class TestNormalizeMpn:
    def test_trims_and_uppercases(self):
        assert normalize_mpn("  lm358dr ") == "LM358DR"

    def test_blank_input(self):
        assert normalize_mpn(None) == ""
        assert normalize_mpn("") == ""
        assert normalize_mpn("   ") == ""


class TestStripPackageSuffix:
    """Lead-free, reel and packing suffixes are removed."""

    @pytest.mark.parametrize("mpn,expected", [
        ("MAX3483EESA+", "MAX3483EESA"),
        ("LTC2053HMS8#PBF", "LTC2053HMS8"),
        ("LT1117CST#TR", "LT1117CST"),
        ("MCP2551-I/SN", "MCP2551-I"),
        ("NC7WZ04,315", "NC7WZ04"),
        ("TJA1050T/CM,118", "TJA1050T"),
        ("LM358DR", "LM358DR"),
    ])
    def test_strip(self, mpn, expected):
        assert strip_package_suffix(mpn) == expected

    def test_preserves_case_and_trims(self):
        assert strip_package_suffix("  max3483eesa+ ") == "max3483eesa"

    def test_leading_separator_is_kept(self):
        assert strip_package_suffix("+5V") == "+5V"

    def test_empty(self):
        assert strip_package_suffix(None) == ""
        assert strip_package_suffix("") == ""


class TestPackageSuffix:
    def test_returns_suffix(self):
        assert package_suffix("MAX3483EESA+") == "+"
        assert package_suffix("LTC2053HMS8#PBF") == "#PBF"
        assert package_suffix("TJA1050T/CM,118") == "/CM,118"

    def test_no_suffix(self):
        assert package_suffix("LM358DR") is None
        assert package_suffix(None) is None


class TestSearchVariations:
    def test_original_then_stripped(self):
        assert search_variations("MAX3483EESA+") == ["MAX3483EESA+", "MAX3483EESA"]

    def test_no_duplicates(self):
        assert search_variations("LM358DR") == ["LM358DR"]

    def test_blank(self):
        assert search_variations("  ") == []
        assert search_variations(None) == []


class TestIsEquivalentMpn:
    def test_suffix_and_case_ignored(self):
        assert is_equivalent_mpn("MAX3483EESA+", "max3483eesa")
        assert is_equivalent_mpn("LTC2053HMS8#PBF", "LTC2053HMS8#TR")

    def test_different_parts(self):
        assert not is_equivalent_mpn("LM358", "LM324")

    def test_empty_is_never_equivalent(self):
        assert not is_equivalent_mpn("", "")
        assert not is_equivalent_mpn(None, "LM358")


class TestCandidateTokens:
    def test_label_prefix_removed(self):
        assert candidate_tokens("P/N: LM358N qty 4") == ["LM358N", "QTY", "4"]
        assert candidate_tokens("MPN: stm32f103c8t6") == ["STM32F103C8T6"]

    def test_part_number_not_mistaken_for_label(self):
        assert candidate_tokens("PN2222A") == ["PN2222A"]

    def test_punctuation_trimmed(self):
        assert candidate_tokens("use (IRF540N); or LM317T.") == ["USE", "IRF540N", "OR", "LM317T"]

    def test_empty(self):
        assert candidate_tokens("") == []
        assert candidate_tokens(None) == []
