"""Documented manufacturer cross-references and known part characteristics.

EQUIVALENT_GROUPS lists parts that manufacturers document as drop-in
replacements for each other. KNOWN_PARTS holds datasheet attributes for common
parts whose MPN does not encode them.
"""

from typing import Any

from .mpn import normalize_mpn, strip_package_suffix


# =============================================================================
# EQUIVALENT GROUPS
# =============================================================================

EQUIVALENT_GROUPS: tuple[frozenset[str], ...] = (
    # NPN small-signal
    frozenset({"2N2222", "2N2222A", "PN2222", "PN2222A"}),
    frozenset({"2N3904", "PN3904", "MMBT3904"}),
    frozenset({"2N4401", "PN4401", "MMBT4401"}),
    frozenset({"BC547", "BC547B", "BC548", "BC337"}),
    frozenset({"BC337", "BC337-40"}),
    # PNP small-signal
    frozenset({"2N2907", "2N2907A", "PN2907", "PN2907A"}),
    frozenset({"2N3906", "PN3906", "MMBT3906"}),
    frozenset({"2N4403", "PN4403"}),
    frozenset({"BC557", "BC557B", "BC558", "BC327"}),
    frozenset({"BC327", "BC327-40"}),
    # Power MOSFETs
    frozenset({"IRF530", "IRF530N", "STF530", "STF530N", "FQP30N06"}),
    frozenset({"IRF540", "IRF540N", "STF540", "STF540N", "FQP50N06"}),
    frozenset({"IRF640", "IRF640N", "STF640", "STF640N", "FQP44N10"}),
    # Op-amps
    frozenset({"LM358", "MC1458", "LM1458", "RC4558"}),
    frozenset({"TL072", "TL082"}),
    frozenset({"LM324", "MC3403", "RC4136"}),
    # Linear regulators
    frozenset({"LM7805", "MC7805", "L7805", "UA7805"}),
    frozenset({"LM7812", "MC7812", "L7812", "UA7812"}),
    frozenset({"LM317", "LM317T", "LM317K"}),
)

_GROUPS_BY_MPN: dict[str, tuple[frozenset[str], ...]] = {}
for _group in EQUIVALENT_GROUPS:
    for _member in _group:
        _GROUPS_BY_MPN[_member] = _GROUPS_BY_MPN.get(_member, ()) + (_group,)


def _base_key(mpn: str | None) -> str:
    return normalize_mpn(strip_package_suffix(mpn))


def equivalent_group(mpn: str | None) -> frozenset[str]:
    """All documented equivalents of `mpn`, including itself. Empty if none."""
    key = _lookup_key(_base_key(mpn), _GROUPS_BY_MPN)
    if key is None:
        return frozenset()
    return frozenset().union(*_GROUPS_BY_MPN[key])


def are_equivalent(mpn_a: str | None, mpn_b: str | None) -> bool:
    """True if both MPNs are listed together in one equivalent group."""
    key_a = _lookup_key(_base_key(mpn_a), _GROUPS_BY_MPN)
    key_b = _lookup_key(_base_key(mpn_b), _GROUPS_BY_MPN)
    if key_a is None or key_b is None:
        return False
    return any(key_b in group for group in _GROUPS_BY_MPN[key_a])


# =============================================================================
# KNOWN PART CHARACTERISTICS
# =============================================================================

KNOWN_PARTS: dict[str, dict[str, Any]] = {
    # Bipolar transistors
    "2N2222": {"polarity": "NPN", "voltage_rating": 40, "current_rating": 0.8, "package": "TO-18"},
    "PN2222": {"polarity": "NPN", "voltage_rating": 40, "current_rating": 0.8, "package": "TO-92"},
    "2N3904": {"polarity": "NPN", "voltage_rating": 40, "current_rating": 0.2, "package": "TO-92"},
    "MMBT3904": {"polarity": "NPN", "voltage_rating": 40, "current_rating": 0.2, "package": "SOT-23"},
    "2N4401": {"polarity": "NPN", "voltage_rating": 40, "current_rating": 0.6, "package": "TO-92"},
    "BC547": {"polarity": "NPN", "voltage_rating": 45, "current_rating": 0.1, "package": "TO-92"},
    "2N2907": {"polarity": "PNP", "voltage_rating": 40, "current_rating": 0.8, "package": "TO-18"},
    "PN2907": {"polarity": "PNP", "voltage_rating": 40, "current_rating": 0.8, "package": "TO-92"},
    "2N3906": {"polarity": "PNP", "voltage_rating": 40, "current_rating": 0.2, "package": "TO-92"},
    "MMBT3906": {"polarity": "PNP", "voltage_rating": 40, "current_rating": 0.2, "package": "SOT-23"},
    "BC557": {"polarity": "PNP", "voltage_rating": 45, "current_rating": 0.1, "package": "TO-92"},
    # MOSFETs (voltage V, current A, rds_on Ω)
    "IRF530": {"channel": "N", "voltage_rating": 100, "current_rating": 14, "rds_on": 0.16, "package": "TO-220"},
    "IRF530N": {"channel": "N", "voltage_rating": 100, "current_rating": 17, "rds_on": 0.11, "package": "TO-220"},
    "STF530": {"channel": "N", "voltage_rating": 100, "current_rating": 14, "rds_on": 0.16, "package": "TO-220"},
    "FQP30N06": {"channel": "N", "voltage_rating": 60, "current_rating": 30, "rds_on": 0.095, "package": "TO-220"},
    "IRF540": {"channel": "N", "voltage_rating": 100, "current_rating": 28, "rds_on": 0.077, "package": "TO-220"},
    "IRF540N": {"channel": "N", "voltage_rating": 100, "current_rating": 33, "rds_on": 0.052, "package": "TO-220"},
    "STF540": {"channel": "N", "voltage_rating": 100, "current_rating": 28, "rds_on": 0.077, "package": "TO-220"},
    "FQP50N06": {"channel": "N", "voltage_rating": 60, "current_rating": 50, "rds_on": 0.040, "package": "TO-220"},
    "IRF640": {"channel": "N", "voltage_rating": 200, "current_rating": 18, "rds_on": 0.150, "package": "TO-220"},
    "FQP44N10": {"channel": "N", "voltage_rating": 100, "current_rating": 44, "rds_on": 0.085, "package": "TO-220"},
    "IRF9540": {"channel": "P", "voltage_rating": 100, "current_rating": 19, "rds_on": 0.2, "package": "TO-220"},
    "IRF9540N": {"channel": "P", "voltage_rating": 100, "current_rating": 23, "rds_on": 0.117, "package": "TO-220"},
    "IRLML2502": {"channel": "N", "voltage_rating": 20, "current_rating": 4.2, "rds_on": 0.045, "package": "SOT-23"},
    "IRLML6402": {"channel": "P", "voltage_rating": 20, "current_rating": 3.7, "rds_on": 0.065, "package": "SOT-23"},
    "2N7000": {"channel": "N", "voltage_rating": 60, "current_rating": 0.2, "rds_on": 5.0, "package": "TO-92"},
    "BSS138": {"channel": "N", "voltage_rating": 50, "current_rating": 0.22, "rds_on": 3.5, "package": "SOT-23"},
    # Op-amps
    "LM358": {"configuration": "dual", "input_type": "bipolar"},
    "MC1458": {"configuration": "dual", "input_type": "bipolar"},
    "LM1458": {"configuration": "dual", "input_type": "bipolar"},
    "RC4558": {"configuration": "dual", "input_type": "bipolar"},
    "TL072": {"configuration": "dual", "input_type": "jfet"},
    "TL082": {"configuration": "dual", "input_type": "jfet"},
    "LM324": {"configuration": "quad", "input_type": "bipolar"},
    "MC3403": {"configuration": "quad", "input_type": "bipolar"},
    "RC4136": {"configuration": "quad", "input_type": "bipolar"},
    "NE5532": {"configuration": "dual", "input_type": "bipolar"},
}


def known_attributes(mpn: str | None) -> dict[str, Any]:
    """Datasheet attributes for a known part, matched on the longest known base MPN.

    'IRF540NPBF' -> IRF540N's attributes. A known key followed by a digit does
    not match ('IRF5400' is not an IRF540). Returns a new dict, empty if unknown.
    """
    key = _lookup_key(_base_key(mpn), KNOWN_PARTS)
    return dict(KNOWN_PARTS[key]) if key else {}


def _lookup_key(base: str, table: dict[str, Any]) -> str | None:
    if not base:
        return None
    if base in table:
        return base
    for length in range(len(base) - 1, 1, -1):
        prefix = base[:length]
        if prefix in table and not base[length].isdigit():
            return prefix
    return None
