"""Rule providers for passive component manufacturers.

The ordering codes of chip resistors and MLCCs encode size, value, tolerance,
dielectric and voltage, so these providers decode attributes straight from the
part number: RC0805FR-0710KL is a 10kΩ ±1% 0805 thick-film resistor.
"""

import re
from typing import Any

from ..component_types import ComponentType as T
from ..mpn import normalize_mpn, strip_package_suffix
from ..parsers import parse_resistance
from .base import RuleProvider, rules


# =============================================================================
# SHARED CODE TABLES
# =============================================================================

# Tolerance letters used by resistor and capacitor ordering codes (percent)
TOLERANCE_CODES: dict[str, float] = {
    "B": 0.1, "C": 0.25, "D": 0.5, "F": 1.0, "G": 2.0, "J": 5.0, "K": 10.0, "M": 20.0, "Z": 80.0,
}

# Two-digit case codes (Murata, Samsung) to EIA imperial size
CASE_CODES: dict[str, str] = {
    "03": "0201", "05": "0402", "15": "0402", "10": "0603", "18": "0603", "21": "0805",
    "31": "1206", "32": "1210", "42": "1808", "43": "1812", "55": "2220",
}

_VALUE_CODE_PATTERN = re.compile(r"^(\d{2,3})(\d)$")


def decode_value_code(code: str) -> float | None:
    """Decode a significant-digits-plus-multiplier value code.

    '103' -> 10000, '1002' -> 10000, '4R7' -> 4.7, 'R10' -> 0.1. The unit is
    whatever the vendor counts in (ohms for resistors, pF for capacitors).
    """
    if not code:
        return None
    code = code.upper()
    if "R" in code:
        try:
            return float(code.replace("R", "."))
        except ValueError:
            return None
    match = _VALUE_CODE_PATTERN.match(code)
    if not match:
        return None
    return float(match.group(1)) * 10 ** int(match.group(2))


def _tolerance_text(letter: str) -> str | None:
    value = TOLERANCE_CODES.get(letter.upper())
    return f"±{value:g}%" if value is not None else None


def _clean(mpn: str) -> str:
    return normalize_mpn(strip_package_suffix(mpn))


# =============================================================================
# YAGEO
# =============================================================================

_YAGEO_RESISTOR_PATTERN = re.compile(r"^(RC|RT|RL)(\d{4})([A-Z])([A-Z])-(\d{2})([0-9RKM]+?)L?$")
_YAGEO_CAPACITOR_PATTERN = re.compile(r"^CC(\d{4})([A-Z])([A-Z])(NPO|X7R|X5R|Y5V|X7S|C0G)(\d)BB(\d{3}|\dR\d)$")

_YAGEO_COMPOSITION = {"RC": "thick film", "RT": "thin film", "RL": "thick film"}
_YAGEO_VOLTAGE_CODES = {"5": "6.3V", "6": "10V", "7": "16V", "8": "25V", "9": "50V", "0": "100V"}


class YageoProvider(RuleProvider):
    owner_id = "yageo"
    name = "Yageo"
    RULES = (
        rules(r"RC[0-9]{4}.*", T.RESISTOR, T.RESISTOR_CHIP, T.RESISTOR_CHIP_YAGEO),
        rules(r"RT[0-9]{4}.*", T.RESISTOR, T.RESISTOR_CHIP, T.RESISTOR_CHIP_YAGEO),
        rules(r"RL[0-9]{4}.*", T.RESISTOR, T.RESISTOR_CHIP, T.RESISTOR_CHIP_YAGEO),
        rules(r"(?:CFR|MFR)-?[0-9]{2}.*", T.RESISTOR, T.RESISTOR_THROUGH_HOLE, T.RESISTOR_THROUGH_HOLE_YAGEO),
        rules(r"CC[0-9]{4}.*", T.CAPACITOR, T.CAPACITOR_CERAMIC, T.CAPACITOR_CERAMIC_YAGEO),
    )

    def extract_package_code(self, mpn: str) -> str:
        text = _clean(mpn)
        if re.match(r"^(?:RC|RT|RL|CC)[0-9]{4}", text):
            return text[2:6]
        return ""

    def extract_series(self, mpn: str) -> str:
        text = _clean(mpn)
        for prefix in ("RC", "RT", "RL", "CC"):
            if text.startswith(prefix):
                return prefix + self.extract_package_code(text)
        return ""

    def extract_attributes(self, mpn: str, component_type: T) -> dict[str, Any]:
        attributes = super().extract_attributes(mpn, component_type)
        text = _clean(mpn)
        match = _YAGEO_RESISTOR_PATTERN.match(text)
        if match:
            prefix, size, tolerance, _packing, _reel, value = match.groups()
            attributes["package"] = size
            attributes["composition"] = _YAGEO_COMPOSITION[prefix]
            tolerance_text = _tolerance_text(tolerance)
            if tolerance_text:
                attributes["tolerance"] = tolerance_text
            resistance = parse_resistance(value)
            if resistance is not None:
                attributes["resistance"] = resistance
            return attributes
        match = _YAGEO_CAPACITOR_PATTERN.match(text)
        if match:
            size, tolerance, _packing, dielectric, voltage, value = match.groups()
            attributes["package"] = size
            attributes["dielectric"] = "C0G" if dielectric == "NPO" else dielectric
            tolerance_text = _tolerance_text(tolerance)
            if tolerance_text:
                attributes["tolerance"] = tolerance_text
            if voltage in _YAGEO_VOLTAGE_CODES:
                attributes["voltage"] = _YAGEO_VOLTAGE_CODES[voltage]
            picofarads = decode_value_code(value)
            if picofarads is not None:
                attributes["capacitance"] = picofarads * 1e-12
        return attributes

    def is_official_replacement(self, mpn_a: str, mpn_b: str) -> bool:
        """Same series and size; for RC resistors also the same tolerance class."""
        if not super().is_official_replacement(mpn_a, mpn_b):
            return False
        match_a = _YAGEO_RESISTOR_PATTERN.match(_clean(mpn_a))
        match_b = _YAGEO_RESISTOR_PATTERN.match(_clean(mpn_b))
        if match_a and match_b:
            return match_a.group(3) == match_b.group(3)
        return True


# =============================================================================
# VISHAY
# =============================================================================

_VISHAY_CRCW_PATTERN = re.compile(r"^CRCW(\d{4})(\d+[RKM]\d*)([BCDFGJ])([A-Z])([A-Z0-9]*)$")
_VISHAY_TCR_CODES = {"E": "±25ppm/K", "C": "±50ppm/K", "K": "±100ppm/K", "N": "±200ppm/K"}

# 1N400x rectifiers: reverse voltage by last digit
_RECTIFIER_VOLTAGES = {"1": 50, "2": 100, "3": 200, "4": 400, "5": 600, "6": 800, "7": 1000}
_RECTIFIER_PATTERN = re.compile(r"^1N400([1-7])")


class VishayProvider(RuleProvider):
    owner_id = "vishay"
    name = "Vishay"
    RULES = (
        rules(r"CRCW[0-9]{4}.*", T.RESISTOR, T.RESISTOR_CHIP, T.RESISTOR_CHIP_VISHAY),
        rules(r"1N400[1-7].*", T.DIODE, T.DIODE_RECTIFIER, T.DIODE_VISHAY),
        rules(r"1N4148.*", T.DIODE, T.DIODE_VISHAY),
        rules(r"(?:BZX55|BZX85|BZT52)[A-Z]?[0-9].*", T.DIODE, T.DIODE_ZENER, T.DIODE_VISHAY),
        rules(r"(?:SS[0-9]{2}|SB[0-9]{3}|BAT4[2-9]).*", T.DIODE, T.DIODE_SCHOTTKY, T.DIODE_VISHAY),
        rules(r"SI[0-9]{4}[A-Z]*.*", T.MOSFET, T.MOSFET_VISHAY),
        rules(r"(?:TLH[RGYBW]|TLW[A-Z]|VLM[A-Z]|VLH[A-Z])[0-9].*", T.LED, T.LED_VISHAY),
    )

    def extract_package_code(self, mpn: str) -> str:
        text = _clean(mpn)
        if text.startswith("CRCW"):
            return text[4:8]
        if re.match(r"^1N400[1-7]", text):
            return "DO-41"
        if text.startswith("1N4148"):
            return "DO-35"
        return super().extract_package_code(mpn)

    def extract_series(self, mpn: str) -> str:
        text = _clean(mpn)
        if text.startswith("CRCW"):
            return "CRCW" + text[4:8]
        return super().extract_series(mpn)

    def extract_attributes(self, mpn: str, component_type: T) -> dict[str, Any]:
        attributes = super().extract_attributes(mpn, component_type)
        text = _clean(mpn)
        match = _VISHAY_CRCW_PATTERN.match(text)
        if match:
            size, value, tolerance, tcr, _packing = match.groups()
            attributes["package"] = size
            attributes["composition"] = "thick film"
            resistance = parse_resistance(value)
            if resistance is not None:
                attributes["resistance"] = resistance
            tolerance_text = _tolerance_text(tolerance)
            if tolerance_text:
                attributes["tolerance"] = tolerance_text
            if tcr in _VISHAY_TCR_CODES:
                attributes["temperature_coefficient"] = _VISHAY_TCR_CODES[tcr]
            return attributes
        match = _RECTIFIER_PATTERN.match(text)
        if match:
            attributes.update({
                "type": "rectifier",
                "voltage_rating": _RECTIFIER_VOLTAGES[match.group(1)],
                "current_rating": 1.0,
            })
        elif text.startswith("1N4148"):
            attributes.update({"type": "switching", "voltage_rating": 100, "current_rating": 0.3})
        return attributes


# =============================================================================
# MURATA
# =============================================================================

_MURATA_MLCC_PATTERN = re.compile(r"^(GRM|GCM|GRT|GJM)(\d{2})(\d)([0-9A-Z]{2})([0-9][A-Z])(\d{3}|\d?R\d+)([A-Z])")
_MURATA_INDUCTOR_PATTERN = re.compile(r"^LQ([GWMH])(\d{2})[A-Z]{2}(\d+N\d*|\d*R\d+|\d{3})([A-Z])")

_MURATA_DIELECTRICS = {"R7": "X7R", "R6": "X5R", "5C": "C0G", "C7": "X7S", "C8": "X6S", "D7": "X7T", "F5": "Y5V"}
_MURATA_VOLTAGES = {
    "0E": "2.5V", "0G": "4V", "0J": "6.3V", "1A": "10V", "1C": "16V", "1E": "25V",
    "YA": "35V", "1V": "35V", "1H": "50V", "2A": "100V", "2D": "200V", "2E": "250V",
}


class MurataProvider(RuleProvider):
    owner_id = "murata"
    name = "Murata"
    RULES = (
        rules(r"(?:GRM|GCM|GRT|GJM)[0-9]{2}.*", T.CAPACITOR, T.CAPACITOR_CERAMIC, T.CAPACITOR_CERAMIC_MURATA),
        rules(r"LQ[GWMH][0-9]{2}.*", T.INDUCTOR, T.INDUCTOR_MURATA),
        rules(r"BLM[0-9]{2}.*", T.INDUCTOR, T.INDUCTOR_MURATA),
    )

    def extract_package_code(self, mpn: str) -> str:
        text = _clean(mpn)
        match = re.match(r"^(?:GRM|GCM|GRT|GJM|LQ[GWMH]|BLM)(\d{2})", text)
        if match:
            return CASE_CODES.get(match.group(1), "")
        return ""

    def extract_series(self, mpn: str) -> str:
        text = _clean(mpn)
        match = re.match(r"^((?:GRM|GCM|GRT|GJM|LQ[GWMH]|BLM)\d{2})", text)
        return match.group(1) if match else ""

    def extract_attributes(self, mpn: str, component_type: T) -> dict[str, Any]:
        attributes = super().extract_attributes(mpn, component_type)
        text = _clean(mpn)
        match = _MURATA_MLCC_PATTERN.match(text)
        if match:
            _series, _size, _height, dielectric, voltage, value, tolerance = match.groups()
            if dielectric in _MURATA_DIELECTRICS:
                attributes["dielectric"] = _MURATA_DIELECTRICS[dielectric]
            if voltage in _MURATA_VOLTAGES:
                attributes["voltage"] = _MURATA_VOLTAGES[voltage]
            picofarads = decode_value_code(value)
            if picofarads is not None:
                attributes["capacitance"] = picofarads * 1e-12
            tolerance_text = _tolerance_text(tolerance)
            if tolerance_text:
                attributes["tolerance"] = tolerance_text
            return attributes
        match = _MURATA_INDUCTOR_PATTERN.match(text)
        if match:
            _family, _size, value, tolerance = match.groups()
            if "N" in value:
                attributes["inductance"] = float(value.replace("N", ".").rstrip(".")) * 1e-9
            else:
                microhenries = decode_value_code(value)
                if microhenries is not None:
                    attributes["inductance"] = microhenries * 1e-6
            tolerance_text = _tolerance_text(tolerance)
            if tolerance_text:
                attributes["tolerance"] = tolerance_text
        return attributes


# =============================================================================
# SAMSUNG ELECTRO-MECHANICS
# =============================================================================

_SAMSUNG_MLCC_PATTERN = re.compile(r"^CL(\d{2})([A-Z])(\d{3}|\dR\d)([A-Z])([A-Z])")
_SAMSUNG_DIELECTRICS = {"A": "X5R", "B": "X7R", "C": "C0G", "F": "Y5V", "X": "X6S", "Y": "X7S"}
_SAMSUNG_VOLTAGES = {
    "R": "4V", "Q": "6.3V", "P": "10V", "O": "16V", "A": "25V", "L": "35V", "B": "50V", "C": "100V", "D": "200V",
}


class SamsungProvider(RuleProvider):
    owner_id = "samsung"
    name = "Samsung Electro-Mechanics"
    RULES = (
        rules(r"CL[0-9]{2}[A-Z].*", T.CAPACITOR, T.CAPACITOR_CERAMIC, T.CAPACITOR_CERAMIC_SAMSUNG),
        rules(r"(?:CIS|CIG|CIH|CIM|CBM)[0-9].*", T.INDUCTOR, T.INDUCTOR_SAMSUNG),
    )

    def extract_package_code(self, mpn: str) -> str:
        match = re.match(r"^(?:CL|CI[SGHM]|CBM)(\d{2})", _clean(mpn))
        return CASE_CODES.get(match.group(1), "") if match else ""

    def extract_series(self, mpn: str) -> str:
        match = re.match(r"^((?:CL|CI[SGHM]|CBM)\d{2})", _clean(mpn))
        return match.group(1) if match else ""

    def extract_attributes(self, mpn: str, component_type: T) -> dict[str, Any]:
        attributes = super().extract_attributes(mpn, component_type)
        match = _SAMSUNG_MLCC_PATTERN.match(_clean(mpn))
        if match:
            _size, dielectric, value, tolerance, voltage = match.groups()
            if dielectric in _SAMSUNG_DIELECTRICS:
                attributes["dielectric"] = _SAMSUNG_DIELECTRICS[dielectric]
            picofarads = decode_value_code(value)
            if picofarads is not None:
                attributes["capacitance"] = picofarads * 1e-12
            tolerance_text = _tolerance_text(tolerance)
            if tolerance_text:
                attributes["tolerance"] = tolerance_text
            if voltage in _SAMSUNG_VOLTAGES:
                attributes["voltage"] = _SAMSUNG_VOLTAGES[voltage]
        return attributes


# =============================================================================
# PANASONIC
# =============================================================================

_PANASONIC_ERJ_PATTERN = re.compile(r"^ERJ-?(1T|14|12|2|3|6|8)([A-Z]{2,3}?)([DFGJ])(\d{3,4}|\d+R\d+)[A-Z]?$")
_PANASONIC_ERJ_SIZES = {"2": "0402", "3": "0603", "6": "0805", "8": "1206", "14": "1210", "12": "1812", "1T": "2512"}


class PanasonicProvider(RuleProvider):
    owner_id = "panasonic"
    name = "Panasonic"
    RULES = (
        rules(r"ERJ-?[0-9A-Z]{1,2}.*", T.RESISTOR, T.RESISTOR_CHIP, T.RESISTOR_CHIP_PANASONIC),
        rules(r"EE[EUV]-?[A-Z0-9]{2}.*", T.CAPACITOR, T.CAPACITOR_ELECTROLYTIC, T.CAPACITOR_ELECTROLYTIC_PANASONIC),
    )

    def extract_package_code(self, mpn: str) -> str:
        match = _PANASONIC_ERJ_PATTERN.match(_clean(mpn))
        return _PANASONIC_ERJ_SIZES[match.group(1)] if match else ""

    def extract_series(self, mpn: str) -> str:
        match = _PANASONIC_ERJ_PATTERN.match(_clean(mpn))
        if match:
            return f"ERJ-{match.group(1)}{match.group(2)}"
        return super().extract_series(mpn)

    def extract_attributes(self, mpn: str, component_type: T) -> dict[str, Any]:
        attributes = super().extract_attributes(mpn, component_type)
        match = _PANASONIC_ERJ_PATTERN.match(_clean(mpn))
        if match:
            _size, _series, tolerance, value = match.groups()
            attributes["composition"] = "thick film"
            tolerance_text = _tolerance_text(tolerance)
            if tolerance_text:
                attributes["tolerance"] = tolerance_text
            ohms = decode_value_code(value)
            if ohms is not None:
                attributes["resistance"] = ohms
        return attributes
