"""Value parsers for component attributes.

Attribute values arrive as display strings ("10kΩ", "±5%", "60V", "4k7") or
already-numeric values. Parsers return floats in base SI units, or None if the
value is unparseable:
- Voltage: volts (V)
- Current: amps (A)
- Resistance: ohms (Ω)
- Capacitance: farads (F)
- Inductance: henries (H)
- Frequency: hertz (Hz)
- Power: watts (W)
- Memory: bytes
"""

import re
from typing import Any, Callable


# =============================================================================
# PRE-COMPILED REGEX PATTERNS
# =============================================================================

_VOLTAGE_KV_PATTERN = re.compile(r"([\d.]+)\s*kV", re.IGNORECASE)
_VOLTAGE_MV_PATTERN = re.compile(r"([\d.]+)\s*mV")
_VOLTAGE_PATTERN = re.compile(r"([\d.]+)\s*V", re.IGNORECASE)
_TOLERANCE_PATTERN = re.compile(r"([\d.]+)\s*%")
_PPM_PATTERN = re.compile(r"[±]?([\d.]+)\s*ppm", re.IGNORECASE)
_POWER_FRACTION_PATTERN = re.compile(r"(\d+)/(\d+)\s*W", re.IGNORECASE)
_POWER_MW_PATTERN = re.compile(r"([\d.]+)\s*mW", re.IGNORECASE)
_POWER_W_PATTERN = re.compile(r"([\d.]+)\s*W", re.IGNORECASE)
_CURRENT_UA_PATTERN = re.compile(r"([\d.]+)\s*[uµ]A", re.IGNORECASE)
_CURRENT_MA_PATTERN = re.compile(r"([\d.]+)\s*mA", re.IGNORECASE)
_CURRENT_A_PATTERN = re.compile(r"([\d.]+)\s*A", re.IGNORECASE)
_RESISTANCE_PATTERN = re.compile(r"([\d.]+)\s*([kKmM])?")
# European notation: 4k7 = 4.7k, 4R7 = 4.7Ω, 1M5 = 1.5M (suffix replaces decimal point)
_RESISTANCE_EURO_PATTERN = re.compile(r"(\d+)([kKrR])(\d+)|(\d+)(M)(\d+)", re.IGNORECASE)
_CAPACITANCE_PATTERN = re.compile(r"([\d.]+)\s*([pnuµm])?", re.IGNORECASE)
_INDUCTANCE_PATTERN = re.compile(r"([\d.]+)\s*([nuµm])?", re.IGNORECASE)
_FREQUENCY_PATTERN = re.compile(r"([\d.]+)\s*([kKmMgG])?")
_MEMORY_BIT_PATTERN = re.compile(r"([\d.]+)\s*([KMG])?BIT", re.IGNORECASE)
_MEMORY_BYTE_PATTERN = re.compile(r"([\d.]+)\s*([KMG])?B", re.IGNORECASE)
_WAVELENGTH_PATTERN = re.compile(r"([\d.]+)\s*nm", re.IGNORECASE)
_LUMINOSITY_PATTERN = re.compile(r"([\d.]+)\s*mcd", re.IGNORECASE)
_LENGTH_MM_PATTERN = re.compile(r"([\d.]+)\s*mm", re.IGNORECASE)
_ANGLE_PATTERN = re.compile(r"([\d.]+)\s*(?:°|DEG)", re.IGNORECASE)
_INTEGER_PATTERN = re.compile(r"(\d+)")
_RANGE_PATTERN = re.compile(r"([+-]?[\d.]+)\s*([a-zA-Zµ%Ω°]*)\s*(?:~|to|\.\.|…)\s*[+]?([+-]?[\d.]+)", re.IGNORECASE)
# Generic "<number><SI prefix><unit>" value: "100nF", "1.5 MHz", "-40"
_SI_VALUE_PATTERN = re.compile(r"^\s*[±+]?\s*(-?\d+(?:\.\d+)?|-?\.\d+)\s*([pnuµmkKMG])?")

_SI_PREFIXES = {
    "p": 1e-12,
    "n": 1e-9,
    "u": 1e-6,
    "µ": 1e-6,
    "m": 1e-3,
    "k": 1e3,
    "K": 1e3,
    "M": 1e6,
    "G": 1e9,
}


# =============================================================================
# ATTRIBUTE PARSERS
# =============================================================================
# Each parser returns a float in base units for comparison, or None if unparseable.


def parse_voltage(s: str) -> float | None:
    """Parse voltage: '25V' -> 25, '6.3V' -> 6.3, '5kV' -> 5000, '550mV' -> 0.55"""
    if not s:
        return None
    match = _VOLTAGE_KV_PATTERN.search(s)
    if match:
        return float(match.group(1)) * 1000
    match = _VOLTAGE_MV_PATTERN.search(s)
    if match:
        return float(match.group(1)) / 1000
    match = _VOLTAGE_PATTERN.search(s)
    return float(match.group(1)) if match else None


def parse_tolerance(s: str) -> float | None:
    """Parse tolerance: '±1%' -> 1, '±10%' -> 10, '1%' -> 1"""
    if not s:
        return None
    match = _TOLERANCE_PATTERN.search(s)
    return float(match.group(1)) if match else None


def parse_ppm(s: str) -> float | None:
    """Parse temperature coefficient or stability in ppm: '±100ppm/°C' -> 100"""
    if not s:
        return None
    match = _PPM_PATTERN.search(s)
    return float(match.group(1)) if match else None


def parse_power(s: str) -> float | None:
    """Parse power in watts: '100mW' -> 0.1, '1/4W' -> 0.25, '0.25W' -> 0.25"""
    if not s:
        return None
    match = _POWER_FRACTION_PATTERN.search(s)
    if match:
        return float(match.group(1)) / float(match.group(2))
    match = _POWER_MW_PATTERN.search(s)
    if match:
        return float(match.group(1)) / 1000
    match = _POWER_W_PATTERN.search(s)
    if match:
        return float(match.group(1))
    return None


def parse_current(s: str) -> float | None:
    """Parse current in amps: '2A' -> 2, '500mA' -> 0.5, '100uA' -> 0.0001"""
    if not s:
        return None
    match = _CURRENT_UA_PATTERN.search(s)
    if match:
        return float(match.group(1)) / 1_000_000
    match = _CURRENT_MA_PATTERN.search(s)
    if match:
        return float(match.group(1)) / 1000
    match = _CURRENT_A_PATTERN.search(s)
    if match:
        return float(match.group(1))
    return None


def parse_resistance(s: str) -> float | None:
    """Parse resistance in ohms: '10kΩ' -> 10000, '17mΩ' -> 0.017, '4.7MΩ' -> 4700000

    Also supports European notation where suffix replaces decimal point:
    - '4k7' -> 4700 (4.7kΩ)
    - '4R7' -> 4.7 (4.7Ω)
    - '1M5' -> 1500000 (1.5MΩ)
    - '0R' -> 0 (0Ω jumper)
    """
    if not s:
        return None

    # mΩ (milli) vs MΩ (mega) has to be decided before the symbol is removed
    is_milliohm = "mΩ" in s or "mohm" in s.lower()
    s_clean = s.replace("Ω", "").replace("ohm", "").replace("OHM", "").strip()

    if not is_milliohm:
        euro_match = _RESISTANCE_EURO_PATTERN.search(s_clean)
        if euro_match:
            if euro_match.group(1) is not None:
                int_part, suffix, frac_part = euro_match.group(1), euro_match.group(2).upper(), euro_match.group(3)
            else:
                int_part, suffix, frac_part = euro_match.group(4), euro_match.group(5).upper(), euro_match.group(6)
            value = float(f"{int_part}.{frac_part}")
            if suffix == "K":
                return value * 1000
            elif suffix == "M":
                return value * 1_000_000
            return value

    if s_clean.upper() in ("0R", "0"):
        return 0.0

    match = _RESISTANCE_PATTERN.search(s_clean)
    if not match:
        return None
    value = float(match.group(1))

    if is_milliohm:
        return value / 1000

    suffix = (match.group(2) or "").upper()
    if suffix == "K":
        return value * 1000
    elif suffix == "M":
        return value * 1_000_000
    return value


def parse_capacitance(s: str) -> float | None:
    """Parse capacitance in farads: '100nF' -> 1e-7, '10uF' -> 1e-5, '1pF' -> 1e-12"""
    if not s:
        return None
    s = s.replace("F", "").strip()
    match = _CAPACITANCE_PATTERN.search(s)
    if not match:
        return None
    value = float(match.group(1))
    suffix = (match.group(2) or "").lower()
    if suffix == "p":
        return value * 1e-12
    elif suffix == "n":
        return value * 1e-9
    elif suffix in ("u", "µ"):
        return value * 1e-6
    elif suffix == "m":
        return value * 1e-3
    return value


def parse_inductance(s: str) -> float | None:
    """Parse inductance in henries: '10uH' -> 1e-5, '100nH' -> 1e-7, '1mH' -> 1e-3"""
    if not s:
        return None
    s = s.replace("H", "").strip()
    match = _INDUCTANCE_PATTERN.search(s)
    if not match:
        return None
    value = float(match.group(1))
    suffix = (match.group(2) or "").lower()
    if suffix == "n":
        return value * 1e-9
    elif suffix in ("u", "µ"):
        return value * 1e-6
    elif suffix == "m":
        return value * 1e-3
    return value


def parse_frequency(s: str) -> float | None:
    """Parse frequency in Hz: '8MHz' -> 8e6, '32.768kHz' -> 32768"""
    if not s:
        return None
    s = s.replace("Hz", "").replace("HZ", "").strip()
    match = _FREQUENCY_PATTERN.search(s)
    if not match:
        return None
    value = float(match.group(1))
    suffix = (match.group(2) or "").upper()
    if suffix == "K":
        return value * 1e3
    elif suffix == "M":
        return value * 1e6
    elif suffix == "G":
        return value * 1e9
    return value


def parse_memory_size(s: str) -> float | None:
    """Parse memory size in bytes: '128KB' -> 131072, '2MB' -> 2097152, '128Mbit' -> 16777216"""
    if not s:
        return None
    s_upper = s.upper()
    multipliers = {"": 1, "K": 1024, "M": 1024 * 1024, "G": 1024 * 1024 * 1024}

    match = _MEMORY_BIT_PATTERN.search(s_upper)
    if match:
        return float(match.group(1)) * multipliers[match.group(2) or ""] / 8

    match = _MEMORY_BYTE_PATTERN.search(s_upper)
    if match:
        return float(match.group(1)) * multipliers[match.group(2) or ""]

    return None


def parse_wavelength(s: str) -> float | None:
    """Parse wavelength in nm: '525nm' -> 525"""
    if not s:
        return None
    match = _WAVELENGTH_PATTERN.search(s)
    return float(match.group(1)) if match else None


def parse_luminosity(s: str) -> float | None:
    """Parse luminous intensity in mcd: '1200mcd' -> 1200"""
    if not s:
        return None
    match = _LUMINOSITY_PATTERN.search(s)
    return float(match.group(1)) if match else None


def parse_length_mm(s: str) -> float | None:
    """Parse length in mm: '2.54mm' -> 2.54"""
    if not s:
        return None
    match = _LENGTH_MM_PATTERN.search(s)
    return float(match.group(1)) if match else None


def parse_angle(s: str) -> float | None:
    """Parse viewing angle in degrees: '120°' -> 120"""
    if not s:
        return None
    match = _ANGLE_PATTERN.search(s)
    if match:
        return float(match.group(1))
    return parse_integer(s)


def parse_integer(s: str) -> int | None:
    """Parse integer: '8' -> 8, '16bit' -> 16, '40 pins' -> 40"""
    if not s:
        return None
    match = _INTEGER_PATTERN.search(s)
    return int(match.group(1)) if match else None


def parse_value(s: str) -> float | None:
    """Parse a generic '<number><SI prefix><unit>' value: '100nF' -> 1e-7, '1.5MHz' -> 1.5e6.

    European resistor notation ('4k7') is honored. The unit itself is ignored.
    """
    if not s:
        return None
    euro_match = _RESISTANCE_EURO_PATTERN.fullmatch(s.strip().replace("Ω", ""))
    if euro_match:
        return parse_resistance(s)
    match = _SI_VALUE_PATTERN.search(s)
    if not match:
        return None
    return float(match.group(1)) * _SI_PREFIXES.get(match.group(2) or "", 1.0)


def parse_range(s: str, parser: Callable[[str], float | None] = parse_value) -> tuple[float, float] | None:
    """Parse a range: '1.5V~2.5V' -> (1.5, 2.5), '-40 to 85' -> (-40, 85), '2V' -> (2, 2)

    Bounds are returned low-first. The unit of the upper bound applies to the
    lower bound when the lower bound has none ('2~4.5V').
    """
    if not s:
        return None
    match = _RANGE_PATTERN.search(s)
    if match:
        low_unit = match.group(2)
        upper_text = s[match.start(3):]
        low = parser(match.group(1) + (low_unit or _unit_suffix(upper_text)))
        high = parser(upper_text)
        if low is not None and high is not None:
            return (min(low, high), max(low, high))
    single = parser(s)
    if single is None:
        return None
    return (single, single)


def _unit_suffix(text: str) -> str:
    match = re.match(r"\s*[+-]?[\d.]+\s*(\S*)", text)
    return match.group(1) if match else ""


# =============================================================================
# ATTRIBUTE_PARSERS REGISTRY
# =============================================================================
# Maps attribute names to the parser used to turn display strings into numbers.
# Attributes not listed here fall back to parse_value.

ATTRIBUTE_PARSERS: dict[str, Callable[[str], Any]] = {
    "resistance": parse_resistance,
    "rds_on": parse_resistance,
    "dc_resistance": parse_resistance,
    "esr": parse_resistance,
    "tolerance": parse_tolerance,
    "power_rating": parse_power,
    "temperature_coefficient": parse_ppm,
    "capacitance": parse_capacitance,
    "inductance": parse_inductance,
    "voltage": parse_voltage,
    "voltage_rating": parse_voltage,
    "output_voltage": parse_voltage,
    "dropout_voltage": parse_voltage,
    "forward_voltage": parse_voltage,
    "input_offset": parse_voltage,
    "current_rating": parse_current,
    "output_current": parse_current,
    "saturation_current": parse_current,
    "quiescent_current": parse_current,
    "frequency": parse_frequency,
    "gbw": parse_frequency,
    "flash_size": parse_memory_size,
    "ram_size": parse_memory_size,
    "capacity": parse_memory_size,
    "wavelength": parse_wavelength,
    "brightness": parse_luminosity,
    "viewing_angle": parse_angle,
    "pitch": parse_length_mm,
    "pin_count": parse_integer,
    "io_count": parse_integer,
}

# Attributes compared as text, never as numbers ("X7R", "0805", "N")
TEXT_ATTRIBUTES = frozenset({
    "package",
    "composition",
    "dielectric",
    "temperature_characteristic",
    "channel",
    "polarity",
    "type",
    "configuration",
    "input_type",
    "family",
    "series",
    "interface",
    "color",
    "gender",
    "mounting_type",
    "output_type",
})


def to_number(value: Any, attribute: str | None = None) -> float | None:
    """Convert an attribute value to a float using the attribute's parser.

    Numbers pass through unchanged; booleans and unparseable text give None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return None
    if attribute in TEXT_ATTRIBUTES:
        return None
    parser = ATTRIBUTE_PARSERS.get(attribute or "", parse_value)
    parsed = parser(value)
    if parsed is None and parser is not parse_value:
        parsed = parse_value(value)
    return float(parsed) if parsed is not None else None
