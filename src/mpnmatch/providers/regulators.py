"""Attribute decoding shared by linear regulator part numbers of all vendors."""

import re
from typing import Any

_78XX_PATTERN = re.compile(r"^(?:LM|UA|MC|L|KA)(78|79)(?:M|L)?(\d{2})")
_ADJUSTABLE_PATTERN = re.compile(r"^(?:LM|LT)?(?:317|337|350|338)|-ADJ|ADJ$")
_1117_PATTERN = re.compile(r"^(?:LM|LD|AZ|AMS|NCP)1117[A-Z]*-?(\d\.\d|\d{2})")
_MCP17XX_PATTERN = re.compile(r"^MCP17(?:00|02|03|25|26|27)[A-Z]*-?(\d{2})")
_HYPHEN_VOLTAGE_PATTERN = re.compile(r"-(\d{1,2}\.\d)\b")

# Output current of common fixed-regulator families (A)
_78XX_CURRENTS = {"": 1.0, "M": 0.5, "L": 0.1}


def regulator_attributes(mpn: str) -> dict[str, Any]:
    """Output voltage, output type and current decoded from a regulator MPN.

    'LM7805CT' -> 5V fixed 1A, 'MC7912' -> -12V fixed, 'LM317T' -> adjustable,
    'LD1117-3.3' -> 3.3V fixed. Returns {} for unrecognized part numbers.
    """
    text = mpn.strip().upper()
    match = _78XX_PATTERN.match(text)
    if match:
        family, volts = match.groups()
        variant = text[match.start(2) - 1] if text[match.start(2) - 1] in "ML" else ""
        voltage = float(volts) if family == "78" else -float(volts)
        return {
            "output_voltage": voltage,
            "output_type": "fixed",
            "output_current": _78XX_CURRENTS[variant],
        }
    if _ADJUSTABLE_PATTERN.search(text):
        attributes: dict[str, Any] = {"output_type": "adjustable"}
        if "317" in text or "1117" in text:
            attributes["output_current"] = 1.5 if "317" in text else 0.8
        return attributes
    match = _1117_PATTERN.match(text)
    if match:
        code = match.group(1)
        voltage = float(code) if "." in code else float(code) / 10
        return {"output_voltage": voltage, "output_type": "fixed", "output_current": 0.8}
    match = _MCP17XX_PATTERN.match(text)
    if match:
        return {"output_voltage": float(match.group(1)) / 10, "output_type": "fixed"}
    match = _HYPHEN_VOLTAGE_PATTERN.search(text)
    if match:
        return {"output_voltage": float(match.group(1)), "output_type": "fixed"}
    return {}
