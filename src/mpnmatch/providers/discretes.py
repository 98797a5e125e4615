"""Rule providers for discrete semiconductor manufacturers."""

import re
from typing import Any

from ..component_types import ComponentType as T
from ..mpn import normalize_mpn, strip_package_suffix
from .base import RuleProvider, rules
from .regulators import regulator_attributes


def _clean(mpn: str) -> str:
    return normalize_mpn(strip_package_suffix(mpn))


_P_CHANNEL_PREFIXES = ("IRF9", "IRFR9", "IRLML64", "DMP", "ZXMP", "PMPB", "BSS84", "NTR41", "FQP27P")
_N_CHANNEL_PREFIXES = (
    "IRF", "IRL", "IP", "BSC", "BSZ", "FQP", "FQN", "FDS", "FDP", "FDN", "NTD", "NTP", "NTR",
    "DMN", "DMG", "DMT", "ZXMN", "PSMN", "PMV", "BSS138", "2N7000", "2N7002",
)
_ST_CHANNEL_PATTERN = re.compile(r"^ST[FPDBWNS][0-9]+([NP])")


def mosfet_channel(mpn: str) -> str | None:
    """Channel polarity from MOSFET naming conventions, or None if unknown.

    'IRF9540N' -> 'P', 'IRLML6402' -> 'P', 'IRF540N' -> 'N', 'STP55NF06' -> 'N'.
    """
    text = _clean(mpn)
    if text.startswith(_P_CHANNEL_PREFIXES):
        return "P"
    match = _ST_CHANNEL_PATTERN.match(text)
    if match:
        return match.group(1)
    if text.startswith(_N_CHANNEL_PREFIXES):
        return "N"
    return None


# =============================================================================
# INFINEON
# =============================================================================


class InfineonProvider(RuleProvider):
    owner_id = "infineon"
    name = "Infineon Technologies"
    RULES = (
        rules(r"IRF[0-9].*", T.MOSFET, T.MOSFET_INFINEON),
        rules(r"IRL[0-9ML].*", T.MOSFET, T.MOSFET_INFINEON),
        rules(r"IRF[PBZRSU][0-9].*", T.MOSFET, T.MOSFET_INFINEON),
        rules(r"IP[PBDWAIN][0-9]{3}N.*", T.MOSFET, T.MOSFET_INFINEON),
        rules(r"BS[CZ][0-9]{3}N.*", T.MOSFET, T.MOSFET_INFINEON),
        rules(r"IFX[0-9].*", T.VOLTAGE_REGULATOR, T.VOLTAGE_REGULATOR_INFINEON),
        rules(r"TL[ES][0-9]{4}.*", T.VOLTAGE_REGULATOR, T.VOLTAGE_REGULATOR_INFINEON),
        rules(r"XMC[0-9].*", T.MICROCONTROLLER, T.MICROCONTROLLER_INFINEON),
    )

    def extract_package_code(self, mpn: str) -> str:
        text = _clean(mpn)
        if text.startswith("IRLML"):
            return "SOT-23"
        match = re.match(r"^IRF([PBZRSU])", text)
        if match:
            return {"P": "TO-247", "B": "TO-220", "Z": "TO-220", "R": "DPAK", "S": "D2PAK", "U": "TO-251"}[match.group(1)]
        match = re.match(r"^IP([PBD])", text)
        if match:
            return {"P": "TO-220", "B": "D2PAK", "D": "DPAK"}[match.group(1)]
        if text.startswith(("IRF", "IRL")):
            return "TO-220"
        return super().extract_package_code(mpn)

    def extract_series(self, mpn: str) -> str:
        match = re.match(r"^((?:IRF|IRL)[A-Z]*[0-9]+)", _clean(mpn))
        if match:
            return match.group(1)
        return super().extract_series(mpn)

    def extract_attributes(self, mpn: str, component_type: T) -> dict[str, Any]:
        attributes = super().extract_attributes(mpn, component_type)
        if component_type.base_type is T.MOSFET and "channel" not in attributes:
            channel = mosfet_channel(mpn)
            if channel:
                attributes["channel"] = channel
        return attributes


# =============================================================================
# ONSEMI
# =============================================================================


class OnsemiProvider(RuleProvider):
    owner_id = "onsemi"
    name = "onsemi"
    RULES = (
        rules(r"MC1458[A-Z]?.*", T.OPAMP, T.OPAMP_ONSEMI),
        rules(r"MC3403[A-Z]?.*", T.OPAMP, T.OPAMP_ONSEMI),
        rules(r"MC324[A-Z]?.*", T.OPAMP, T.OPAMP_ONSEMI),
        rules(r"MC741[A-Z]?.*", T.OPAMP, T.OPAMP_ONSEMI),
        rules(r"MC78(?:M|L)?[0-9]{2}.*", T.VOLTAGE_REGULATOR, T.VOLTAGE_REGULATOR_LINEAR, T.VOLTAGE_REGULATOR_LINEAR_ONSEMI),
        rules(r"MC79(?:M|L)?[0-9]{2}.*", T.VOLTAGE_REGULATOR, T.VOLTAGE_REGULATOR_LINEAR, T.VOLTAGE_REGULATOR_LINEAR_ONSEMI),
        rules(r"NCP1117.*", T.VOLTAGE_REGULATOR, T.VOLTAGE_REGULATOR_LINEAR, T.VOLTAGE_REGULATOR_LINEAR_ONSEMI),
        rules(r"NCP[0-9]{3,4}.*", T.VOLTAGE_REGULATOR),
        rules(r"(?:NTD|NTP|NTR|FQP|FQN|FDP|FDS|FDN)[0-9]+[A-Z]?.*", T.MOSFET, T.MOSFET_ONSEMI),
        rules(r"2N7000.*", T.MOSFET, T.MOSFET_ONSEMI),
        rules(r"2N(?:2222|2907|3904|3906|4401|4403|3055|2955)A?.*", T.TRANSISTOR, T.TRANSISTOR_ONSEMI),
        rules(r"PN(?:2222|2907|3904|3906|4401|4403)A?.*", T.TRANSISTOR, T.TRANSISTOR_ONSEMI),
        rules(r"(?:MMBT|MPSA|MJE|TIP)[0-9]{2,4}.*", T.TRANSISTOR, T.TRANSISTOR_ONSEMI),
        rules(r"BC[0-9]{3}.*", T.TRANSISTOR, T.TRANSISTOR_ONSEMI),
        rules(r"1N47[0-9]{2}A?.*", T.DIODE, T.DIODE_ZENER, T.DIODE_ONSEMI),
        rules(r"(?:MBR|MBRS)[0-9]{3,4}.*", T.DIODE, T.DIODE_SCHOTTKY, T.DIODE_ONSEMI),
        rules(r"1N58[1-2][0-9].*", T.DIODE, T.DIODE_SCHOTTKY, T.DIODE_ONSEMI),
        rules(r"MMSZ[0-9].*", T.DIODE, T.DIODE_ZENER, T.DIODE_ONSEMI),
    )

    def extract_package_code(self, mpn: str) -> str:
        text = _clean(mpn)
        if text.startswith(("MMBT", "MMSZ")):
            return "SOT-23"
        if text.startswith(("PN", "MPSA", "BC", "2N7000")):
            return "TO-92"
        if text.startswith(("FQP", "FDP", "NTP", "TIP")):
            return "TO-220"
        if text.startswith("NTD"):
            return "DPAK"
        if text.startswith("FDS"):
            return "SOIC"
        return super().extract_package_code(mpn)

    def extract_attributes(self, mpn: str, component_type: T) -> dict[str, Any]:
        attributes = super().extract_attributes(mpn, component_type)
        text = _clean(mpn)
        base = component_type.base_type
        if base is T.MOSFET and "channel" not in attributes:
            channel = mosfet_channel(text)
            if channel:
                attributes["channel"] = channel
        elif base is T.VOLTAGE_REGULATOR:
            attributes.update(regulator_attributes(text))
        elif base is T.DIODE and text.startswith("1N47"):
            attributes["type"] = "zener"
        elif base is T.DIODE and text.startswith(("MBR", "1N58")):
            attributes["type"] = "schottky"
        return attributes


# =============================================================================
# NEXPERIA
# =============================================================================


class NexperiaProvider(RuleProvider):
    owner_id = "nexperia"
    name = "Nexperia"
    RULES = (
        rules(r"(?:PSMN|PMV|PMPB|PMN|PMZ)[0-9].*", T.MOSFET, T.MOSFET_NEXPERIA),
        rules(r"(?:BSS84|BSS138|2N7002)[A-Z]*.*", T.MOSFET, T.MOSFET_NEXPERIA),
        rules(r"(?:PMBT|PBSS|PDTC|PDTA)[0-9].*", T.TRANSISTOR, T.TRANSISTOR_NEXPERIA),
        rules(r"BC[0-9]{3}.*", T.TRANSISTOR, T.TRANSISTOR_NEXPERIA),
        rules(r"(?:BAS|BAT|BAV|BAW)[0-9]{2}.*", T.DIODE, T.DIODE_NEXPERIA),
        rules(r"BZX(?:84|79|585)[A-Z0-9].*", T.DIODE, T.DIODE_ZENER, T.DIODE_NEXPERIA),
        rules(r"PESD[0-9].*", T.DIODE, T.DIODE_NEXPERIA),
        rules(r"74(?:HC|HCT|LVC|AHC|AHCT|LV|ALVC)[0-9]+.*", T.LOGIC_IC, T.LOGIC_IC_NEXPERIA),
    )

    def extract_package_code(self, mpn: str) -> str:
        text = _clean(mpn)
        if text.startswith(("PMBT", "PMV", "BSS", "2N7002", "BZX84", "BAS", "BAT", "BAV")):
            return "SOT-23"
        match = re.match(r"^74[A-Z]+[0-9]+([A-Z]{1,3})", text)
        if match:
            return {"D": "SOIC", "PW": "TSSOP", "N": "DIP", "DB": "SSOP", "BQ": "DHVQFN"}.get(match.group(1), "")
        return super().extract_package_code(mpn)

    def extract_series(self, mpn: str) -> str:
        match = re.match(r"^(74[A-Z]+[0-9]+)", _clean(mpn))
        if match:
            return match.group(1)
        return super().extract_series(mpn)

    def extract_attributes(self, mpn: str, component_type: T) -> dict[str, Any]:
        attributes = super().extract_attributes(mpn, component_type)
        if component_type.base_type is T.MOSFET and "channel" not in attributes:
            channel = mosfet_channel(mpn)
            if channel:
                attributes["channel"] = channel
        return attributes


# =============================================================================
# DIODES INCORPORATED
# =============================================================================


class DiodesProvider(RuleProvider):
    owner_id = "diodes"
    name = "Diodes Incorporated"
    RULES = (
        rules(r"(?:DMN|DMP|DMG|DMT)[0-9].*", T.MOSFET, T.MOSFET_DIODES),
        rules(r"(?:ZXMN|ZXMP)[0-9].*", T.MOSFET, T.MOSFET_DIODES),
        rules(r"(?:MMBT|FMMT|ZXT|DXT)[0-9].*", T.TRANSISTOR, T.TRANSISTOR_DIODES),
        rules(r"(?:DDTA|DDTC)[0-9].*", T.TRANSISTOR, T.TRANSISTOR_DIODES),
        rules(r"(?:SBR|SDM|SBM)[0-9].*", T.DIODE, T.DIODE_SCHOTTKY, T.DIODE_DIODES),
        rules(r"B[0-9]{3,4}[A-Z]*.*", T.DIODE, T.DIODE_SCHOTTKY, T.DIODE_DIODES),
        rules(r"(?:DDZ|MMSZ)[0-9].*", T.DIODE, T.DIODE_ZENER, T.DIODE_DIODES),
        rules(r"(?:AP2|AP7|AZ1117|AP11).*", T.VOLTAGE_REGULATOR, T.VOLTAGE_REGULATOR_LINEAR, T.VOLTAGE_REGULATOR_LINEAR_DIODES),
        rules(r"(?:PAM|AP3|AP6)[0-9].*", T.VOLTAGE_REGULATOR, T.VOLTAGE_REGULATOR_SWITCHING),
    )

    def extract_package_code(self, mpn: str) -> str:
        text = _clean(mpn)
        if text.startswith(("MMBT", "FMMT", "MMSZ")):
            return "SOT-23"
        return super().extract_package_code(mpn)

    def extract_attributes(self, mpn: str, component_type: T) -> dict[str, Any]:
        attributes = super().extract_attributes(mpn, component_type)
        text = _clean(mpn)
        base = component_type.base_type
        if base is T.MOSFET and "channel" not in attributes:
            channel = mosfet_channel(text)
            if channel:
                attributes["channel"] = channel
        elif base is T.VOLTAGE_REGULATOR:
            attributes.update(regulator_attributes(text))
        elif base is T.DIODE:
            attributes["type"] = "zener" if text.startswith(("DDZ", "MMSZ")) else "schottky"
        return attributes
