"""Rule providers for integrated circuit manufacturers."""

import re
from typing import Any

from ..component_types import ComponentType as T
from ..mpn import normalize_mpn, strip_package_suffix
from .base import RuleProvider, rules
from .discretes import mosfet_channel
from .regulators import regulator_attributes


def _clean(mpn: str) -> str:
    return normalize_mpn(strip_package_suffix(mpn))


# Amplifier count by the last digit: TL071, TL072, TL074
_OPAMP_CONFIGURATIONS = {"1": "single", "2": "dual", "4": "quad"}
_TI_OPAMP_FAMILY_PATTERN = re.compile(r"^TL0[78]([124])")


# =============================================================================
# TEXAS INSTRUMENTS
# =============================================================================


class TIProvider(RuleProvider):
    owner_id = "ti"
    name = "Texas Instruments"
    RULES = (
        rules(r"LM358[A-Z0-9]*.*", T.OPAMP, T.OPAMP_TI),
        rules(r"LM324[A-Z0-9]*.*", T.OPAMP, T.OPAMP_TI),
        rules(r"LM741.*", T.OPAMP, T.OPAMP_TI),
        rules(r"TL0[78][1-4].*", T.OPAMP, T.OPAMP_TI),
        rules(r"NE5532.*", T.OPAMP, T.OPAMP_TI),
        rules(r"(?:OPA|TLV|TLC)[0-9]{3,4}.*", T.OPAMP, T.OPAMP_TI),
        rules(r"LMV[0-9]{3}.*", T.OPAMP, T.OPAMP_TI),
        rules(r"(?:LM|UA)78(?:M|L)?[0-9]{2}.*", T.VOLTAGE_REGULATOR, T.VOLTAGE_REGULATOR_LINEAR, T.VOLTAGE_REGULATOR_LINEAR_TI),
        rules(r"(?:LM|UA)79(?:M|L)?[0-9]{2}.*", T.VOLTAGE_REGULATOR, T.VOLTAGE_REGULATOR_LINEAR, T.VOLTAGE_REGULATOR_LINEAR_TI),
        rules(r"LM(?:317|337|1117|1085|2937).*", T.VOLTAGE_REGULATOR, T.VOLTAGE_REGULATOR_LINEAR, T.VOLTAGE_REGULATOR_LINEAR_TI),
        rules(r"TPS7[0-9A-Z].*", T.VOLTAGE_REGULATOR, T.VOLTAGE_REGULATOR_LINEAR, T.VOLTAGE_REGULATOR_LINEAR_TI),
        rules(r"TL431.*", T.VOLTAGE_REGULATOR, T.VOLTAGE_REGULATOR_LINEAR, T.VOLTAGE_REGULATOR_LINEAR_TI),
        rules(r"TPS[56][0-9]{4}.*", T.VOLTAGE_REGULATOR, T.VOLTAGE_REGULATOR_SWITCHING, T.VOLTAGE_REGULATOR_SWITCHING_TI),
        rules(r"LM(?:2596|2576|2675|2678|5017).*", T.VOLTAGE_REGULATOR, T.VOLTAGE_REGULATOR_SWITCHING, T.VOLTAGE_REGULATOR_SWITCHING_TI),
        rules(r"MSP430[A-Z0-9]+.*", T.MICROCONTROLLER, T.MICROCONTROLLER_TI),
        rules(r"TMP[0-9]{2,3}.*", T.SENSOR, T.SENSOR_TEMPERATURE, T.SENSOR_TEMPERATURE_TI),
        rules(r"LM35[A-D]?[A-Z]*", T.SENSOR, T.SENSOR_TEMPERATURE, T.SENSOR_TEMPERATURE_TI),
        rules(r"SN74[A-Z]*[0-9]+.*", T.LOGIC_IC, T.LOGIC_IC_TI),
        rules(r"SN(?:65|75)[A-Z]*[0-9]+.*", T.INTERFACE_IC, T.INTERFACE_IC_TI),
        rules(r"MAX3?232.*", T.INTERFACE_IC),
        rules(r"ISO[0-9]{4}.*", T.INTERFACE_IC, T.INTERFACE_IC_TI),
    )

    def extract_series(self, mpn: str) -> str:
        match = re.match(r"^(SN74[A-Z]*[0-9]+|MSP430[A-Z]+[0-9]|TPS[0-9A-Z]{4,6}?(?=[A-Z]{3}|$))", _clean(mpn))
        if match:
            return match.group(1)
        return super().extract_series(mpn)

    def extract_attributes(self, mpn: str, component_type: T) -> dict[str, Any]:
        attributes = super().extract_attributes(mpn, component_type)
        text = _clean(mpn)
        base = component_type.base_type
        if base is T.OPAMP and "configuration" not in attributes:
            match = _TI_OPAMP_FAMILY_PATTERN.match(text)
            if match:
                attributes["configuration"] = _OPAMP_CONFIGURATIONS[match.group(1)]
            if text.startswith(("TL07", "TL08")):
                attributes.setdefault("input_type", "JFET")
        elif base is T.VOLTAGE_REGULATOR:
            attributes.update(regulator_attributes(text))
        elif base is T.MICROCONTROLLER and text.startswith("MSP430"):
            attributes["family"] = "MSP430"
        return attributes


# =============================================================================
# STMICROELECTRONICS
# =============================================================================

# STM32 ordering code: STM32 F 103 C 8 T 6
_STM32_PATTERN = re.compile(r"^STM32([A-Z]{1,2})(\d)(\d{1,3})([A-Z])([0-9A-Z])([A-Z])?(\d)?")
_STM32_FLASH_KB = {
    "4": 16, "6": 32, "8": 64, "B": 128, "Z": 192, "C": 256, "D": 384,
    "E": 512, "F": 768, "G": 1024, "H": 1536, "I": 2048,
}
_STM32_PINS = {
    "F": 20, "G": 28, "K": 32, "T": 36, "S": 44, "C": 48, "R": 64,
    "M": 80, "O": 90, "V": 100, "Q": 132, "Z": 144, "A": 169, "I": 176, "B": 208, "N": 216,
}
_STM32_PACKAGES = {"T": "LQFP", "U": "VFQFPN", "H": "BGA", "Y": "WLCSP", "P": "TSSOP", "K": "UFBGA"}


class STProvider(RuleProvider):
    owner_id = "st"
    name = "STMicroelectronics"
    RULES = (
        rules(r"ST[FPDBWNS][0-9]+[NP].*", T.MOSFET, T.MOSFET_ST),
        rules(r"L78(?:M|L)?[0-9]{2}.*", T.VOLTAGE_REGULATOR, T.VOLTAGE_REGULATOR_LINEAR, T.VOLTAGE_REGULATOR_LINEAR_ST),
        rules(r"L79(?:M|L)?[0-9]{2}.*", T.VOLTAGE_REGULATOR, T.VOLTAGE_REGULATOR_LINEAR, T.VOLTAGE_REGULATOR_LINEAR_ST),
        rules(r"(?:LD1117|LD39|LDK|LDL)[0-9A-Z]*.*", T.VOLTAGE_REGULATOR, T.VOLTAGE_REGULATOR_LINEAR, T.VOLTAGE_REGULATOR_LINEAR_ST),
        rules(r"STM32[FLHGWUC][0-9].*", T.MICROCONTROLLER, T.MICROCONTROLLER_ST),
        rules(r"STM8[SLA][0-9].*", T.MICROCONTROLLER, T.MICROCONTROLLER_ST),
        rules(r"(?:M24C|M24M|M95)[0-9]+.*", T.MEMORY, T.MEMORY_EEPROM, T.MEMORY_EEPROM_ST),
        rules(r"(?:TSV|TS27|TSX)[0-9]+.*", T.OPAMP, T.OPAMP_ST),
        rules(r"LM358.*", T.OPAMP),
    )

    def extract_package_code(self, mpn: str) -> str:
        text = _clean(mpn)
        match = _STM32_PATTERN.match(text)
        if match and match.group(6):
            package = _STM32_PACKAGES.get(match.group(6), "")
            pins = _STM32_PINS.get(match.group(4))
            # Pin count is part of the footprint: LQFP-48 and LQFP-64 do not swap
            return f"{package}-{pins}" if package and pins else package
        match = re.match(r"^ST([FPDBW])", text)
        if match:
            return {"F": "TO-220F", "P": "TO-220", "D": "DPAK", "B": "D2PAK", "W": "TO-247"}[match.group(1)]
        return super().extract_package_code(mpn)

    def extract_series(self, mpn: str) -> str:
        text = _clean(mpn)
        match = _STM32_PATTERN.match(text)
        if match:
            return f"STM32{match.group(1)}{match.group(2)}"
        match = re.match(r"^(STM8[SLA])", text)
        if match:
            return match.group(1)
        return super().extract_series(mpn)

    def extract_attributes(self, mpn: str, component_type: T) -> dict[str, Any]:
        attributes = super().extract_attributes(mpn, component_type)
        text = _clean(mpn)
        base = component_type.base_type
        if base is T.MICROCONTROLLER:
            attributes["family"] = "STM32" if text.startswith("STM32") else "STM8"
            match = _STM32_PATTERN.match(text)
            if match:
                pins = _STM32_PINS.get(match.group(4))
                if pins:
                    attributes["pin_count"] = pins
                flash_kb = _STM32_FLASH_KB.get(match.group(5))
                if flash_kb:
                    attributes["flash_size"] = flash_kb * 1024
        elif base is T.MOSFET and "channel" not in attributes:
            channel = mosfet_channel(text)
            if channel:
                attributes["channel"] = channel
        elif base is T.VOLTAGE_REGULATOR:
            attributes.update(regulator_attributes(text))
        elif base is T.MEMORY:
            attributes["type"] = "EEPROM"
            attributes["interface"] = "SPI" if text.startswith("M95") else "I2C"
            match = re.match(r"^M(?:24C|24M|95)(\d+)", text)
            if match:
                # Kbit density code: M24C02 is 2 Kbit, M95256 is 256 Kbit
                attributes["capacity"] = int(match.group(1)) * 1024
        return attributes


# =============================================================================
# MICROCHIP
# =============================================================================

_ATMEGA_FLASH_PATTERN = re.compile(r"^AT(?:MEGA|TINY)(\d+)")
_ATMEGA_PACKAGES = {"PU": "PDIP", "AU": "TQFP", "MU": "QFN", "SU": "SOIC", "XU": "TSSOP", "SSU": "SOIC"}
_MICROCHIP_SUFFIX_PACKAGES = {"P": "PDIP", "SN": "SOIC", "SO": "SOIC", "ST": "TSSOP", "MS": "MSOP", "OT": "SOT-23", "TT": "SOT-23", "MC": "DFN"}
_MICROCHIP_EEPROM_PATTERN = re.compile(r"^(24|25|93)(?:LC|AA|C|FC)(\d+)")


def _avr_flash_kb(digits: str) -> int | None:
    """Flash size in KB: the longest power-of-two prefix of the AVR part number.

    ATmega328 -> 32, ATmega2560 -> 256, ATtiny85 -> 8, ATtiny2313 -> 2.
    """
    for length in range(min(len(digits), 3), 0, -1):
        value = int(digits[:length])
        if value and value & (value - 1) == 0:
            return value
    return None


class MicrochipProvider(RuleProvider):
    owner_id = "microchip"
    name = "Microchip Technology"
    RULES = (
        rules(r"(?:DS)?PIC[0-9]{2}[A-Z]*[0-9]+.*", T.MICROCONTROLLER, T.MICROCONTROLLER_MICROCHIP),
        rules(r"AT(?:MEGA|TINY|XMEGA)[0-9]+.*", T.MICROCONTROLLER, T.MICROCONTROLLER_MICROCHIP),
        rules(r"(?:ATSAM|AT90)[A-Z0-9]+.*", T.MICROCONTROLLER, T.MICROCONTROLLER_MICROCHIP),
        rules(r"(?:24|25|93)(?:LC|AA|FC)[0-9]+.*", T.MEMORY, T.MEMORY_EEPROM, T.MEMORY_EEPROM_MICROCHIP),
        rules(r"AT24C[0-9]+.*", T.MEMORY, T.MEMORY_EEPROM, T.MEMORY_EEPROM_MICROCHIP),
        rules(r"SST(?:25|26|39)[A-Z]*[0-9]+.*", T.MEMORY, T.MEMORY_FLASH, T.MEMORY_FLASH_MICROCHIP),
        rules(r"MCP17[0-9]{2}.*", T.VOLTAGE_REGULATOR, T.VOLTAGE_REGULATOR_LINEAR),
        rules(r"MCP(?:2551|2515|2561|2562|2200|2221).*", T.INTERFACE_IC),
        rules(r"MCP60[0-9]{2}.*", T.OPAMP),
    )

    def extract_package_code(self, mpn: str) -> str:
        upper = normalize_mpn(mpn)
        if upper.startswith(("ATMEGA", "ATTINY")) and "-" in upper:
            package = _ATMEGA_PACKAGES.get(upper.rsplit("-", 1)[1].rstrip("R"))
            if package:
                return package
        if "/" in upper:
            # Microchip ordering codes end in /PKG: MCP1700-3302E/TT, 24LC256-I/SN
            package = _MICROCHIP_SUFFIX_PACKAGES.get(upper.rsplit("/", 1)[1])
            if package:
                return package
        return super().extract_package_code(mpn)

    def extract_series(self, mpn: str) -> str:
        match = re.match(r"^((?:DS)?PIC[0-9]{2}[A-Z]+|AT(?:MEGA|TINY)|ATSAM[A-Z0-9]{2})", _clean(mpn))
        if match:
            return match.group(1)
        return super().extract_series(mpn)

    def extract_attributes(self, mpn: str, component_type: T) -> dict[str, Any]:
        attributes = super().extract_attributes(mpn, component_type)
        text = _clean(mpn)
        base = component_type.base_type
        if base is T.MICROCONTROLLER:
            if text.startswith(("ATMEGA", "ATTINY", "AT90", "ATXMEGA")):
                attributes["family"] = "AVR"
            elif text.startswith("ATSAM"):
                attributes["family"] = "SAM"
            else:
                attributes["family"] = "PIC"
            match = _ATMEGA_FLASH_PATTERN.match(text)
            if match:
                flash_kb = _avr_flash_kb(match.group(1))
                if flash_kb:
                    attributes["flash_size"] = flash_kb * 1024
        elif base is T.MEMORY:
            match = _MICROCHIP_EEPROM_PATTERN.match(text)
            if match:
                prefix, kbits = match.groups()
                attributes["type"] = "EEPROM"
                attributes["interface"] = {"24": "I2C", "25": "SPI", "93": "Microwire"}[prefix]
                attributes["capacity"] = int(kbits) * 1024
            elif text.startswith("AT24C"):
                attributes["type"] = "EEPROM"
                attributes["interface"] = "I2C"
            elif text.startswith("SST"):
                attributes["type"] = "Flash"
                attributes["interface"] = "SPI" if text.startswith(("SST25", "SST26")) else "Parallel"
        elif base is T.VOLTAGE_REGULATOR:
            attributes.update(regulator_attributes(text))
        return attributes


# =============================================================================
# MAXIM INTEGRATED
# =============================================================================


class MaximProvider(RuleProvider):
    owner_id = "maxim"
    name = "Maxim Integrated"
    RULES = (
        rules(r"DS18[BS]20.*", T.SENSOR, T.SENSOR_TEMPERATURE, T.SENSOR_TEMPERATURE_MAXIM),
        rules(r"DS1822.*", T.SENSOR, T.SENSOR_TEMPERATURE, T.SENSOR_TEMPERATURE_MAXIM),
        rules(r"MAX(?:31855|31856|31865|31820|31875|6675|30205)[A-Z]*.*", T.SENSOR, T.SENSOR_TEMPERATURE, T.SENSOR_TEMPERATURE_MAXIM),
        rules(r"MAX3?232[A-Z]*.*", T.INTERFACE_IC, T.INTERFACE_IC_MAXIM),
        rules(r"MAX(?:485|487|488|490|491|3483|3485|3486|3488|3490|13487)[A-Z]*.*", T.INTERFACE_IC, T.INTERFACE_IC_MAXIM),
        rules(r"MAX(?:3100|14830|3421|3107)[A-Z]*.*", T.INTERFACE_IC, T.INTERFACE_IC_MAXIM),
    )

    def extract_package_code(self, mpn: str) -> str:
        # MAX ordering codes: temperature letter, then package letter: MAX3483EESA -> SA (SOIC)
        match = re.match(r"^MAX\d+[A-Z]?[CEIAM]([A-Z]{2})", _clean(mpn))
        if match:
            package = {"SA": "SOIC", "PA": "DIP", "UA": "MSOP", "UT": "SOT-23", "TA": "TDFN", "WE": "SOIC-WIDE"}.get(match.group(1))
            if package:
                return package
        return super().extract_package_code(mpn)

    def extract_series(self, mpn: str) -> str:
        match = re.match(r"^((?:MAX|DS)[0-9]+[A-Z]?[0-9]*)", _clean(mpn))
        if match:
            series = match.group(1)
            return re.sub(r"[A-Z]$", "", series) if series.startswith("MAX") else series
        return super().extract_series(mpn)


# =============================================================================
# ESPRESSIF
# =============================================================================


class EspressifProvider(RuleProvider):
    owner_id = "espressif"
    name = "Espressif Systems"
    RULES = (
        rules(r"ESP8266[A-Z0-9-]*", T.MICROCONTROLLER, T.MICROCONTROLLER_ESPRESSIF),
        rules(r"ESP32(?:-?[SCH][0-9]+)?[A-Z0-9-]*", T.MICROCONTROLLER, T.MICROCONTROLLER_ESPRESSIF),
    )

    def extract_package_code(self, mpn: str) -> str:
        text = _clean(mpn)
        if "WROOM" in text or "WROVER" in text or "MINI" in text:
            return "MODULE"
        if text.startswith(("ESP32", "ESP8266")):
            return "QFN"
        return super().extract_package_code(mpn)

    def extract_series(self, mpn: str) -> str:
        match = re.match(r"^(ESP8266|ESP32(?:-?[SCH][0-9]+)?)", _clean(mpn))
        if match:
            return match.group(1).replace("-", "")
        return super().extract_series(mpn)

    def extract_attributes(self, mpn: str, component_type: T) -> dict[str, Any]:
        attributes = super().extract_attributes(mpn, component_type)
        text = _clean(mpn)
        attributes["family"] = "ESP8266" if text.startswith("ESP8266") else "ESP32"
        # Module flash size suffix: ESP32-WROOM-32E-N8 -> 8 MB
        match = re.search(r"-N(\d+)(?:R\d+)?$", text)
        if match:
            attributes["flash_size"] = int(match.group(1)) * 1024 * 1024
        return attributes
