"""Tests for the bundled manufacturer rule providers and their MPN decoders."""

import pytest

from mpnmatch.component_types import ComponentType as T
from mpnmatch.patterns import build_registry
from mpnmatch.providers import (
    DEFAULT_PROVIDER_CLASSES,
    InfineonProvider,
    MaximProvider,
    MicrochipProvider,
    MurataProvider,
    PanasonicProvider,
    STProvider,
    TIProvider,
    VishayProvider,
    YageoProvider,
    default_providers,
)
from mpnmatch.providers.discretes import mosfet_channel
from mpnmatch.providers.ics import _avr_flash_kb
from mpnmatch.providers.passives import decode_value_code
from mpnmatch.providers.regulators import regulator_attributes


class TestBundledProviders:
    def test_all_rules_register_cleanly(self):
        registry, report = build_registry(default_providers())
        assert report.ok, report.errors
        assert len(report.providers) == len(DEFAULT_PROVIDER_CLASSES)
        assert registry.frozen

    def test_owner_ids_unique(self):
        owner_ids = [p.owner_id for p in default_providers()]
        assert len(owner_ids) == len(set(owner_ids))

    @pytest.mark.parametrize("provider", default_providers(), ids=lambda p: p.owner_id)
    def test_vendor_types_belong_to_owner(self, provider):
        for component_type in provider.supported_types():
            assert component_type.vendor in (None, provider.owner_id)


class TestSharedGenericPatterns:
    """TI and ST both register LM358 parts for the generic op-amp type."""

    def test_both_owners_match_generic_type(self, catalog):
        assert TIProvider().matches("LM358DR", T.OPAMP, catalog.patterns)
        assert STProvider().matches("LM358DR", T.OPAMP, catalog.patterns)

    def test_ti_claims_its_own_type(self, catalog):
        assert TIProvider().matches("LM358DR", T.OPAMP_TI, catalog.patterns)

    @pytest.mark.parametrize(
        "provider",
        [p for p in default_providers() if p.owner_id != "ti"],
        ids=lambda p: p.owner_id,
    )
    def test_no_other_owner_claims_an_exclusive_type(self, catalog, provider):
        registry = catalog.patterns
        ti_types = [t for t in registry.types_for_owner("ti") if t.is_manufacturer_specific]
        own_types = [t for t in registry.types_for_owner(provider.owner_id) if t.is_manufacturer_specific]
        for component_type in ti_types + own_types:
            assert not provider.matches("LM358DR", component_type, registry)


class TestOfficialReplacement:
    """Default same-series check needs a known, compatible package on both sides."""

    def test_same_series_same_package(self):
        assert TIProvider().is_official_replacement("TPS73633DBVR", "TPS73633DBVT")

    def test_different_pin_count(self):
        assert not STProvider().is_official_replacement("STM32F103C8T6", "STM32F103RBT6")

    def test_unknown_package(self):
        assert not TIProvider().is_official_replacement("LM358", "LM358DR")


class TestDecodeValueCode:
    @pytest.mark.parametrize("code,expected", [
        ("103", 10000),
        ("1002", 10000),
        ("4R7", 4.7),
        ("R10", 0.1),
        ("104", 100000),
    ])
    def test_decode(self, code, expected):
        assert decode_value_code(code) == pytest.approx(expected)

    def test_invalid(self):
        assert decode_value_code("") is None
        assert decode_value_code("XYZ") is None


class TestPassiveDecoders:
    """Ordering codes of chip resistors and MLCCs."""

    def test_yageo_chip_resistor(self):
        attributes = YageoProvider().extract_attributes("RC0805FR-0710KL", T.RESISTOR_CHIP_YAGEO)
        assert attributes["package"] == "0805"
        assert attributes["resistance"] == pytest.approx(10000)
        assert attributes["tolerance"] == "±1%"
        assert attributes["composition"] == "thick film"
        assert attributes["series"] == "RC0805"

    def test_yageo_official_replacement_needs_same_tolerance(self):
        yageo = YageoProvider()
        assert yageo.is_official_replacement("RC0805FR-0710KL", "RC0805FR-0747KL")
        assert not yageo.is_official_replacement("RC0805FR-0710KL", "RC0805JR-0710KL")
        assert not yageo.is_official_replacement("RC0805FR-0710KL", "RC0603FR-0710KL")

    def test_vishay_crcw(self):
        attributes = VishayProvider().extract_attributes("CRCW060310K0FKEA", T.RESISTOR_CHIP_VISHAY)
        assert attributes["package"] == "0603"
        assert attributes["resistance"] == pytest.approx(10000)
        assert attributes["tolerance"] == "±1%"
        assert attributes["temperature_coefficient"] == "±100ppm/K"

    @pytest.mark.parametrize("mpn,voltage", [("1N4001", 50), ("1N4004", 400), ("1N4007", 1000)])
    def test_vishay_rectifier_voltage(self, mpn, voltage):
        attributes = VishayProvider().extract_attributes(mpn, T.DIODE_VISHAY)
        assert attributes["type"] == "rectifier"
        assert attributes["voltage_rating"] == voltage
        assert attributes["package"] == "DO-41"

    def test_murata_mlcc(self):
        attributes = MurataProvider().extract_attributes("GRM188R71H104KA93D", T.CAPACITOR_CERAMIC_MURATA)
        assert attributes["package"] == "0603"
        assert attributes["dielectric"] == "X7R"
        assert attributes["voltage"] == "50V"
        assert attributes["capacitance"] == pytest.approx(100e-9)
        assert attributes["tolerance"] == "±10%"

    def test_panasonic_erj(self):
        provider = PanasonicProvider()
        attributes = provider.extract_attributes("ERJ-3EKF1002V", T.RESISTOR_CHIP_PANASONIC)
        assert attributes["package"] == "0603"
        assert attributes["resistance"] == pytest.approx(10000)
        assert attributes["tolerance"] == "±1%"
        assert provider.extract_series("ERJ-3EKF1002V") == "ERJ-3EK"


class TestMosfetChannel:
    @pytest.mark.parametrize("mpn,expected", [
        ("IRF540N", "N"),
        ("IRF9540N", "P"),
        ("IRLML2502", "N"),
        ("IRLML6402TRPBF", "P"),
        ("STP55NF06", "N"),
        ("STP80PF55", "P"),
        ("DMP3098L-7", "P"),
        ("BSS138", "N"),
        ("BSS84", "P"),
        ("2N7000", "N"),
    ])
    def test_channel(self, mpn, expected):
        assert mosfet_channel(mpn) == expected

    def test_unknown(self):
        assert mosfet_channel("XYZ123") is None
        assert mosfet_channel("") is None


class TestRegulatorAttributes:
    def test_fixed_78xx(self):
        assert regulator_attributes("LM7805CT") == {"output_voltage": 5.0, "output_type": "fixed", "output_current": 1.0}

    def test_negative_low_current(self):
        attributes = regulator_attributes("MC79L12ACP")
        assert attributes["output_voltage"] == -12.0
        assert attributes["output_current"] == 0.1

    def test_adjustable(self):
        assert regulator_attributes("LM317T") == {"output_type": "adjustable", "output_current": 1.5}

    @pytest.mark.parametrize("mpn,voltage", [
        ("LD1117S33", 3.3),
        ("LM1117-3.3", 3.3),
        ("AZ1117-5.0", 5.0),
        ("MCP1700-3302E", 3.3),
    ])
    def test_fixed_voltage_codes(self, mpn, voltage):
        attributes = regulator_attributes(mpn)
        assert attributes["output_voltage"] == pytest.approx(voltage)
        assert attributes["output_type"] == "fixed"

    def test_unrecognized(self):
        assert regulator_attributes("XYZ123") == {}


class TestIcDecoders:
    """Ordering codes of microcontrollers, memories and interface ICs."""

    def test_stm32_ordering_code(self):
        provider = STProvider()
        attributes = provider.extract_attributes("STM32F103C8T6", T.MICROCONTROLLER_ST)
        assert attributes["family"] == "STM32"
        assert attributes["pin_count"] == 48
        assert attributes["flash_size"] == 64 * 1024
        assert attributes["package"] == "LQFP-48"
        assert provider.extract_series("STM32F103C8T6") == "STM32F1"

    def test_st_eeprom(self):
        attributes = STProvider().extract_attributes("M24C02-WMN6TP", T.MEMORY_EEPROM_ST)
        assert attributes["type"] == "EEPROM"
        assert attributes["interface"] == "I2C"
        assert attributes["capacity"] == 2 * 1024

    def test_atmega(self):
        provider = MicrochipProvider()
        attributes = provider.extract_attributes("ATmega328P-PU", T.MICROCONTROLLER_MICROCHIP)
        assert attributes["family"] == "AVR"
        assert attributes["flash_size"] == 32 * 1024
        assert attributes["package"] == "PDIP"
        assert provider.extract_package_code("ATMEGA328P-AUR") == "TQFP"

    @pytest.mark.parametrize("digits,expected", [
        ("328", 32), ("2560", 256), ("85", 8), ("2313", 2), ("16", 16), ("48", 4),
    ])
    def test_avr_flash_size(self, digits, expected):
        assert _avr_flash_kb(digits) == expected

    def test_microchip_eeprom(self):
        provider = MicrochipProvider()
        attributes = provider.extract_attributes("24LC256-I/SN", T.MEMORY_EEPROM_MICROCHIP)
        assert attributes["interface"] == "I2C"
        assert attributes["capacity"] == 256 * 1024
        assert attributes["package"] == "SOIC"

    def test_maxim_package_and_series(self):
        provider = MaximProvider()
        assert provider.extract_package_code("MAX3483EESA+") == "SOIC"
        assert provider.extract_series("MAX3483EESA+") == "MAX3483"

    def test_ti_series_and_opamp_configuration(self):
        provider = TIProvider()
        assert provider.extract_series("TPS73633DBVR") == "TPS73633"
        assert provider.extract_series("SN74HC595N") == "SN74HC595"
        attributes = provider.extract_attributes("TL074CN", T.OPAMP_TI)
        assert attributes["configuration"] == "quad"
        assert attributes["input_type"] == "JFET"
        assert attributes["package"] == "DIP"

    def test_infineon_packages(self):
        provider = InfineonProvider()
        assert provider.extract_package_code("IRLML6402TRPBF") == "SOT-23"
        assert provider.extract_package_code("IRFP250N") == "TO-247"
        assert provider.extract_package_code("IRF540N") == "TO-220"
        assert provider.extract_series("IRF540NPBF") == "IRF540"

    def test_known_part_characteristics_merged(self):
        attributes = InfineonProvider().extract_attributes("IRF540NPBF", T.MOSFET_INFINEON)
        assert attributes["channel"] == "N"
        assert attributes["voltage_rating"] == 100
        assert attributes["rds_on"] == pytest.approx(0.052)
