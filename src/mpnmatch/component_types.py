"""Component type taxonomy.

Types are dotted names forming a tree. A manufacturer-specific variant carries
an ``@vendor`` qualifier, where the vendor is the owner id of the rule provider
allowed to register it:

    resistor                   family (base type)
    resistor.chip              generic sub-type
    resistor.chip@yageo        manufacturer-specific variant

Parent and base type are derived from the name, so adding a type is a single
edit to the enum below.
"""

from enum import Enum


class ComponentType(Enum):
    """Closed set of component types, generic and manufacturer-specific."""

    # Passives
    RESISTOR = "resistor"
    RESISTOR_CHIP = "resistor.chip"
    RESISTOR_CHIP_YAGEO = "resistor.chip@yageo"
    RESISTOR_CHIP_VISHAY = "resistor.chip@vishay"
    RESISTOR_CHIP_PANASONIC = "resistor.chip@panasonic"
    RESISTOR_THROUGH_HOLE = "resistor.through_hole"
    RESISTOR_THROUGH_HOLE_YAGEO = "resistor.through_hole@yageo"
    CAPACITOR = "capacitor"
    CAPACITOR_CERAMIC = "capacitor.ceramic"
    CAPACITOR_CERAMIC_MURATA = "capacitor.ceramic@murata"
    CAPACITOR_CERAMIC_SAMSUNG = "capacitor.ceramic@samsung"
    CAPACITOR_CERAMIC_YAGEO = "capacitor.ceramic@yageo"
    CAPACITOR_ELECTROLYTIC = "capacitor.electrolytic"
    CAPACITOR_ELECTROLYTIC_PANASONIC = "capacitor.electrolytic@panasonic"
    INDUCTOR = "inductor"
    INDUCTOR_MURATA = "inductor@murata"
    INDUCTOR_SAMSUNG = "inductor@samsung"

    # Discretes
    DIODE = "diode"
    DIODE_RECTIFIER = "diode.rectifier"
    DIODE_ZENER = "diode.zener"
    DIODE_SCHOTTKY = "diode.schottky"
    DIODE_VISHAY = "diode@vishay"
    DIODE_NEXPERIA = "diode@nexperia"
    DIODE_ONSEMI = "diode@onsemi"
    DIODE_DIODES = "diode@diodes"
    LED = "led"
    LED_VISHAY = "led@vishay"
    TRANSISTOR = "transistor"
    TRANSISTOR_NEXPERIA = "transistor@nexperia"
    TRANSISTOR_ONSEMI = "transistor@onsemi"
    TRANSISTOR_DIODES = "transistor@diodes"
    MOSFET = "mosfet"
    MOSFET_INFINEON = "mosfet@infineon"
    MOSFET_ST = "mosfet@st"
    MOSFET_ONSEMI = "mosfet@onsemi"
    MOSFET_NEXPERIA = "mosfet@nexperia"
    MOSFET_VISHAY = "mosfet@vishay"
    MOSFET_DIODES = "mosfet@diodes"

    # Analog and power
    OPAMP = "opamp"
    OPAMP_TI = "opamp@ti"
    OPAMP_ST = "opamp@st"
    OPAMP_ONSEMI = "opamp@onsemi"
    VOLTAGE_REGULATOR = "voltage_regulator"
    VOLTAGE_REGULATOR_LINEAR = "voltage_regulator.linear"
    VOLTAGE_REGULATOR_LINEAR_TI = "voltage_regulator.linear@ti"
    VOLTAGE_REGULATOR_LINEAR_ST = "voltage_regulator.linear@st"
    VOLTAGE_REGULATOR_LINEAR_ONSEMI = "voltage_regulator.linear@onsemi"
    VOLTAGE_REGULATOR_LINEAR_DIODES = "voltage_regulator.linear@diodes"
    VOLTAGE_REGULATOR_SWITCHING = "voltage_regulator.switching"
    VOLTAGE_REGULATOR_SWITCHING_TI = "voltage_regulator.switching@ti"
    VOLTAGE_REGULATOR_INFINEON = "voltage_regulator@infineon"

    # Digital
    MICROCONTROLLER = "microcontroller"
    MICROCONTROLLER_MICROCHIP = "microcontroller@microchip"
    MICROCONTROLLER_ST = "microcontroller@st"
    MICROCONTROLLER_TI = "microcontroller@ti"
    MICROCONTROLLER_ESPRESSIF = "microcontroller@espressif"
    MICROCONTROLLER_INFINEON = "microcontroller@infineon"
    MEMORY = "memory"
    MEMORY_EEPROM = "memory.eeprom"
    MEMORY_EEPROM_MICROCHIP = "memory.eeprom@microchip"
    MEMORY_EEPROM_ST = "memory.eeprom@st"
    MEMORY_FLASH = "memory.flash"
    MEMORY_FLASH_MICROCHIP = "memory.flash@microchip"
    LOGIC_IC = "logic_ic"
    LOGIC_IC_NEXPERIA = "logic_ic@nexperia"
    LOGIC_IC_TI = "logic_ic@ti"
    INTERFACE_IC = "interface_ic"
    INTERFACE_IC_MAXIM = "interface_ic@maxim"
    INTERFACE_IC_TI = "interface_ic@ti"
    SENSOR = "sensor"
    SENSOR_TEMPERATURE = "sensor.temperature"
    SENSOR_TEMPERATURE_MAXIM = "sensor.temperature@maxim"
    SENSOR_TEMPERATURE_TI = "sensor.temperature@ti"

    # Electromechanical
    CONNECTOR = "connector"

    @property
    def parent(self) -> "ComponentType":
        """One level up the tree; a base type is its own parent."""
        return _PARENTS[self]

    @property
    def base_type(self) -> "ComponentType":
        """Root of the parent chain (the component family)."""
        return _BASE_TYPES[self]

    @property
    def is_base_type(self) -> bool:
        return _PARENTS[self] is self

    @property
    def is_manufacturer_specific(self) -> bool:
        return "@" in self.value

    @property
    def vendor(self) -> str | None:
        """Owner id a manufacturer-specific variant belongs to."""
        if "@" not in self.value:
            return None
        return self.value.split("@", 1)[1]

    @property
    def depth(self) -> int:
        """Number of levels below the base type."""
        return self.value.count(".") + self.value.count("@")

    def ancestors(self) -> tuple["ComponentType", ...]:
        """Parent chain from this type (inclusive) up to the base type."""
        chain = [self]
        current = self
        while not current.is_base_type:
            current = current.parent
            chain.append(current)
        return tuple(chain)

    def is_a(self, other: "ComponentType") -> bool:
        """True if this type is `other` or one of its descendants."""
        return other in self.ancestors()


def _parent_name(name: str) -> str:
    if "@" in name:
        return name.split("@", 1)[0]
    if "." in name:
        return name.rsplit(".", 1)[0]
    return name


def _build_parent_table() -> dict[ComponentType, ComponentType]:
    by_value = {t.value: t for t in ComponentType}
    parents = {}
    for component_type in ComponentType:
        parent_name = _parent_name(component_type.value)
        if parent_name not in by_value:
            raise RuntimeError(f"Component type {component_type.value!r} has no declared parent {parent_name!r}")
        parents[component_type] = by_value[parent_name]
    return parents


_PARENTS: dict[ComponentType, ComponentType] = _build_parent_table()
_BASE_TYPES: dict[ComponentType, ComponentType] = {
    t: ComponentType(t.value.split("@", 1)[0].split(".", 1)[0]) for t in ComponentType
}

BASE_TYPES: frozenset[ComponentType] = frozenset(t for t in ComponentType if t.is_base_type)
