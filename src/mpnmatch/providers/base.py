"""Rule provider contract.

A rule provider describes one manufacturer: the MPN patterns it claims, how to
read package and series out of its part numbers, and which of its parts are
official replacements for each other.
"""

import re
from typing import Any, Protocol

from ..component_types import ComponentType
from ..equivalents import known_attributes
from ..mpn import normalize_mpn, strip_package_suffix
from ..packages import extract_package_code, packages_compatible
from ..patterns import PatternRegistry

# Leading letters and digits of an MPN: 'LM358DR' -> 'LM358'
_SERIES_PATTERN = re.compile(r"^([A-Z]+[0-9]+)")


class Registrar(Protocol):
    """What register_patterns() receives: a PatternRegistry or a build-phase facade."""

    def register(self, component_type: ComponentType, owner_id: str, pattern: str) -> Any: ...


class RuleProvider:
    """Base class for manufacturer rule providers.

    Subclasses set `owner_id`, `name` and `RULES`, a tuple of
    (pattern, types) rows. The default register_patterns() registers each
    pattern for each listed type; a manufacturer-specific type must carry this
    provider's owner id ("resistor.chip@yageo" for owner "yageo").
    """

    owner_id: str = ""
    name: str = ""
    RULES: tuple[tuple[str, tuple[ComponentType, ...]], ...] = ()

    def register_patterns(self, registry: Registrar) -> None:
        for pattern, types in self.RULES:
            for component_type in types:
                registry.register(component_type, self.owner_id, pattern)

    def supported_types(self) -> frozenset[ComponentType]:
        return frozenset(t for _, types in self.RULES for t in types)

    def matches(self, mpn: str, component_type: ComponentType, registry: PatternRegistry) -> bool:
        """Whether `mpn` is this manufacturer's part of `component_type`.

        Only this provider's own rules are consulted.
        """
        text = normalize_mpn(mpn)
        if not text:
            return False
        return registry.matches_owner(text, component_type, self.owner_id)

    def extract_package_code(self, mpn: str) -> str:
        """Standard package name encoded in the MPN, or ''."""
        return extract_package_code(normalize_mpn(strip_package_suffix(mpn)))

    def extract_series(self, mpn: str) -> str:
        """Product series (base part number without ordering options), or ''."""
        match = _SERIES_PATTERN.match(normalize_mpn(strip_package_suffix(mpn)))
        return match.group(1) if match else ""

    def extract_attributes(self, mpn: str, component_type: ComponentType) -> dict[str, Any]:
        """Comparable attributes decoded from the MPN.

        The default covers package, series and any documented characteristics
        of well-known parts. Decoders for vendor ordering codes override this.
        """
        attributes: dict[str, Any] = {}
        package = self.extract_package_code(mpn)
        if package:
            attributes["package"] = package
        series = self.extract_series(mpn)
        if series:
            attributes["series"] = series
        attributes.update(known_attributes(mpn))
        return attributes

    def is_official_replacement(self, mpn_a: str, mpn_b: str) -> bool:
        """Same series and a known, compatible package on both sides."""
        series_a = self.extract_series(mpn_a)
        series_b = self.extract_series(mpn_b)
        if not series_a or series_a != series_b:
            return False
        package_a = self.extract_package_code(mpn_a)
        package_b = self.extract_package_code(mpn_b)
        if not package_a or not package_b:
            return False
        return packages_compatible(package_a, package_b)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.owner_id})"


def rules(pattern: str, *types: ComponentType) -> tuple[str, tuple[ComponentType, ...]]:
    """One RULES row: a pattern and the types it identifies."""
    return (pattern, types)
