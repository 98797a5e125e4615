"""Pattern registry: identification rules per component type per rule owner.

The registry has two phases. During the build phase rule providers register
their patterns; freeze() then converts the store into read-only tuples that can
be shared between threads without locking.

Ownership isolation: matches_owner() consults only one owner's rules, so a
provider deciding "is this part mine" is never overruled by another provider's
pattern for the same generic type. A manufacturer-specific type
("mosfet@infineon") may only be registered by the owner named in it.
"""

import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterable, Mapping

from .component_types import ComponentType
from .exceptions import InvalidPattern, RegistryFrozenError

if TYPE_CHECKING:
    from .providers.base import RuleProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchRule:
    """A compiled identification pattern owned by one rule provider."""

    component_type: ComponentType
    pattern: re.Pattern[str]
    owner_id: str

    def matches(self, text: str) -> bool:
        return self.pattern.fullmatch(text) is not None


@dataclass
class BuildReport:
    """Outcome of registering providers: rules accepted and rules rejected."""

    providers: list[str] = field(default_factory=list)
    rules_registered: int = 0
    errors: list[InvalidPattern] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class PatternRegistry:
    """Store of MatchRules keyed by owner and component type."""

    def __init__(self):
        self._rules: dict[str, dict[ComponentType, list[MatchRule]]] = {}
        self._frozen = False
        self._by_owner: Mapping[str, Mapping[ComponentType, tuple[MatchRule, ...]]] = MappingProxyType({})
        self._by_type: Mapping[ComponentType, tuple[MatchRule, ...]] = MappingProxyType({})
        self._owners: tuple[str, ...] = ()

    # -------------------------------------------------------------------------
    # Build phase
    # -------------------------------------------------------------------------

    def register(self, component_type: ComponentType, owner_id: str, pattern: str) -> MatchRule:
        """Compile and store a pattern. Raises InvalidPattern for bad input."""
        if self._frozen:
            raise RegistryFrozenError(f"Cannot register {pattern!r} for {owner_id}: registry is frozen")
        if not owner_id or not owner_id.strip():
            raise InvalidPattern(pattern, "owner id is empty")
        if not isinstance(component_type, ComponentType):
            raise InvalidPattern(pattern, f"unknown component type {component_type!r}", owner_id)
        if not isinstance(pattern, str) or not pattern.strip():
            raise InvalidPattern(pattern, "pattern source is empty", owner_id)
        vendor = component_type.vendor
        if vendor is not None and vendor != owner_id:
            raise InvalidPattern(pattern, f"{component_type.value} belongs to owner {vendor}", owner_id)
        try:
            compiled = re.compile(pattern, re.IGNORECASE)
        except re.error as e:
            raise InvalidPattern(pattern, str(e), owner_id) from e

        rule = MatchRule(component_type, compiled, owner_id)
        self._rules.setdefault(owner_id, {}).setdefault(component_type, []).append(rule)
        return rule

    def register_provider(self, provider: "RuleProvider", report: BuildReport | None = None) -> BuildReport:
        """Run a provider's register_patterns(), collecting rejected rules.

        A rejected rule is logged and recorded in the report; the provider's
        other rules are still registered.
        """
        if report is None:
            report = BuildReport()
        collector = _CollectingRegistrar(self, provider.owner_id, report)
        provider.register_patterns(collector)
        report.providers.append(provider.owner_id)
        return report

    def freeze(self) -> "PatternRegistry":
        """End the build phase. Further registration raises RegistryFrozenError."""
        if self._frozen:
            return self
        by_owner = {}
        by_type: dict[ComponentType, list[MatchRule]] = {}
        for owner_id in sorted(self._rules):
            types = self._rules[owner_id]
            by_owner[owner_id] = MappingProxyType({t: tuple(rules) for t, rules in types.items()})
            for component_type, rules in types.items():
                by_type.setdefault(component_type, []).extend(rules)
        self._by_owner = MappingProxyType(by_owner)
        self._by_type = MappingProxyType({t: tuple(rules) for t, rules in by_type.items()})
        self._owners = tuple(sorted(by_owner))
        self._rules = {}
        self._frozen = True
        rule_count = sum(len(rules) for rules in self._by_type.values())
        logger.debug(f"Pattern registry frozen: {len(self._owners)} owners, {rule_count} rules")
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -------------------------------------------------------------------------
    # Read phase
    # -------------------------------------------------------------------------

    def matches_any(self, text: str, component_type: ComponentType) -> bool:
        """True if any owner's rule for `component_type` matches `text`."""
        if not text:
            return False
        return any(rule.matches(text) for rule in self._type_rules(component_type))

    def matches_owner(self, text: str, component_type: ComponentType, owner_id: str) -> bool:
        """True if one of `owner_id`'s own rules for `component_type` matches `text`."""
        if not text:
            return False
        return any(rule.matches(text) for rule in self.rules_for(component_type, owner_id))

    def has_type(self, component_type: ComponentType) -> bool:
        return bool(self._type_rules(component_type))

    def owners(self) -> tuple[str, ...]:
        """Registered owner ids in sorted order."""
        if self._frozen:
            return self._owners
        return tuple(sorted(self._rules))

    def types_for_owner(self, owner_id: str) -> tuple[ComponentType, ...]:
        """Types an owner registered, in enum declaration order."""
        if self._frozen:
            registered = self._by_owner.get(owner_id, {})
        else:
            registered = self._rules.get(owner_id, {})
        return tuple(t for t in ComponentType if t in registered)

    def rules_for(self, component_type: ComponentType, owner_id: str) -> tuple[MatchRule, ...]:
        if self._frozen:
            return self._by_owner.get(owner_id, {}).get(component_type, ())
        return tuple(self._rules.get(owner_id, {}).get(component_type, ()))

    def _type_rules(self, component_type: ComponentType) -> Iterable[MatchRule]:
        if self._frozen:
            return self._by_type.get(component_type, ())
        return [
            rule
            for owner_id in sorted(self._rules)
            for rule in self._rules[owner_id].get(component_type, ())
        ]


class _CollectingRegistrar:
    """Registry facade handed to providers during build_catalog().

    Pins the owner id and turns InvalidPattern into report entries so one bad
    pattern does not abort the build.
    """

    def __init__(self, registry: PatternRegistry, owner_id: str, report: BuildReport):
        self._registry = registry
        self._owner_id = owner_id
        self._report = report

    def register(self, component_type: ComponentType, owner_id: str, pattern: str) -> MatchRule | None:
        if owner_id != self._owner_id:
            error = InvalidPattern(pattern, f"provider {self._owner_id} cannot register for {owner_id}", owner_id)
            return self._reject(error)
        try:
            rule = self._registry.register(component_type, owner_id, pattern)
        except InvalidPattern as e:
            return self._reject(e)
        self._report.rules_registered += 1
        return rule

    def _reject(self, error: InvalidPattern) -> None:
        logger.warning(f"Rejected rule: {error}")
        self._report.errors.append(error)
        return None


def build_registry(providers: Iterable["RuleProvider"]) -> tuple[PatternRegistry, BuildReport]:
    """Register every provider once, in the given order, and freeze the result.

    Returns the frozen registry and the build report listing rejected rules.
    Raises ValueError if two providers share an owner id.
    """
    registry = PatternRegistry()
    report = BuildReport()
    seen: set[str] = set()
    for provider in providers:
        if provider.owner_id in seen:
            raise ValueError(f"Duplicate rule provider owner id: {provider.owner_id}")
        seen.add(provider.owner_id)
        registry.register_provider(provider, report)
    registry.freeze()
    if report.errors:
        logger.warning(f"Pattern registry built with {len(report.errors)} rejected rules")
    return registry, report
