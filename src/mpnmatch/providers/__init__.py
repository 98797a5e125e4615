"""Bundled manufacturer rule providers."""

from .base import Registrar, RuleProvider, rules
from .discretes import DiodesProvider, InfineonProvider, NexperiaProvider, OnsemiProvider
from .ics import EspressifProvider, MaximProvider, MicrochipProvider, STProvider, TIProvider
from .passives import MurataProvider, PanasonicProvider, SamsungProvider, VishayProvider, YageoProvider

DEFAULT_PROVIDER_CLASSES: tuple[type[RuleProvider], ...] = (
    YageoProvider,
    VishayProvider,
    MurataProvider,
    SamsungProvider,
    PanasonicProvider,
    InfineonProvider,
    OnsemiProvider,
    NexperiaProvider,
    DiodesProvider,
    TIProvider,
    STProvider,
    MicrochipProvider,
    MaximProvider,
    EspressifProvider,
)


def default_providers() -> list[RuleProvider]:
    """Fresh instances of every bundled provider."""
    return [cls() for cls in DEFAULT_PROVIDER_CLASSES]


__all__ = [
    "DEFAULT_PROVIDER_CLASSES",
    "DiodesProvider",
    "EspressifProvider",
    "InfineonProvider",
    "MaximProvider",
    "MicrochipProvider",
    "MurataProvider",
    "NexperiaProvider",
    "OnsemiProvider",
    "PanasonicProvider",
    "Registrar",
    "RuleProvider",
    "STProvider",
    "SamsungProvider",
    "TIProvider",
    "VishayProvider",
    "YageoProvider",
    "default_providers",
    "rules",
]
