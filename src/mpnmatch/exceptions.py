"""Exceptions raised while building the rule and metadata registries."""


class InvalidPattern(ValueError):
    """A match rule was rejected at registration time."""

    def __init__(self, pattern: str | None, reason: str, owner_id: str | None = None):
        self.pattern = pattern
        self.reason = reason
        self.owner_id = owner_id
        where = f" (owner {owner_id})" if owner_id else ""
        super().__init__(f"Invalid pattern {pattern!r}{where}: {reason}")


class RegistryFrozenError(RuntimeError):
    """A registry was written to after freeze()."""


class InvalidMetadata(ValueError):
    """A TypeMetadata definition is inconsistent."""
