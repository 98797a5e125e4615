"""Tolerance rules: how two values of one attribute are compared.

Every rule maps a (required, candidate) pair to a score in [0, 1]:

- ExactMatch: 1.0 if equal after normalization, else 0.0
- PercentageTolerance(p): 1.0 within p%, linear decay to 0 at 2p%
- MinimumRequired(margin): 1.0 if candidate >= required, linear decay to 0 at
  `margin` below (voltage and current ratings)
- MaximumAllowed(limit): 1.0 if candidate <= required, linear decay to 0 at
  required * limit (on-resistance, leakage)
- RangeOverlap(low, high): fraction of the required range covered by the
  candidate; a scalar requirement v becomes [v*low, v*high]

score() is directional ("can the candidate replace the required part").
symmetric_score() averages both directions and is what the similarity engine
uses by default, so similarity(a, b) == similarity(b, a). accepts() takes the
worse direction, so a rating downgrade beyond the margin fails whichever part
comes first.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable

from . import config

Value = Any  # float, str or (low, high) tuple


def normalize_text(value: Any) -> str:
    """Case-, whitespace- and punctuation-insensitive text form of a value."""
    if isinstance(value, float):
        text = format(value, "g")
    else:
        text = str(value)
    return "".join(ch for ch in text.casefold() if ch.isalnum() or ch in ".+")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _linear_decay(excess: float, span: float) -> float:
    """1.0 at excess <= 0, 0.0 at excess >= span, linear in between."""
    if excess <= 0:
        return 1.0
    if span <= 0 or excess >= span:
        return 0.0
    return 1.0 - excess / span


class ToleranceRule:
    """Base rule. Subclasses implement score(required, candidate)."""

    numeric = True

    def score(self, required: Value, candidate: Value) -> float:
        raise NotImplementedError

    def symmetric_score(self, a: Value, b: Value) -> float:
        """Order-independent score: mean of both directional scores."""
        return (self.score(a, b) + self.score(b, a)) / 2

    def accepts(self, a: Value, b: Value, threshold: float | None = None) -> bool:
        """Whether the pair counts as matching for a critical attribute.

        Each part must be able to stand in for the other: the worse of the two
        directional scores has to reach the threshold.
        """
        limit = config.CRITICAL_ACCEPT_THRESHOLD if threshold is None else threshold
        return min(self.score(a, b), self.score(b, a)) >= limit

    def accepts_replacement(self, required: Value, candidate: Value, threshold: float | None = None) -> bool:
        """Directional version of accepts(): can `candidate` stand in for `required`."""
        limit = config.CRITICAL_ACCEPT_THRESHOLD if threshold is None else threshold
        return self.score(required, candidate) >= limit

    def describe(self) -> str:
        return type(self).__name__

    def _text_fallback(self, required: Value, candidate: Value) -> float:
        return 1.0 if normalize_text(required) == normalize_text(candidate) else 0.0


@dataclass(frozen=True)
class ExactMatch(ToleranceRule):
    """Equality after normalization. `normalize` defaults to normalize_text."""

    normalize: Callable[[Any], Any] | None = None
    numeric = False

    def score(self, required: Value, candidate: Value) -> float:
        if required is None or candidate is None:
            return 0.0
        if _is_number(required) and _is_number(candidate):
            return 1.0 if math.isclose(required, candidate, rel_tol=1e-9, abs_tol=1e-15) else 0.0
        normalize = self.normalize or normalize_text
        return 1.0 if normalize_text(normalize(required)) == normalize_text(normalize(candidate)) else 0.0

    def accepts(self, a: Value, b: Value, threshold: float | None = None) -> bool:
        return self.symmetric_score(a, b) >= 1.0

    def accepts_replacement(self, required: Value, candidate: Value, threshold: float | None = None) -> bool:
        return self.score(required, candidate) >= 1.0


@dataclass(frozen=True)
class PercentageTolerance(ToleranceRule):
    """Relative difference up to `percent` scores 1.0, falling to 0 at twice that."""

    percent: float

    def __post_init__(self):
        if self.percent <= 0:
            raise ValueError(f"percent must be positive, got {self.percent}")

    def score(self, required: Value, candidate: Value) -> float:
        if required is None or candidate is None:
            return 0.0
        if not (_is_number(required) and _is_number(candidate)):
            return self._text_fallback(required, candidate)
        if required == 0:
            return 1.0 if candidate == 0 else 0.0
        difference = abs(candidate - required) / abs(required) * 100
        return _linear_decay(difference - self.percent, self.percent)

    def describe(self) -> str:
        return f"PercentageTolerance({self.percent:g}%)"


@dataclass(frozen=True)
class MinimumRequired(ToleranceRule):
    """Candidate must be at least as capable; shortfall decays to 0 at `margin`."""

    margin: float | None = None

    def score(self, required: Value, candidate: Value) -> float:
        if required is None or candidate is None:
            return 0.0
        if not (_is_number(required) and _is_number(candidate)):
            return self._text_fallback(required, candidate)
        required, candidate = abs(required), abs(candidate)
        if candidate >= required:
            return 1.0
        margin = config.MINIMUM_REQUIRED_MARGIN if self.margin is None else self.margin
        shortfall = (required - candidate) / required
        return _linear_decay(shortfall, margin)

    def describe(self) -> str:
        return "MinimumRequired"


@dataclass(frozen=True)
class MaximumAllowed(ToleranceRule):
    """Candidate must not be worse than required; decays to 0 at required * limit."""

    limit: float = 1.2

    def __post_init__(self):
        if self.limit <= 1.0:
            raise ValueError(f"limit must be greater than 1.0, got {self.limit}")

    def score(self, required: Value, candidate: Value) -> float:
        if required is None or candidate is None:
            return 0.0
        if not (_is_number(required) and _is_number(candidate)):
            return self._text_fallback(required, candidate)
        required, candidate = abs(required), abs(candidate)
        if candidate <= required:
            return 1.0
        if required == 0:
            return 0.0
        return _linear_decay(candidate / required - 1.0, self.limit - 1.0)

    def describe(self) -> str:
        return f"MaximumAllowed(x{self.limit:g})"


@dataclass(frozen=True)
class RangeOverlap(ToleranceRule):
    """Fraction of the required range covered by the candidate.

    Ranges are (low, high) tuples. A scalar requirement v is widened to
    [v*low, v*high]; a scalar candidate is a single point that either lies
    inside the required range (1.0) or not (0.0).
    """

    low: float = 0.8
    high: float = 1.2

    def __post_init__(self):
        if not 0 < self.low <= 1.0 <= self.high:
            raise ValueError(f"invalid range factors ({self.low}, {self.high})")

    def score(self, required: Value, candidate: Value) -> float:
        if required is None or candidate is None:
            return 0.0
        required_range = self._as_range(required, widen=True)
        candidate_range = self._as_range(candidate, widen=False)
        if required_range is None or candidate_range is None:
            return self._text_fallback(required, candidate)
        r_low, r_high = required_range
        c_low, c_high = candidate_range
        if r_high == r_low:
            return 1.0 if c_low <= r_low <= c_high else 0.0
        if c_high == c_low:
            return 1.0 if r_low <= c_low <= r_high else 0.0
        overlap = min(r_high, c_high) - max(r_low, c_low)
        if overlap <= 0:
            return 0.0
        return min(1.0, overlap / (r_high - r_low))

    def _as_range(self, value: Value, widen: bool) -> tuple[float, float] | None:
        if isinstance(value, tuple) and len(value) == 2 and all(_is_number(v) for v in value):
            return (min(value), max(value))
        if _is_number(value):
            if not widen:
                return (value, value)
            bounds = (value * self.low, value * self.high)
            return (min(bounds), max(bounds))
        return None

    def describe(self) -> str:
        return f"RangeOverlap({self.low:g}..{self.high:g})"
