"""Configuration for MPN classification and similarity scoring."""

import logging
import os

# Resolver specificity scores (empirical policy values, not derived)
SPECIFICITY_MANUFACTURER_BONUS = int(os.getenv("MPNMATCH_MANUFACTURER_BONUS", "150"))
SPECIFICITY_GENERIC_PENALTY = int(os.getenv("MPNMATCH_GENERIC_PENALTY", "-50"))

# Similarity levels
HIGH_SIMILARITY = float(os.getenv("MPNMATCH_HIGH_SIMILARITY", "0.9"))
LOW_SIMILARITY = float(os.getenv("MPNMATCH_LOW_SIMILARITY", "0.3"))  # Cap when a critical value is unknown
LOW_SIMILARITY_FLOOR = float(os.getenv("MPNMATCH_LOW_SIMILARITY_FLOOR", "0.0"))  # Returned on critical mismatch

# Minimum symmetric score for a critical attribute to count as matching
CRITICAL_ACCEPT_THRESHOLD = float(os.getenv("MPNMATCH_CRITICAL_ACCEPT_THRESHOLD", "0.5"))

# Default decay margin for MinimumRequired (fraction below requirement that scores 0)
MINIMUM_REQUIRED_MARGIN = float(os.getenv("MPNMATCH_MINIMUM_REQUIRED_MARGIN", "0.1"))

LOG_LEVEL = os.getenv("MPNMATCH_LOG_LEVEL", "WARNING").upper()


def configure_logging(level: str | None = None) -> None:
    """Attach a stream handler to the package logger at LOG_LEVEL (or `level`)."""
    package_logger = logging.getLogger("mpnmatch")
    package_logger.setLevel(level or LOG_LEVEL)
    if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, logging.NullHandler)
               for h in package_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        package_logger.addHandler(handler)
