"""MPN normalization and ordering-suffix handling.

Distributors append ordering codes to the base part number: lead-free markers
("MAX3483EESA+", "LTC2053HMS8#PBF"), tape-and-reel codes ("LT1117CST#TR") and
packing variants ("TJA1050T/CM,118", "NC7WZ04,315"). These do not change what
the part is, so classification works on the stripped form.
"""

import re


# =============================================================================
# PRE-COMPILED REGEX PATTERNS
# =============================================================================

# First ordering-suffix separator: "+", "#", "/" or ","
_SUFFIX_SEPARATOR_PATTERN = re.compile(r"[+#/,]")

# Labels that commonly precede a part number in free text
_MPN_LABEL_PATTERN = re.compile(
    r"^(?:MPN|P/N|PN|PART\s*(?:NO|NUMBER)?|MFR\s*PART\s*(?:NO|NUMBER)?)\.?\s*[:#=]\s*",
    re.IGNORECASE,
)
_TOKEN_SPLIT_PATTERN = re.compile(r"[\s;|]+")
_TOKEN_TRIM_CHARS = "\"'()[]{}<>.:;"


def normalize_mpn(mpn: str | None) -> str:
    """Trim and uppercase an MPN. None and blank input give ''."""
    if not mpn:
        return ""
    return mpn.strip().upper()


def strip_package_suffix(mpn: str | None) -> str:
    """Remove lead-free, reel and packing suffixes: 'MCP2551-I/SN' -> 'MCP2551-I'.

    Case is preserved; surrounding whitespace is removed.
    """
    if not mpn:
        return ""
    trimmed = mpn.strip()
    match = _SUFFIX_SEPARATOR_PATTERN.search(trimmed)
    if not match or match.start() == 0:
        return trimmed
    return trimmed[:match.start()]


def package_suffix(mpn: str | None) -> str | None:
    """Return the ordering suffix of an MPN ('#PBF', '/CM,118', '+'), or None."""
    if not mpn:
        return None
    trimmed = mpn.strip()
    base = strip_package_suffix(trimmed)
    if not trimmed or base == trimmed:
        return None
    return trimmed[len(base):]


def search_variations(mpn: str | None) -> list[str]:
    """Original MPN followed by its stripped form, without duplicates."""
    if not mpn or not mpn.strip():
        return []
    trimmed = mpn.strip()
    variations = [trimmed]
    stripped = strip_package_suffix(trimmed)
    if stripped and stripped not in variations:
        variations.append(stripped)
    return variations


def is_equivalent_mpn(mpn_a: str | None, mpn_b: str | None) -> bool:
    """True if two MPNs name the same base part, ignoring case and ordering suffixes."""
    base_a = normalize_mpn(strip_package_suffix(mpn_a))
    base_b = normalize_mpn(strip_package_suffix(mpn_b))
    if not base_a or not base_b:
        return False
    return base_a == base_b


def candidate_tokens(text: str | None) -> list[str]:
    """Split free text into tokens that could be part numbers.

    'P/N: LM358N qty 4' -> ['LM358N', 'QTY', '4']. Label prefixes such as
    'MPN:' or 'P/N:' are dropped.
    """
    if not text or not text.strip():
        return []
    cleaned = _MPN_LABEL_PATTERN.sub("", text.strip())
    tokens = []
    for raw in _TOKEN_SPLIT_PATTERN.split(cleaned):
        token = _MPN_LABEL_PATTERN.sub("", raw).strip(_TOKEN_TRIM_CHARS)
        if token:
            tokens.append(token.upper())
    return tokens
