"""Package codes, package name normalization and mounting type detection."""

import re


# =============================================================================
# MANUFACTURER PACKAGE CODES
# =============================================================================
# Ordering-code letters that vendors put at the end of an MPN (LM358N, LM358DR,
# TPS7A4700RGWT) mapped to the standard package name they denote.

PACKAGE_CODES: dict[str, str] = {
    # DIP
    "N": "DIP", "P": "DIP",
    # SOIC
    "D": "SOIC", "M": "SOIC", "R": "SOIC", "RT": "SOIC", "SO": "SOIC", "SM": "SOIC",
    "DW": "SOIC-WIDE",
    # TSSOP / MSOP
    "PW": "TSSOP", "DT": "TSSOP", "PT": "TSSOP", "RU": "TSSOP", "TS": "TSSOP",
    "ST": "TSSOP", "XU": "TSSOP", "V": "TSSOP",
    "DGK": "MSOP",
    # SOT
    "DBV": "SOT-23", "T1": "SOT-23", "3": "SOT-23",
    "MP": "SOT-223", "U": "SOT-223", "G": "SOT-223",
    "DRL": "SOT-553",
    "DRV": "SON",
    # TO
    "T": "TO-220", "T3": "TO-220", "CT": "TO-220", "T6": "TO-220", "DCB": "TO-220",
    "DCA": "TO-220", "L": "TO-220",
    "TA": "TO-220F", "FP": "TO-220F",
    "K": "TO-3", "H": "TO-39",
    "KC": "TO-252", "KV": "TO-252",
    "TU": "TO-251", "F": "TO-251",
    # Power SMD
    "S": "D2PAK", "DPAK": "DPAK",
    # Diode
    "RL": "DO-41", "DO41": "DO-41", "DO35": "DO-35",
}

# Packages that are drop-in compatible with each other (same land pattern)
PACKAGE_FAMILIES: tuple[frozenset[str], ...] = (
    frozenset({"SOIC", "SOIC-8", "SO-8", "SOP-8"}),
    frozenset({"SOT-23", "SOT-23-3", "TO-236"}),
    frozenset({"TO-252", "DPAK"}),
    frozenset({"TO-263", "D2PAK"}),
    frozenset({"DO-214AC", "SMA"}),
    frozenset({"DO-214AA", "SMB"}),
    frozenset({"DO-214AB", "SMC"}),
    frozenset({"DIP", "PDIP"}),
)

_PACKAGE_CODE_SUFFIX_PATTERN = re.compile(r"([A-Z]{1,4}[0-9]?)$")

# Tape-and-reel markers after the package code: LM358DR, TPS73633DBVT
_REEL_MARKERS = ("R", "T")

# Normalize optional hyphens: SOT23 -> SOT-23, TO220 -> TO-220
_PACKAGE_HYPHEN_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"^SOT(\d)"), r"SOT-\1"),
    (re.compile(r"^SOD(\d)"), r"SOD-\1"),
    (re.compile(r"^TO(\d)"), r"TO-\1"),
    (re.compile(r"^DO(\d)"), r"DO-\1"),
    (re.compile(r"^(SOIC|SOP|TSSOP|SSOP|MSOP|QFN|DFN|LQFP|TQFP|DIP|PDIP)(\d)"), r"\1-\2"),
]


def lookup_package_code(code: str | None) -> str | None:
    """Standard package name for a manufacturer package code: 'DBV' -> 'SOT-23'."""
    if not code:
        return None
    return PACKAGE_CODES.get(code.strip().upper())


def extract_package_code(mpn: str | None) -> str:
    """Package from a trailing ordering code. Returns '' when none is recognized.

    Tries the text after the last hyphen ('MCP1700-3302E/TT' style parts use
    their own decoders), then the trailing letters of the MPN ('LM358N' -> 'N').
    """
    if not mpn:
        return ""
    upper = mpn.strip().upper()
    if "-" in upper:
        package = lookup_package_code(upper.rsplit("-", 1)[1])
        if package:
            return package
    match = _PACKAGE_CODE_SUFFIX_PATTERN.search(upper)
    if match:
        code = match.group(1)
        codes = [code]
        if len(code) > 1 and code.endswith(_REEL_MARKERS):
            codes.append(code[:-1])
        # Longest known code wins: DBV before V, DW before W
        suffixes = sorted((c[-n:] for c in codes for n in range(len(c), 0, -1)), key=len, reverse=True)
        for suffix in suffixes:
            package = lookup_package_code(suffix)
            if package:
                return package
    return ""


def normalize_package(package: str | None) -> str:
    """Canonical package name: 'sot23' -> 'SOT-23', ' soic8 ' -> 'SOIC-8'."""
    if not package:
        return ""
    normalized = re.sub(r"\s+", "", package.upper())
    for pattern, replacement in _PACKAGE_HYPHEN_PATTERNS:
        normalized = pattern.sub(replacement, normalized)
    return normalized


def packages_compatible(package_a: str | None, package_b: str | None) -> bool:
    """True when both packages share a land pattern.

    Unknown packages on either side are not treated as incompatible.
    """
    a = normalize_package(package_a)
    b = normalize_package(package_b)
    if not a or not b or a == b:
        return True
    for family in PACKAGE_FAMILIES:
        if a in family and b in family:
            return True
    return False


# =============================================================================
# MOUNTING TYPE DETECTION
# =============================================================================

# SMD package patterns for mounting type detection
SMD_PATTERNS = frozenset({
    "0201", "0402", "0603", "0805", "1206", "1210", "1812", "2010", "2512",  # Imperial sizes
    "01005", "008004",  # Tiny sizes
    "SOT", "SOD", "SOP", "SOIC", "SSOP", "TSSOP", "TSOP", "MSOP",  # Small outline
    "SO-",
    "QFP", "TQFP", "LQFP", "PQFP", "VQFP",  # Quad flat
    "QFN", "DFN", "MLF", "SON", "WSON", "UDFN",  # No-lead
    "BGA", "CSP", "WLCSP",  # Ball grid array
    "LGA", "PLCC",
    "TO-252", "TO-263", "TO-277", "DPAK", "D2PAK", "D3PAK",  # Power SMD
    "DO-214", "SMA", "SMB", "SMC",  # Diode SMD
    "SC-70", "SC-88", "SC-89",
    "MINIMELF", "MELF",
})

# Through-hole package patterns
THROUGH_HOLE_PATTERNS = frozenset({
    "DIP", "PDIP", "CDIP",  # Dual in-line
    "SIP",
    "TO-92", "TO-126", "TO-220", "TO-247", "TO-251", "TO-264", "TO-3", "TO-18", "TO-39",
    "DO-41", "DO-35", "DO-201", "DO-15",  # Axial diodes
    "AXIAL", "RADIAL", "THT", "PIN HEADER",
    "HC-49",
    "THROUGH HOLE", "THROUGH-HOLE",
})


def detect_mounting_type(package: str | None) -> str:
    """Determine mounting type from a package name.

    Returns:
        "smd" for surface mount, "through_hole" for through-hole,
        "not_sure" if uncertain.
    """
    if not package:
        return "not_sure"

    pkg_upper = package.strip().upper()
    if not pkg_upper:
        return "not_sure"
    # Also match the hyphenated form: TO220 -> TO-220, SOT23 -> SOT-23
    forms = (pkg_upper, normalize_package(package))

    # Explicit SMD markers are authoritative: "SMD,P=1.27mm" is SMD
    if any("SMD" in form or "SMT" in form for form in forms):
        return "smd"

    # Power SMD packages share the "TO-" prefix with through-hole ones
    for pattern in ("TO-252", "TO-263", "TO-277"):
        if any(pattern in form for form in forms):
            return "smd"

    for pattern in THROUGH_HOLE_PATTERNS:
        if any(pattern in form for form in forms):
            return "through_hole"

    for pattern in SMD_PATTERNS:
        if any(pattern in form for form in forms):
            return "smd"

    # Packages starting with numbers are usually imperial/metric chip sizes
    if pkg_upper[0].isdigit():
        return "smd"

    return "not_sure"
