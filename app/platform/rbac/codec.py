"""
Hierarchy codes
An 8-digit code AATTGGRR locates a node: area, territory, group, officer.
Trailing all-zero segments mark a coarser tier.
"""

import re
from typing import Optional

from .constants import (
    ACCESS_LEVEL_TIERS,
    CODE_LENGTH,
    NATIONAL_CODE,
    TIER_ACCESS_LEVELS,
    TIER_SIGNIFICANT_DIGITS,
    VALID_AREA_CODES,
    AccessLevel,
    HierarchyTier,
)
from .exceptions import InvalidArgumentError
from .types import CodeValidation

_NON_DIGITS = re.compile(r"[^0-9]")
_SEGMENT = re.compile(r"[0-9]{1,2}")
_CODE = re.compile(r"[0-9]{8}")


def _segment(value, name):
    text = "00" if value is None else str(value).strip()
    if not _SEGMENT.fullmatch(text):
        raise InvalidArgumentError(f"{name} must be 1-2 digits: {value!r}")
    return text.zfill(2)


def encode(area, territory=None, group=None, tier=HierarchyTier.RO, officer=None) -> str:
    """
    Build the code for ``tier``; segments finer than the tier are zeroed.

    Args:
        area: Area digits
        territory: Territory digits (3-4)
        group: Group digits (5-6)
        tier: HierarchyTier requested
        officer: Officer digits (7-8), only used for RO

    Returns:
        8-character code
    """
    tier = HierarchyTier.parse(tier)
    if tier is None:
        raise InvalidArgumentError("Unknown hierarchy level")
    if tier == HierarchyTier.NATIONAL:
        return NATIONAL_CODE
    segments = [
        _segment(area, "Area"),
        _segment(territory, "Territory"),
        _segment(group, "Group"),
        _segment(officer, "Officer"),
    ]
    keep = TIER_SIGNIFICANT_DIGITS[tier] // 2
    return "".join(segments[:keep]) + "00" * (4 - keep)


def encode_position(area_code: Optional[int], position_code: Optional[str], tier) -> str:
    """Code for an assignment row: 2-digit area followed by the position code padded to 6."""
    tier = HierarchyTier.parse(tier)
    if tier == HierarchyTier.NATIONAL:
        return NATIONAL_CODE
    area = f"{area_code:02d}" if area_code is not None else "00"
    position = (position_code or "").strip().ljust(6, "0")[:6]
    full = area + position
    digits = TIER_SIGNIFICANT_DIGITS[tier]
    return full[:digits].ljust(CODE_LENGTH, "0")


def decode(code: str) -> HierarchyTier:
    """Tier of a code, checked from coarsest to finest."""
    if code == NATIONAL_CODE:
        return HierarchyTier.NATIONAL
    if code.endswith("000000"):
        return HierarchyTier.AREA
    if code.endswith("0000"):
        return HierarchyTier.TERRITORY
    if code.endswith("00"):
        return HierarchyTier.GROUP
    return HierarchyTier.RO


def validate(code: Optional[str]) -> CodeValidation:
    if code is None or len(code) != CODE_LENGTH:
        return CodeValidation(valid=False, code=code, error="Code must be exactly 8 digits")
    if not _CODE.fullmatch(code):
        return CodeValidation(valid=False, code=code, error="Code must contain only digits")
    area = code[:2]
    if area != "00" and int(area) not in VALID_AREA_CODES:
        return CodeValidation(valid=False, code=code, error="Invalid Area code. Valid: 21-27, 35")
    tier = decode(code)
    return CodeValidation(
        valid=True,
        code=code,
        level=tier.value,
        access_level=tier_to_access_level(tier),
        display_name=display_name(code, tier),
    )


def normalize_to_digits(raw, significant_digits: int) -> str:
    """
    Canonical code from free-text input.

    Non-digits are stripped, the leading ``significant_digits`` are kept
    (left-padded with zeros when short) and the rest is zero filled.
    """
    digits = _NON_DIGITS.sub("", str(raw or ""))
    if significant_digits <= 0:
        return NATIONAL_CODE
    significant = digits[:significant_digits].rjust(significant_digits, "0")
    return significant.ljust(CODE_LENGTH, "0")


def pad_code(code: Optional[str]) -> str:
    """Right-pad with zeros to 8 characters, or truncate."""
    code = (code or "").strip()
    return code.ljust(CODE_LENGTH, "0")[:CODE_LENGTH]


def tier_to_access_level(tier) -> int:
    tier = HierarchyTier.parse(tier)
    return TIER_ACCESS_LEVELS.get(tier, AccessLevel.EMPLOYEE).value


def access_level_to_tier(access_level: Optional[int]) -> HierarchyTier:
    member = AccessLevel.from_value(access_level)
    return ACCESS_LEVEL_TIERS.get(member, HierarchyTier.RO)


def display_name(code: str, tier=None) -> str:
    tier = HierarchyTier.parse(tier) if tier is not None else decode(code)
    if tier == HierarchyTier.NATIONAL:
        return "National"
    if tier == HierarchyTier.AREA:
        return f"Area {code[:2]}"
    if tier == HierarchyTier.TERRITORY:
        return f"Territory {code[:4]}"
    if tier == HierarchyTier.GROUP:
        return f"Group {code[:6]}"
    return f"RO {code}"


def code_prefix(code: str, tier) -> str:
    """Significant leading digits of a code at ``tier``."""
    return code[:TIER_SIGNIFICANT_DIGITS[HierarchyTier.parse(tier)]]
