import re
from typing import Dict, Optional

_LOCAL_DIGITS = str.maketrans("০১২৩৪৫৬৭৮৯", "0123456789")

VALID_PHONE = re.compile(r"^(\+?880)?01[3-9]\d{8}$")
_MOBILE_IN_TEXT = re.compile(r"(?:^|\s|:)(01[3-9][0-9]{8})(?=\s|$|,)")
_ANY_MOBILE = re.compile(r"\b(01[0-9]{9})\b")


def to_ascii_digits(value: str) -> str:
    return (value or "").translate(_LOCAL_DIGITS)


def normalize_phone(phone: Optional[str]) -> str:
    """
    Reduce a phone number to its 11-digit local form (01XXXXXXXXX).

    Strips non-digits and the 880/88 country prefix, and re-inserts the
    leading zero for a bare 10-digit subscriber number.
    """
    digits = re.sub(r"\D", "", to_ascii_digits(phone or ""))
    if digits.startswith("880"):
        digits = "0" + digits[3:]
    elif digits.startswith("88"):
        digits = digits[2:]
    if len(digits) == 10 and not digits.startswith("0"):
        digits = "0" + digits
    return digits[-11:]


def is_valid_phone(phone: Optional[str]) -> bool:
    return bool(VALID_PHONE.match(re.sub(r"\s", "", to_ascii_digits(phone or ""))))


def parse_pasted_contact(text: str) -> Dict[str, str]:
    """
    Split a pasted blob ("name, 017..., address") into contact fields.

    The first phone-free chunk that is short and has no digits is taken as
    the name; the remaining chunks form the address.
    """
    converted = to_ascii_digits(text or "")
    result: Dict[str, str] = {}

    match = _MOBILE_IN_TEXT.search(converted) or _ANY_MOBILE.search(converted)
    if match:
        result["phone"] = match.group(1)

    parts = []
    for chunk in re.split(r"[\n,]+", converted):
        chunk = _ANY_MOBILE.sub("", chunk).strip()
        if chunk:
            parts.append(chunk)

    if parts:
        first = parts[0]
        if len(first) <= 50 and not re.search(r"\d", first):
            result["name"] = first
            if len(parts) > 1:
                result["address"] = ", ".join(parts[1:])
        else:
            result["address"] = ", ".join(parts)

    return result
