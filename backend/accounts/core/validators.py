# accounts/core/validators.py
"""
Format rules for Venezuelan identity numbers (cédula / RIF) and phone numbers.
Validators return None when the value is valid and a human-readable reason
otherwise; they never raise.
"""
import re

# V / E: natural persons (national / foreigner); J / G: legal entities
NATURAL_PERSON_PREFIXES = ("V", "E")
LEGAL_ENTITY_PREFIXES = ("J", "G")
NATIONAL_ID_PREFIXES = NATURAL_PERSON_PREFIXES + LEGAL_ENTITY_PREFIXES

PHONE_AREA_CODES = ("0412", "0422", "0414", "0424", "0416", "0426", "0212")
PHONE_RE = re.compile(r"(%s)-[0-9]{7}" % "|".join(PHONE_AREA_CODES), re.ASCII)

_NON_ALNUM_RE = re.compile(r"[^A-Z0-9]")


def format_national_id(value: str | None) -> str:
    """Uppercase and drop every character that is not A-Z or 0-9 (V-12.345 -> V12345)."""
    if not value:
        return ""
    return _NON_ALNUM_RE.sub("", value.upper())


def validate_national_id(value: str | None) -> str | None:
    national_id = format_national_id(value)
    if not national_id:
        return "National ID must not be empty."

    prefix, digits = national_id[0], national_id[1:]

    if prefix not in NATIONAL_ID_PREFIXES:
        return "National ID must start with V, E, J or G."

    if not digits.isdigit():
        return "After the initial letter, the national ID must contain only digits."

    if prefix in NATURAL_PERSON_PREFIXES and not (4 <= len(digits) <= 10):
        return "V or E national IDs require between 4 and 10 digits."

    if prefix in LEGAL_ENTITY_PREFIXES and len(digits) < 9:
        return "J or G tax IDs (RIF) require at least 9 digits."

    return None


def validate_phone(value: str | None) -> str | None:
    if not value or not value.strip():
        return "Phone number must not be empty."
    if not PHONE_RE.fullmatch(value):
        return (
            "Invalid phone number. It must start with an allowed area code "
            "(%s) and follow the format 0XXX-XXXXXXX." % ", ".join(PHONE_AREA_CODES)
        )
    return None


def normalize_email(value: str) -> str:
    return value.strip().lower()
