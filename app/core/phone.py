import re

_E164 = re.compile(r"^\+[1-9]\d{7,14}$")


def normalize_phone(raw: str) -> str:
    """Normalize a user-entered phone number to E.164 (+15551234567).

    Spaces, dashes, dots and parentheses are dropped; a leading "00" is read
    as an international prefix. Raises ValueError when the result is not a
    plausible E.164 number.
    """
    cleaned = re.sub(r"[\s\-\.\(\)]", "", raw or "")
    if cleaned.startswith("00"):
        cleaned = "+" + cleaned[2:]
    if not cleaned.startswith("+"):
        cleaned = "+" + cleaned
    if not _E164.match(cleaned):
        raise ValueError("Invalid phone number")
    return cleaned
