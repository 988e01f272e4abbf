"""
Blocked-phrase filter enforcing the Expat-Friendly Pledge.
Plain case-insensitive substring matching against an ordered phrase list.
"""

from typing import Iterable, Optional, Sequence, Tuple

# Order matters: the first phrase found wins.
BLOCKED_PHRASES: Tuple[str, ...] = (
    "locals only",
    "no foreigners",
    "eestlastele",
    "ainult kohalikud",
    "only estonians",
    "ainult eestlased",
    "no immigrants",
    "mitte välismaalased",
)


def check_blocked_phrases(
    text: Optional[str],
    phrases: Sequence[str] = BLOCKED_PHRASES
) -> Optional[str]:
    """
    Find the first blocked phrase contained in the text.

    Args:
        text: Free text such as a listing title or description
        phrases: Ordered phrase list, lowercase

    Returns:
        The matching phrase, or None if the text is clean
    """
    if not text:
        return None

    lowered = text.lower()
    for phrase in phrases:
        if phrase in lowered:
            return phrase
    return None


def find_blocked_phrase(fields: Iterable[Tuple[str, Optional[str]]]) -> Optional[Tuple[str, str]]:
    """
    Scan several named text fields in order.

    Args:
        fields: (field_name, text) pairs

    Returns:
        (field_name, phrase) for the first hit, or None
    """
    for name, value in fields:
        phrase = check_blocked_phrases(value)
        if phrase:
            return name, phrase
    return None
