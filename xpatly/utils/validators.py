"""
Validation helpers shared by the request schemas.
Raise ValueError so pydantic reports them as field errors.
"""

import re
from typing import Any, Dict, Optional

from xpatly.utils.content_filter import check_blocked_phrases


class ValidationUtils:
    """
    Reusable field checks for listings, accounts and pagination.
    """

    YOUTUBE_URL_PATTERN = re.compile(r"^(https?://)?(www\.)?(youtube\.com|youtu\.be)/.+$")
    PHONE_PATTERN = re.compile(r"^\+?[0-9 ()-]{6,20}$")

    @staticmethod
    def clean_required_text(value: Optional[str], field_name: str) -> str:
        """Strip whitespace and reject blank values."""
        if value is None or not value.strip():
            raise ValueError(f"{field_name} cannot be empty")
        return value.strip()

    @staticmethod
    def validate_password_strength(password: str) -> str:
        """
        Check password complexity.

        Args:
            password: Plain text password

        Returns:
            The unchanged password

        Raises:
            ValueError: If the password is too weak
        """
        if len(password) < 8:
            raise ValueError("Password must be at least 8 characters")
        if not re.search(r"[A-Z]", password):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"[a-z]", password):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"[0-9]", password):
            raise ValueError("Password must contain at least one number")
        return password

    @staticmethod
    def validate_youtube_url(url: Optional[str]) -> Optional[str]:
        """Accept empty values or youtube.com / youtu.be links."""
        if url is None or not url.strip():
            return None
        url = url.strip()
        if not ValidationUtils.YOUTUBE_URL_PATTERN.match(url):
            raise ValueError("Invalid YouTube URL")
        return url

    @staticmethod
    def validate_phone_number(phone: Optional[str]) -> Optional[str]:
        if phone is None or not phone.strip():
            return None
        phone = phone.strip()
        if not ValidationUtils.PHONE_PATTERN.match(phone):
            raise ValueError("Invalid phone number")
        return phone

    @staticmethod
    def reject_blocked_phrases(value: str, field_name: str) -> str:
        """
        Hard validation path of the content filter.

        Raises:
            ValueError: If the text contains a blocked phrase
        """
        if check_blocked_phrases(value):
            raise ValueError(f"{field_name} contains discriminatory language")
        return value

    @staticmethod
    def validate_pagination(page: int, per_page: int, max_per_page: int) -> Dict[str, Any]:
        """
        Compute offset and limit for a page request.

        Args:
            page: 1-based page number
            per_page: Requested page size
            max_per_page: Upper bound for the page size

        Returns:
            Dictionary with page, per_page, offset and limit
        """
        page = max(page, 1)
        per_page = min(max(per_page, 1), max_per_page)
        return {
            "page": page,
            "per_page": per_page,
            "offset": (page - 1) * per_page,
            "limit": per_page,
        }


def total_pages(total: int, per_page: int) -> int:
    """Number of pages needed for total items."""
    if total <= 0:
        return 0
    return (total + per_page - 1) // per_page
