"""
Seed validator for identity resolution input.

Validates names and profile URLs and folds names into handle-safe tokens.
"""

import re
import unicodedata
from typing import List
from urllib.parse import urlparse

from .errors import InputValidationError


class SeedValidator:
    """Validate and normalize person seed fields"""

    MAX_NAME_LENGTH = 200
    MAX_URL_LENGTH = 2048
    MAX_POST_TEXT_SIZE = 64 * 1024  # 64KB

    _TOKEN_RE = re.compile(r"[^a-z0-9]")

    def validate_name(self, name: str) -> str:
        """Require a non-blank name under the length limit"""
        if name is None or not str(name).strip():
            raise InputValidationError("Name is required")
        name = " ".join(str(name).split())
        if len(name) > self.MAX_NAME_LENGTH:
            raise InputValidationError(
                f"Name exceeds {self.MAX_NAME_LENGTH} characters ({len(name)})"
            )
        return name

    def validate_url(self, url: str) -> str:
        """Only accept absolute http(s) URLs"""
        url = (url or "").strip()
        if len(url) > self.MAX_URL_LENGTH:
            raise InputValidationError(f"URL exceeds {self.MAX_URL_LENGTH} characters")
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InputValidationError(f"Invalid profile URL: '{url}'")
        return url

    def name_tokens(self, name: str) -> List[str]:
        """
        Fold a display name into lowercase ASCII alphanumeric tokens.

        "João  da Conceição" -> ["joao", "da", "conceicao"]
        """
        folded = unicodedata.normalize("NFKD", name)
        folded = "".join(c for c in folded if not unicodedata.combining(c))
        tokens = [self._TOKEN_RE.sub("", part.lower()) for part in folded.split()]
        return [t for t in tokens if t]

    def sanitize_field(self, value: str) -> str:
        """Remove potentially malicious characters from a free-text field"""
        if not value:
            return value
        dangerous_chars = ["'", '"', ";", "--", "/*", "*/"]
        result = str(value)
        for char in dangerous_chars:
            result = result.replace(char, "")
        return result.strip()

    def truncate_text(self, text: str) -> str:
        """Cap post text at MAX_POST_TEXT_SIZE bytes of UTF-8"""
        encoded = text.encode("utf-8")
        if len(encoded) <= self.MAX_POST_TEXT_SIZE:
            return text
        return encoded[: self.MAX_POST_TEXT_SIZE].decode("utf-8", errors="ignore")
