"""
Naming utilities for safe code generation.

Handles name sanitization, case conversions and keyword conflicts.
Conversions are pure functions of their input, so the same model always
yields the same identifiers.
"""

import re
from enum import Enum
from typing import Dict, Optional, Set, Tuple


class NamingCase(Enum):
    """Different naming case styles."""

    SNAKE_CASE = "snake"  # user_name
    CAMEL_CASE = "camel"  # userName
    PASCAL_CASE = "pascal"  # UserName
    SCREAMING_SNAKE = "screaming_snake"  # USER_NAME


# Acronym runs ("HTTP" in "HTTPServer"), capitalised or lowercase words,
# and digit runs.
_WORD_RE = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z0-9]+|[0-9]+")


def split_words(name: str) -> list:
    """Split an identifier into words on case and separator boundaries."""
    return _WORD_RE.findall(name)


def to_snake_case(name: str) -> str:
    """Convert to snake_case."""
    return "_".join(word.lower() for word in split_words(name))


def to_pascal_case(name: str) -> str:
    """Convert to PascalCase."""
    return "".join(word[0].upper() + word[1:].lower() for word in split_words(name))


def to_camel_case(name: str) -> str:
    """Convert to camelCase."""
    pascal = to_pascal_case(name)
    return pascal[:1].lower() + pascal[1:]


class NameSanitizer:
    """Handles name sanitization and case conversion."""

    def __init__(
        self,
        reserved_words: Optional[Set[str]] = None,
        builtin_types: Optional[Set[str]] = None,
    ):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            builtin_types: Set of builtin type names that might conflict
        """
        self.reserved_words = reserved_words or set()
        self.builtin_types = builtin_types or set()
        self._name_cache: Dict[Tuple[str, NamingCase, str], str] = {}

    def sanitize_name(
        self,
        name: str,
        target_case: NamingCase = NamingCase.SNAKE_CASE,
        suffix_on_conflict: str = "_",
    ) -> str:
        """
        Sanitize a name for safe use in target language.

        Args:
            name: Original name to sanitize
            target_case: Desired case style
            suffix_on_conflict: Suffix to add for reserved words

        Returns:
            Sanitized name safe for use
        """
        cache_key = (name, target_case, suffix_on_conflict)
        if cache_key in self._name_cache:
            return self._name_cache[cache_key]

        converted = self.convert_case(name, target_case)
        final_name = self._resolve_conflicts(converted, suffix_on_conflict)

        self._name_cache[cache_key] = final_name
        return final_name

    def convert_case(self, name: str, target_case: NamingCase) -> str:
        """Convert name to target case style without keyword handling."""
        if target_case == NamingCase.SNAKE_CASE:
            converted = to_snake_case(name)
        elif target_case == NamingCase.CAMEL_CASE:
            converted = to_camel_case(name)
        elif target_case == NamingCase.PASCAL_CASE:
            converted = to_pascal_case(name)
        elif target_case == NamingCase.SCREAMING_SNAKE:
            converted = to_snake_case(name).upper()
        else:
            converted = name

        return self._clean_basic(converted)

    def _clean_basic(self, name: str) -> str:
        """Make sure the converted name is a usable identifier."""
        if not name:
            return "field"

        # Ensure doesn't start with number
        if name[0].isdigit():
            return f"_{name}"

        return name

    def _resolve_conflicts(self, name: str, suffix: str) -> str:
        """Resolve naming conflicts with reserved words."""
        if name in self.reserved_words or name in self.builtin_types:
            return f"{name}{suffix}"
        return name
