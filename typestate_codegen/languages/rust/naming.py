"""
Rust-specific naming utilities and sanitization.

Handles Rust keywords and the identifier conventions of generated code.
"""

from ...core.naming import NameSanitizer, NamingCase

# Strict, reserved and weak keywords across editions.
RUST_KEYWORDS = frozenset(
    {
        "abstract",
        "as",
        "async",
        "await",
        "become",
        "box",
        "break",
        "const",
        "continue",
        "crate",
        "do",
        "dyn",
        "else",
        "enum",
        "extern",
        "false",
        "final",
        "fn",
        "for",
        "if",
        "impl",
        "in",
        "let",
        "loop",
        "macro",
        "match",
        "mod",
        "move",
        "mut",
        "override",
        "priv",
        "pub",
        "ref",
        "return",
        "self",
        "Self",
        "static",
        "struct",
        "super",
        "trait",
        "true",
        "try",
        "type",
        "typeof",
        "unsafe",
        "unsized",
        "use",
        "virtual",
        "where",
        "while",
        "yield",
    }
)


def create_rust_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for Rust."""
    return NameSanitizer(set(RUST_KEYWORDS))


_sanitizer = create_rust_sanitizer()


def field_ident(name: str) -> str:
    """Snake-cased identifier for a struct field or function."""
    return _sanitizer.sanitize_name(name, NamingCase.SNAKE_CASE)


def snake_ident(name: str) -> str:
    """Snake-cased name for use after a prefix (no keyword handling needed)."""
    return _sanitizer.convert_case(name, NamingCase.SNAKE_CASE)


def marker_ident(name: str) -> str:
    """Pascal-cased name of the typestate marker for a property."""
    return _sanitizer.sanitize_name(name, NamingCase.PASCAL_CASE)
