"""
Rust type string manipulation.

Type paths arrive from the model as Rust type strings (`String`,
`Vec<crate::pet::Pet>`, `std::collections::BTreeMap<String, i64>`). The only
generic wrappers the model ever produces are `Vec` and `BTreeMap`; anything
else is a broken model and raises `InvariantError`.
"""

from typing import List, Optional, Sequence, Tuple

from ...core.errors import InvariantError
from ...core.model import ANY_GENERIC_PARAMETER, FILE_MARKER, CollectionFormat
from .naming import marker_ident

VEC = "Vec"
BTREE_MAP = "std::collections::BTreeMap"
PATH_BUF = "std::path::PathBuf"


def is_simple_type(ty: str) -> bool:
    """Whether the type is not an object defined by the generated crate."""
    return "::" not in ty or ty.endswith("Delimited")


def _split_generic(ty: str) -> Optional[Tuple[str, str]]:
    """Split `Head<Args>` into `("Head", "Args")`, or None for non-generic types."""
    start = ty.find("<")
    if start < 0:
        return None
    if not ty.endswith(">"):
        raise InvariantError(f"Malformed generic type: {ty!r}")
    return ty[:start], ty[start + 1 : -1]


def _split_map_args(ty: str, args: str) -> Tuple[str, str]:
    key, sep, value = args.partition(", ")
    if not sep:
        raise InvariantError(f"Map type without key and value: {ty!r}")
    return key, value


def _container_kind(ty: str, head: str) -> str:
    if head.endswith(BTREE_MAP):
        return BTREE_MAP
    if head.endswith(VEC):
        return VEC
    raise InvariantError(
        f"Unexpected generic type {ty!r}: only {VEC} and {BTREE_MAP} are supported"
    )


def with_any_generic(ty: str, any_value: str = ANY_GENERIC_PARAMETER) -> str:
    """
    Substitute the `Any` slot into a type that "is" or "has" `Any`.

    Recurses through `Vec` and `BTreeMap` wrappers down to the leaf type.
    The placeholder itself becomes `any_value` and object types get
    `<any_value>` appended.
    """
    parts = _split_generic(ty)
    if parts is None:
        if ty == ANY_GENERIC_PARAMETER:
            return any_value
        if is_simple_type(ty):
            return ty
        return f"{ty}<{any_value}>"

    head, args = parts
    if _container_kind(ty, head) == VEC:
        return f"{head}<{with_any_generic(args, any_value)}>"

    key, value = _split_map_args(ty, args)
    return f"{head}<{key}, {with_any_generic(value, any_value)}>"


def wrap_delimited(
    module_prefix: str, ty: str, delimiting: Sequence[CollectionFormat]
) -> str:
    """
    Rewrite array parameter types into delimited wrappers.

    `Vec<Vec<String>>` with `[Csv, Pipes]` becomes
    `util::Delimited<util::Delimited<String, util::Pipes>, util::Csv>`:
    delimiters are listed outermost first and applied from the inside out.
    Parameters only ever hold basic types and arrays, so every `<>` pair
    belongs to a `Vec`.
    """
    if VEC not in ty:
        return ty

    depth = ty.count(">")
    if depth != len(delimiting):
        raise InvariantError(
            f"Type {ty!r} has {depth} level(s) of nesting but "
            f"{len(delimiting)} delimiter(s)"
        )

    rest = ty.replace(VEC, f"{module_prefix}util::Delimited")
    wrapped: List[str] = []
    for delim in reversed(delimiting):
        idx = rest.find(">")
        wrapped.append(rest[:idx])
        wrapped.append(f", {module_prefix}util::{delim.value}>")
        rest = rest[idx + 1 :]

    wrapped.append(rest)
    return "".join(wrapped)


def field_type(ty: str, needs_any: bool) -> str:
    """Type of an object field in the struct (before `Box` and `Option`)."""
    if ty == FILE_MARKER:
        return PATH_BUF
    if needs_any:
        return with_any_generic(ty)
    return ty


def param_type(
    module_prefix: str,
    ty: str,
    delimiting: Sequence[CollectionFormat],
    needs_file: bool,
) -> str:
    """Type stored for a parameter (before the `Option` wrapper)."""
    if needs_file:
        return PATH_BUF
    return wrap_delimited(module_prefix, ty, delimiting)


def child_builder_type(
    module_prefix: str,
    ty: str,
    child_fields: Sequence[str],
    any_value: Optional[str] = None,
) -> str:
    """
    Type accepting completed builders of the deepest child type.

    Container wrappers are kept, so `Vec<crate::pet::Pet>` with a required
    `name` becomes `Vec<crate::pet::PetBuilder<crate::generics::NameExists>>`.
    """
    parts = _split_generic(ty)
    if parts is None:
        generics = [
            f"{module_prefix}generics::{marker_ident(name)}Exists"
            for name in child_fields
        ]
        if any_value:
            generics.append(any_value)
        return f"{ty}Builder<{', '.join(generics)}>"

    head, args = parts
    if _container_kind(ty, head) == VEC:
        inner = child_builder_type(module_prefix, args, child_fields, any_value)
        return f"{head}<{inner}>"

    key, value = _split_map_args(ty, args)
    inner = child_builder_type(module_prefix, value, child_fields, any_value)
    return f"{head}<{key}, {inner}>"


def convert_value(ty: str, expr: str = "value") -> str:
    """Expression turning a value of `child_builder_type(ty)` into `ty`."""
    parts = _split_generic(ty)
    if parts is None:
        return f"{expr}.into()"

    head, args = parts
    if _container_kind(ty, head) == VEC:
        inner = convert_value(args)
        return f"{expr}.into_iter().map(|value| {inner}).collect::<{head}<_>>()"

    _, value = _split_map_args(ty, args)
    inner = convert_value(value)
    return (
        f"{expr}.into_iter().map(|(key, value)| (key, {inner}))"
        f".collect::<{head}<_, _>>()"
    )


def leaf_type(ty: str) -> str:
    """The deepest non-container type inside `Vec`/`BTreeMap` wrappers."""
    parts = _split_generic(ty)
    if parts is None:
        return ty

    head, args = parts
    if _container_kind(ty, head) == VEC:
        return leaf_type(args)
    return leaf_type(_split_map_args(ty, args)[1])
