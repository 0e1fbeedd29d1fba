"""
Typestate generics for builders.

Every required property of a builder gets one generic parameter. The
parameter is instantiated with `generics::Missing{Name}` by the constructor
and switched to `generics::{Name}Exists` by that property's setter. Code
finishing the build is only implemented for the instantiation where all
markers are `Exists`, so the compiler rejects builds with missing properties.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from ...core.model import ANY_GENERIC_PARAMETER
from .builder import ApiObjectBuilder
from .naming import marker_ident


class TypeParamMode(Enum):
    """How required-property markers are rendered."""

    GENERIC = "generic"
    CHANGE_ONE = "change_one"
    CHANGE_ALL = "change_all"
    REPLACE_ALL = "replace_all"


@dataclass(frozen=True)
class TypeParameters:
    """Rendering mode, plus the property name for `change_one`."""

    mode: TypeParamMode
    name: Optional[str] = None

    @classmethod
    def generic(cls) -> "TypeParameters":
        """Plain parameter names, for declaring the builder."""
        return cls(TypeParamMode.GENERIC)

    @classmethod
    def change_one(cls, name: str) -> "TypeParameters":
        """Mark one property as set, for the return type of its setter."""
        return cls(TypeParamMode.CHANGE_ONE, name)

    @classmethod
    def change_all(cls) -> "TypeParameters":
        """Mark every property as set, for the build-completion impl."""
        return cls(TypeParamMode.CHANGE_ALL)

    @classmethod
    def replace_all(cls) -> "TypeParameters":
        """Mark every property as missing, for the constructor."""
        return cls(TypeParamMode.REPLACE_ALL)


@dataclass(frozen=True)
class Marker:
    """Marker types backing one typestate parameter."""

    property_name: str
    param: str
    # Set when `param` is already the name of the dynamic type parameter.
    type_param: Optional[str] = None

    @property
    def generic(self) -> str:
        """Name of the builder's type parameter for this property."""
        return self.type_param or self.param

    @property
    def missing(self) -> str:
        return f"Missing{self.param}"

    @property
    def exists(self) -> str:
        return f"{self.param}Exists"


def required_markers(builder: ApiObjectBuilder) -> List[Marker]:
    """Markers for the required properties of a builder, in generic order."""
    params = [(f.name, marker_ident(f.name)) for f in builder.required_fields]
    if not builder.needs_any:
        return [Marker(name, param) for name, param in params]

    taken = {param for _, param in params} | {ANY_GENERIC_PARAMETER}
    markers = []
    for name, param in params:
        type_param = None
        if param == ANY_GENERIC_PARAMETER:
            type_param = f"{param}Marker"
            while type_param in taken:
                type_param += "Marker"
        markers.append(Marker(name, param, type_param))
    return markers


def generic_args(
    builder: ApiObjectBuilder,
    params: TypeParameters,
    any_value: Optional[str] = None,
) -> List[str]:
    """Generic arguments of the builder type for the given mode."""
    generics_path = f"{builder.helper_module_prefix}generics::"
    args = []
    for marker in required_markers(builder):
        mode = params.mode
        if mode == TypeParamMode.CHANGE_ALL or (
            mode == TypeParamMode.CHANGE_ONE and marker.property_name == params.name
        ):
            args.append(generics_path + marker.exists)
        elif mode == TypeParamMode.REPLACE_ALL:
            args.append(generics_path + marker.missing)
        else:
            args.append(marker.generic)

    # The `Any` slot is always last and never touched by the mode.
    if builder.needs_any:
        args.append(any_value or ANY_GENERIC_PARAMETER)

    return args


def render_generics(
    builder: ApiObjectBuilder,
    params: Optional[TypeParameters] = None,
    any_value: Optional[str] = None,
) -> Tuple[str, int]:
    """
    Render the generic parameter list of a builder (including `<>`).

    Returns the rendered text (empty when there are no parameters) and the
    number of parameters.
    """
    args = generic_args(builder, params or TypeParameters.generic(), any_value)
    if not args:
        return "", 0
    return f"<{', '.join(args)}>", len(args)
