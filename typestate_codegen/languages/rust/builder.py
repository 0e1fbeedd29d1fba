"""
Builder views of API objects.

An `ApiObjectBuilder` combines one object's fields with the parameters of
one operation. It is created per object and operation while rendering and
only borrows from the object model.
"""

import itertools
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import cached_property
from typing import Dict, List, Optional, Sequence, Tuple

from ...core.errors import GeneratorError
from ...core.model import (
    FILE_MARKER,
    CollectionFormat,
    Coder,
    HttpMethod,
    ObjectField,
    Parameter,
    ParameterIn,
    Response,
)
from ...logging_config import get_logger
from .naming import field_ident, snake_ident

logger = get_logger(__name__)


class Property(Enum):
    """What a builder property represents."""

    REQUIRED_FIELD = "required_field"
    OPTIONAL_FIELD = "optional_field"
    REQUIRED_PARAM = "required_param"
    OPTIONAL_PARAM = "optional_param"

    @property
    def is_required(self) -> bool:
        return self in (Property.REQUIRED_FIELD, Property.REQUIRED_PARAM)

    @property
    def is_parameter(self) -> bool:
        return self in (Property.REQUIRED_PARAM, Property.OPTIONAL_PARAM)

    @property
    def is_field(self) -> bool:
        return self in (Property.REQUIRED_FIELD, Property.OPTIONAL_FIELD)


@dataclass(frozen=True)
class StructField:
    """An object field or a parameter, as seen by the builder."""

    name: str
    ty: str
    prop: Property
    desc: Optional[str] = None
    # A field with the same Rust name and type was merged into this parameter.
    overridden: bool = False
    # Required fields of the deepest child type. When present, the value is
    # set through the child's builder instead of a literal.
    strict_child_fields: Sequence[str] = ()
    delimiting: Sequence[CollectionFormat] = ()
    param_loc: Optional[ParameterIn] = None
    needs_any: bool = False
    needs_file: bool = False

    @classmethod
    def from_field(cls, object_field: ObjectField, body_required: bool) -> "StructField":
        # Inner requiredness only matters when the body itself is required.
        if body_required and object_field.is_required:
            prop = Property.REQUIRED_FIELD
        else:
            prop = Property.OPTIONAL_FIELD

        return cls(
            name=object_field.name,
            ty=object_field.ty_path,
            prop=prop,
            desc=object_field.description,
            strict_child_fields=tuple(object_field.child_req_fields),
            needs_any=object_field.needs_any,
            needs_file=object_field.ty_path == FILE_MARKER,
        )

    @classmethod
    def from_parameter(cls, param: Parameter) -> "StructField":
        return cls(
            name=param.name,
            ty=param.ty_path,
            prop=Property.REQUIRED_PARAM if param.required else Property.OPTIONAL_PARAM,
            desc=param.description,
            delimiting=tuple(param.delimiting),
            param_loc=param.presence,
            needs_file=param.ty_path == FILE_MARKER,
        )

    @property
    def ident(self) -> str:
        """Snake-cased name used in slot and method names."""
        return snake_ident(self.name)

    @property
    def marker_slot(self) -> str:
        """Name of the phantom slot carrying this property's typestate."""
        if self.prop.is_parameter:
            return f"_param_{self.ident}"
        return f"_{self.ident}"


def describe_collision(kept: StructField, dropped: StructField) -> str:
    """Explain why `dropped` lost to `kept` during unification."""
    if kept.name == dropped.name:
        return (
            f"'{dropped.name}' declared as '{dropped.ty}' is dropped "
            f"in favour of '{kept.ty}'"
        )
    return (
        f"'{dropped.name}' is dropped because '{kept.name}' has the same "
        f"Rust name '{field_ident(kept.name)}'"
    )


@dataclass
class ApiObjectBuilder:
    """Builder for some API object, either for the object itself or for an operation."""

    object: str
    fields: Sequence[ObjectField] = ()
    # Index of the path this operation lives in.
    idx: int = 0
    description: Optional[str] = None
    body_required: bool = False
    # Prefix for addressing helper modules from crate root.
    helper_module_prefix: str = "crate::"
    op_id: Optional[str] = None
    deprecated: bool = False
    # Object builders have neither method nor path.
    method: Optional[HttpMethod] = None
    rel_path: Optional[str] = None
    is_list_op: bool = False
    response: Response = field(default_factory=Response)
    encoding: Optional[Tuple[str, Coder]] = None
    decoding: Optional[Tuple[str, Coder]] = None
    multiple_builders_exist: bool = False
    global_params: Sequence[Parameter] = ()
    local_params: Sequence[Parameter] = ()
    needs_any: bool = False
    # "drop" or "error", see GeneratorConfig.field_collision
    field_collision: str = "drop"
    # "indexed" or "error", see GeneratorConfig.unnamed_operations
    unnamed_operations: str = "indexed"

    @property
    def name(self) -> str:
        """Name of the builder struct."""
        method = self.method.value if self.method else ""
        suffix = str(self.idx) if self.idx > 0 else ""
        return f"{self.object}{method}Builder{suffix}"

    @property
    def container_name(self) -> str:
        """Name of the struct holding the builder's data when it is split out."""
        return f"{self.name}Container"

    @cached_property
    def constructor_name(self) -> Optional[str]:
        """Name of the function creating this builder (None for object builders)."""
        if self.op_id:
            return field_ident(self.op_id)

        if self.method is None:
            return None

        name = field_ident(str(self.method))
        if not self.multiple_builders_exist:
            return name

        # Same method may show up in several paths, so disambiguate by path.
        if self.unnamed_operations == "error":
            raise GeneratorError(
                f"Operation {self.method.value.upper()} {self.rel_path} on "
                f"{self.object} has no operation ID to name its constructor"
            )

        if self.idx > 0:
            name = f"{name}_{self.idx}"

        logger.debug(
            "No operation ID for %s %s on %s; using constructor name %r",
            self.method.value.upper(),
            self.rel_path,
            self.object,
            name,
        )
        return name

    @property
    def struct_fields(self) -> Tuple[StructField, ...]:
        """
        All fields and parameters of the builder, with unique names.

        Parameters come first (path-wide, then operation-specific) followed
        by object fields. An operation parameter replaces a path parameter
        of the same name in place. Names are compared as Rust identifiers,
        so `petId` and `pet_id` collide. When a field collides with a
        parameter of the same type, the parameter is kept and marked as
        overridden. Any other collision drops the later declaration (or is
        rejected, depending on the collision policy).
        """
        return self._unified[0]

    @property
    def collisions(self) -> Tuple[Tuple[StructField, StructField], ...]:
        """Pairs of (kept, dropped) declarations that could not be merged."""
        return self._unified[1]

    @cached_property
    def _unified(
        self,
    ) -> Tuple[Tuple[StructField, ...], Tuple[Tuple[StructField, StructField], ...]]:
        params: Dict[str, StructField] = {}
        for param in itertools.chain(self.global_params, self.local_params):
            if param.name in params:
                logger.debug(
                    "Parameter %r of %s overrides an earlier declaration",
                    param.name,
                    self.name,
                )
            params[param.name] = StructField.from_parameter(param)

        object_fields = (
            StructField.from_field(f, self.body_required) for f in self.fields
        )

        unified: List[StructField] = []
        dropped: List[Tuple[StructField, StructField]] = []
        # Keyed by Rust identifier, since setters and markers are named by it.
        positions: Dict[str, int] = {}
        for candidate in itertools.chain(params.values(), object_fields):
            ident = field_ident(candidate.name)
            pos = positions.get(ident)
            if pos is None:
                positions[ident] = len(unified)
                unified.append(candidate)
                continue

            existing = unified[pos]
            if (
                existing.prop.is_parameter
                and candidate.prop.is_field
                and existing.ty == candidate.ty
            ):
                unified[pos] = replace(existing, overridden=True)
            else:
                self._reject_collision(existing, candidate)
                dropped.append((existing, candidate))

        return tuple(unified), tuple(dropped)

    def _reject_collision(self, kept: StructField, dropped: StructField) -> None:
        message = f"{self.name}: {describe_collision(kept, dropped)}"
        if self.field_collision == "error":
            raise GeneratorError(message)
        # Reported once per generation by RustGenerator.validate_objects.
        logger.debug(message)

    @property
    def required_fields(self) -> List[StructField]:
        """Properties which get a typestate marker, in unification order."""
        return [f for f in self.struct_fields if f.prop.is_required]

    def get_object_field(self, name: str) -> Optional[ObjectField]:
        """First object field with the same Rust identifier as `name`, if any."""
        ident = field_ident(name)
        for object_field in self.fields:
            if field_ident(object_field.name) == ident:
                return object_field
        return None
