"""
Storage layout of builder structs.

Setters which change a builder's typestate reinterpret the builder as the
new type with `core::mem::transmute` instead of copying its data. That is
only sound when the layout cannot depend on the marker parameters. Markers
live in `PhantomData` slots, so a builder holding only its body can be
transmuted directly. Once parameters have to sit next to the body and the
markers, the data moves into a separate marker-free container and the
builder becomes `#[repr(transparent)]` over it.
"""

from dataclasses import dataclass
from typing import List

from ...core.model import ANY_GENERIC_PARAMETER
from .builder import ApiObjectBuilder
from .types import param_type
from .typestate import required_markers

PHANTOM = "core::marker::PhantomData"


@dataclass(frozen=True)
class Slot:
    """A struct field of the generated builder."""

    name: str
    ty: str
    # Expression initialising the slot in constructors.
    init: str


@dataclass(frozen=True)
class BuilderLayout:
    """Slots of the builder struct and of its container (if any)."""

    needs_container: bool
    outer: List[Slot]
    container: List[Slot]
    container_generics: str = ""

    @property
    def is_unit(self) -> bool:
        """Builder holds nothing and is emitted as a unit struct."""
        return not self.outer

    @property
    def data_path(self) -> str:
        """Path from `self` to the slots holding body and parameters."""
        return "inner." if self.needs_container else ""


def has_atleast_one_field(builder: ApiObjectBuilder) -> bool:
    """Whether the builder stores a parameter or tracks a required property."""
    return any(f.prop.is_parameter or f.prop.is_required for f in builder.struct_fields)


def needs_container(builder: ApiObjectBuilder) -> bool:
    """
    Whether body and parameters must move into a separate container.

    That is the case when some parameter is required, or when the body is
    required, has a required field and the operation has any parameter.
    A builder with just a body is transmuted directly.
    """
    params = list(builder.local_params) + list(builder.global_params)
    if any(p.required for p in params):
        return True

    return (
        builder.body_required
        and any(f.is_required for f in builder.fields)
        and len(params) > 0
    )


def plan_layout(builder: ApiObjectBuilder) -> BuilderLayout:
    """Lay out the slots of a builder and its container."""
    prefix = builder.helper_module_prefix
    container = needs_container(builder)
    any_generic = f"<{ANY_GENERIC_PARAMETER}>" if builder.needs_any else ""

    outer: List[Slot] = []
    inner: List[Slot] = []
    data = inner if container else outer
    container_generics = ""
    type_params = {m.property_name: m.generic for m in required_markers(builder)}

    if container:
        # The container is generic over `Any` only through the body.
        if builder.body_required:
            container_generics = any_generic
        inner_ty = f"{builder.container_name}{container_generics}"
        outer.append(Slot("inner", inner_ty, "Default::default()"))

    if builder.body_required:
        # `self::` because the object name may clash with a type parameter.
        data.append(
            Slot("body", f"self::{builder.object}{any_generic}", "Default::default()")
        )

    for struct_field in builder.struct_fields:
        if struct_field.prop.is_parameter:
            ty = param_type(
                prefix, struct_field.ty, struct_field.delimiting, struct_field.needs_file
            )
            data.append(Slot(f"param_{struct_field.ident}", f"Option<{ty}>", "None"))

        if struct_field.prop.is_required:
            marker = type_params[struct_field.name]
            outer.append(Slot(struct_field.marker_slot, f"{PHANTOM}<{marker}>", PHANTOM))

    # A builder generic over `Any` must use it somewhere.
    if builder.needs_any and not builder.body_required:
        outer.append(Slot("_any", f"{PHANTOM}<{ANY_GENERIC_PARAMETER}>", PHANTOM))

    return BuilderLayout(
        needs_container=container,
        outer=outer,
        container=inner,
        container_generics=container_generics,
    )
