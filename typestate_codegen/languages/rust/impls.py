"""
Impl blocks for objects and their builders.

Builds template contexts for constructors, setters and the impls which
finish a build. The typestate shows up in three places:

- constructors return the builder with every marker `Missing`,
- a setter for a required property returns the builder with that one
  marker switched to `Exists`,
- completion impls exist only for the builder with every marker `Exists`.
"""

from typing import Any, Dict, List, Optional

from ...core.model import ANY_GENERIC_PARAMETER, FILE_MARKER, ObjectField, ParameterIn
from .builder import ApiObjectBuilder, StructField
from .docs import doc_lines
from .layout import BuilderLayout
from .naming import field_ident
from .typestate import TypeParameters, render_generics
from .types import (
    child_builder_type,
    convert_value,
    field_type,
    is_simple_type,
    leaf_type,
    wrap_delimited,
    with_any_generic,
)

TRANSMUTE = "unsafe { core::mem::transmute(self) }"


def _store(object_field: ObjectField, expr: str) -> str:
    """Wrap a value the way the object struct declares the field."""
    if object_field.boxed:
        expr = f"Box::new({expr})"
    if not object_field.is_required:
        expr = f"Some({expr})"
    return expr


def constructor_context(
    builder: ApiObjectBuilder, layout: BuilderLayout, add_comments: bool = True
) -> Dict[str, Any]:
    """Context for the function creating a builder."""
    if builder.method is None:
        summary = "Create a builder for this object."
    else:
        summary = (
            f"Create a builder for the `{builder.method.value.upper()}` "
            f"operation at `{builder.rel_path}`."
        )

    description = builder.description if add_comments and builder.description else summary
    generics, _ = render_generics(builder, TypeParameters.replace_all())

    return {
        "name": builder.constructor_name or "builder",
        "doc_lines": doc_lines(description),
        "deprecated": builder.deprecated,
        "ty": f"{builder.name}{generics}",
        "builder": builder.name,
        "slots": [] if layout.is_unit else layout.outer,
    }


def _parameter_setter(
    builder: ApiObjectBuilder, data: str, struct_field: StructField
) -> Dict[str, Any]:
    slot = f"{data}param_{struct_field.ident}"
    if struct_field.needs_file:
        return {
            "arg_ty": "impl AsRef<std::path::Path>",
            "statements": [f"{slot} = Some(value.as_ref().into());"],
        }

    ty = wrap_delimited(builder.helper_module_prefix, struct_field.ty, struct_field.delimiting)
    if ty != struct_field.ty:
        # Delimited wrappers are taken as they are.
        return {"arg_ty": ty, "statements": [f"{slot} = Some(value);"]}

    object_field = builder.get_object_field(struct_field.name)
    if struct_field.overridden and builder.body_required and object_field is not None:
        # The body field with the same name and type follows the parameter.
        body_slot = f"{data}body.{field_ident(object_field.name)}"
        statements = [
            f"let value: {ty} = value.into();",
            f"{slot} = Some(value.clone());",
            f"{body_slot} = {_store(object_field, 'value')};",
        ]
    else:
        statements = [f"{slot} = Some(value.into());"]

    return {"arg_ty": f"impl Into<{ty}>", "statements": statements}


def _field_setter(
    builder: ApiObjectBuilder, data: str, object_field: ObjectField
) -> Dict[str, Any]:
    body_slot = f"{data}body.{field_ident(object_field.name)}"
    child_fields = object_field.child_req_fields
    if child_fields and not is_simple_type(leaf_type(object_field.ty_path)):
        # Nested objects with required fields must come from finished builders.
        any_value = ANY_GENERIC_PARAMETER if object_field.needs_any else None
        arg_ty = child_builder_type(
            builder.helper_module_prefix, object_field.ty_path, child_fields, any_value
        )
        value = convert_value(object_field.ty_path)
    elif object_field.ty_path == FILE_MARKER:
        arg_ty = "impl AsRef<std::path::Path>"
        value = "value.as_ref().into()"
    else:
        ty = field_type(object_field.ty_path, object_field.needs_any)
        arg_ty = f"impl Into<{ty}>"
        value = "value.into()"

    return {"arg_ty": arg_ty, "statements": [f"{body_slot} = {_store(object_field, value)};"]}


def setter_contexts(
    builder: ApiObjectBuilder, layout: BuilderLayout, add_comments: bool = True
) -> List[Dict[str, Any]]:
    """Contexts for the setter methods of a builder, in property order."""
    data = f"self.{layout.data_path}"
    setters = []

    for struct_field in builder.struct_fields:
        if struct_field.prop.is_parameter:
            setter = _parameter_setter(builder, data, struct_field)
        elif builder.body_required:
            object_field = builder.get_object_field(struct_field.name)
            setter = _field_setter(builder, data, object_field)
        else:
            # Without a body there is nowhere to put object fields.
            continue

        if struct_field.prop.is_required:
            generics, _ = render_generics(
                builder, TypeParameters.change_one(struct_field.name)
            )
            setter["ret"] = f"{builder.name}{generics}"
            setter["tail"] = TRANSMUTE
        else:
            setter["ret"] = "Self"
            setter["tail"] = "self"

        setter["name"] = field_ident(struct_field.name)
        setter["doc_lines"] = doc_lines(struct_field.desc) if add_comments else []
        setters.append(setter)

    return setters


def from_context(builder: ApiObjectBuilder, layout: BuilderLayout) -> Dict[str, Any]:
    """Context for turning a finished object builder into the object."""
    generics, _ = render_generics(builder, TypeParameters.change_all())
    any_generic = f"<{ANY_GENERIC_PARAMETER}>" if builder.needs_any else ""

    return {
        "impl_generics": any_generic,
        "builder_ty": f"{builder.name}{generics}",
        "object_ty": f"{builder.object}{any_generic}",
        "data_path": layout.data_path,
    }


def _response_type(builder: ApiObjectBuilder, any_value: str) -> str:
    response = builder.response
    prefix = builder.helper_module_prefix

    if response.is_file():
        output = f"{prefix}util::ResponseStream"
    elif response.ty_path is None:
        output = any_value
    elif response.contains_any:
        output = with_any_generic(response.ty_path, any_value)
    else:
        output = response.ty_path

    if builder.is_list_op:
        output = f"Vec<{output}>"
    return output


def _rel_path_expr(builder: ApiObjectBuilder, layout: BuilderLayout) -> str:
    path = builder.rel_path or "/"
    args = []
    for struct_field in builder.struct_fields:
        if struct_field.param_loc != ParameterIn.PATH:
            continue

        # Format arguments must not be keywords, unlike slot names.
        arg = field_ident(struct_field.name)
        path = path.replace(f"{{{struct_field.name}}}", f"{{{arg}}}")
        args.append(
            f"{arg}=self.{layout.data_path}param_{struct_field.ident}.as_ref()"
            f'.expect("missing parameter {struct_field.name}?")'
        )

    if not args:
        return f'"{path}".into()'
    return f'format!("{path}", {", ".join(args)}).into()'


def sendable_context(
    builder: ApiObjectBuilder,
    layout: BuilderLayout,
    default_any_value: str,
) -> Dict[str, Any]:
    """Context for the impl sending a finished operation builder."""
    any_value: Optional[str] = None
    if builder.decoding is not None:
        any_value = builder.decoding[1].any_value
    any_value = any_value or default_any_value

    generics, _ = render_generics(builder, TypeParameters.change_all(), any_value)

    return {
        "prefix": builder.helper_module_prefix,
        "builder_ty": f"{builder.name}{generics}",
        "output": _response_type(builder, any_value),
        "method": builder.method.value.upper(),
        "rel_path_expr": _rel_path_expr(builder, layout),
    }
