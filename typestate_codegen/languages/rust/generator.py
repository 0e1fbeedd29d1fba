"""
Rust code generator implementation.

Generates serde-enabled Rust structs for API objects, along with typestate
builders for creating objects and for calling the operations that address
them.
"""

from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from ...core.config import GeneratorConfig
from ...core.errors import GeneratorError
from ...core.generator import CodeGenerator
from ...core.model import ANY_GENERIC_PARAMETER, ApiObject, ObjectField
from ...logging_config import get_logger
from .builder import ApiObjectBuilder, describe_collision
from .docs import doc_lines
from .impls import constructor_context, from_context, sendable_context, setter_contexts
from .layout import plan_layout
from .naming import field_ident, marker_ident
from .typestate import render_generics, required_markers
from .types import field_type

logger = get_logger(__name__)

FILE_HEADER = "use serde::{Deserialize, Serialize};\n"


class RustGenerator(CodeGenerator):
    """Code generator for Rust structs and typestate builders."""

    def __init__(self, config: Optional[Union[GeneratorConfig, Dict[str, Any]]] = None):
        """Initialize Rust generator with configuration."""
        super().__init__(config)
        self.prefix = self.config.helper_module_prefix
        self.add_comments = self.config.add_comments

    def get_template_directory(self) -> Optional[Path]:
        """Return the Rust templates directory."""
        template_dir = Path(__file__).parent / "templates"
        return template_dir if template_dir.exists() else None

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "rust"

    @property
    def file_extension(self) -> str:
        """Return Rust file extension."""
        return ".rs"

    def _render(self, template_name: str, context: Dict[str, Any]) -> str:
        if not self.template_exists(template_name):
            raise GeneratorError(f"{template_name} template not found")
        return self.render_template(template_name, context)

    def builders(self, obj: ApiObject) -> List[ApiObjectBuilder]:
        """
        Builders for an object: the object's own builder first, followed by
        one builder per operation, in path order and then method order.
        """
        paths = obj.sorted_paths()
        multiple_builders_exist = sum(1 for _, path_ops in paths if path_ops.req) > 1
        common = {
            "object": obj.name,
            "fields": obj.fields,
            "helper_module_prefix": self.prefix,
            "needs_any": obj.needs_any,
            "field_collision": self.config.field_collision,
            "unnamed_operations": self.config.unnamed_operations,
        }

        builders = [ApiObjectBuilder(body_required=True, **common)]
        for idx, (rel_path, path_ops) in enumerate(paths):
            for method, req in path_ops.operations():
                builders.append(
                    ApiObjectBuilder(
                        idx=idx,
                        description=req.description,
                        body_required=req.body_required,
                        op_id=req.id,
                        deprecated=req.deprecated,
                        method=method,
                        rel_path=rel_path,
                        is_list_op=req.listable,
                        response=req.response,
                        encoding=req.encoding,
                        decoding=req.decoding,
                        multiple_builders_exist=multiple_builders_exist,
                        global_params=path_ops.params,
                        local_params=req.params,
                        **common,
                    )
                )

        return builders

    def _field_data(self, object_field: ObjectField) -> Dict[str, Any]:
        """Template data for one field of the object struct."""
        name = field_ident(object_field.name)

        ty = field_type(object_field.ty_path, object_field.needs_any)
        if object_field.boxed:
            ty = f"Box<{ty}>"
        if not object_field.is_required:
            ty = f"Option<{ty}>"

        return {
            "name": name,
            "ty": ty,
            "rename": object_field.name if name != object_field.name else None,
            "doc_lines": doc_lines(object_field.description) if self.add_comments else [],
        }

    def _struct_fields(self, obj: ApiObject) -> List[Dict[str, Any]]:
        """Template data for the object's fields, one per Rust identifier."""
        fields = []
        seen: Dict[str, str] = {}
        for object_field in obj.fields:
            ident = field_ident(object_field.name)
            if ident in seen:
                message = (
                    f"{obj.name}: field '{object_field.name}' has the same Rust "
                    f"name '{ident}' as '{seen[ident]}'"
                )
                if self.config.field_collision == "error":
                    raise GeneratorError(message)
                logger.debug("%s; dropping it", message)
                continue

            seen[ident] = object_field.name
            fields.append(self._field_data(object_field))
        return fields

    def render_object(self, obj: ApiObject) -> str:
        """Render the struct declaration of an object."""
        context = {
            "name": obj.name,
            "generics": f"<{ANY_GENERIC_PARAMETER}>" if obj.needs_any else "",
            "derives": self.config.derives,
            "doc_lines": doc_lines(obj.description) if self.add_comments else [],
            "fields": self._struct_fields(obj),
        }
        return self._render("object.rs.j2", context)

    def render_builder(self, builder: ApiObjectBuilder) -> str:
        """Render the struct declaration of a builder (and its container)."""
        ctor = builder.constructor_name
        if builder.method is not None and ctor is not None:
            headline = (
                f"Builder created by [`{builder.object}::{ctor}`]"
                f"(./struct.{builder.object}.html#method.{ctor}) method for a "
                f"`{builder.method.value.upper()}` operation associated with "
                f"`{builder.object}`."
            )
        else:
            headline = (
                f"Builder for [`{builder.object}`](./struct.{builder.object}.html) object."
            )

        generics, _ = render_generics(builder)
        context = {
            # Intra-doc links must survive, so the headline is not escaped.
            "doc_lines": [f"/// {headline}"],
            "name": builder.name,
            "generics": generics,
            "container_name": builder.container_name,
            "layout": plan_layout(builder),
        }
        return self._render("builder.rs.j2", context)

    def render_impls(self, obj: ApiObject, builders: Sequence[ApiObjectBuilder]) -> List[str]:
        """Render constructors, setters and completion impls."""
        layouts = [plan_layout(builder) for builder in builders]
        any_generic = f"<{ANY_GENERIC_PARAMETER}>" if obj.needs_any else ""

        parts = [
            self._render(
                "constructors.rs.j2",
                {
                    "impl_generics": f"<{ANY_GENERIC_PARAMETER}: Default>" if obj.needs_any else "",
                    "name": obj.name,
                    "generics": any_generic,
                    "constructors": [
                        constructor_context(builder, layout, self.add_comments)
                        for builder, layout in zip(builders, layouts)
                    ],
                },
            )
        ]

        for builder, layout in zip(builders, layouts):
            setters = setter_contexts(builder, layout, self.add_comments)
            if setters:
                generics, _ = render_generics(builder)
                parts.append(
                    self._render(
                        "setters.rs.j2",
                        {"name": builder.name, "generics": generics, "setters": setters},
                    )
                )

            if builder.method is None:
                parts.append(self._render("from_builder.rs.j2", from_context(builder, layout)))
            else:
                context = sendable_context(builder, layout, self.config.default_any_value)
                parts.append(self._render("sendable.rs.j2", context))

        return parts

    def generate_single_object(self, obj: ApiObject) -> str:
        """Generate the struct, builders and impls of one object."""
        builders = self.builders(obj)
        logger.debug("Rendering %s with %d builder(s)", obj.name, len(builders))

        parts = [self.render_object(obj)]
        parts.extend(self.render_builder(builder) for builder in builders)
        if self.config.emit_impls:
            parts.extend(self.render_impls(obj, builders))

        return "\n".join(parts)

    def marker_names(self, objects: Sequence[ApiObject]) -> List[str]:
        """Names of every marker type referenced by the builders, sorted."""
        names = set()
        for obj in objects:
            for builder in self.builders(obj):
                for marker in required_markers(builder):
                    names.add(marker.missing)
                    names.add(marker.exists)

            # Setters taking child builders name the child's markers too.
            for object_field in obj.fields:
                for child in object_field.child_req_fields:
                    names.add(f"Missing{marker_ident(child)}")
                    names.add(f"{marker_ident(child)}Exists")

        return sorted(names)

    def generate(self, objects: Sequence[ApiObject]) -> str:
        """Generate complete Rust code for all objects."""
        parts = [FILE_HEADER]
        parts.extend(self.generate_single_object(obj) for obj in objects)

        markers = self.marker_names(objects)
        if markers:
            parts.append(self._render("generics_module.rs.j2", {"markers": markers}))

        return "\n".join(parts)

    def validate_objects(self, objects: Sequence[ApiObject]) -> List[str]:
        """Validate objects, adding Rust-specific checks."""
        warnings = super().validate_objects(objects)

        for obj in objects:
            idents = Counter(field_ident(f.name) for f in obj.fields)
            for ident, count in sorted(idents.items()):
                if count > 1:
                    warnings.append(
                        f"Object '{obj.name}' has {count} fields named '{ident}' in Rust"
                    )

            for builder in self.builders(obj):
                for kept, dropped in builder.collisions:
                    warnings.append(f"{builder.name}: {describe_collision(kept, dropped)}")

                for marker in required_markers(builder):
                    if marker.type_param:
                        warnings.append(
                            f"{builder.name}: type parameter of '{marker.property_name}' "
                            f"is named '{marker.generic}' since '{marker.param}' is taken"
                        )

                unnamed = builder.method is not None and not builder.op_id
                if unnamed and builder.multiple_builders_exist:
                    warnings.append(
                        f"Operation {builder.method.value.upper()} {builder.rel_path} on "
                        f"'{obj.name}' has no operation ID"
                    )

        return warnings
