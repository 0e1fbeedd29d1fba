import io
import logging

import pytest

from typestate_codegen.core.errors import GeneratorError, InvariantError
from typestate_codegen.core.generator import GenerationResult, generate_code
from typestate_codegen.core.model import (
    ApiObject,
    CollectionFormat,
    HttpMethod,
    ObjectField,
    OpRequirement,
    Parameter,
    ParameterIn,
    PathOps,
)
from typestate_codegen.languages.rust import RustGenerator

from conftest import make_pet


def two_paths(reverse=False):
    paths = [
        ("/pets", PathOps(req={HttpMethod.GET: OpRequirement(listable=True)})),
        (
            "/pets/{id}",
            PathOps(
                req={
                    HttpMethod.DELETE: OpRequirement(),
                    HttpMethod.GET: OpRequirement(),
                }
            ),
        ),
    ]
    if reverse:
        paths.reverse()
    return make_pet(dict(paths))


class TestBuilders:
    def test_object_builder_first(self, generator, pet_post):
        builders = generator.builders(pet_post)
        assert [b.name for b in builders] == ["PetBuilder", "PetPostBuilder"]
        assert builders[0].body_required
        assert builders[0].method is None

    def test_order_and_indexing(self, generator):
        builders = generator.builders(two_paths(reverse=True))
        assert [(b.name, b.constructor_name) for b in builders] == [
            ("PetBuilder", None),
            ("PetGetBuilder", "get"),
            ("PetGetBuilder1", "get_1"),
            ("PetDeleteBuilder1", "delete_1"),
        ]


class TestGenerate:
    def test_file_layout(self, generator, pet_get):
        code = generator.generate([pet_get])
        assert code.startswith("use serde::{Deserialize, Serialize};\n\n/// A pet.\n")
        assert code.index("pub struct Pet {") < code.index("pub struct PetBuilder<")
        assert code.index("pub struct PetGetBuilder<") < code.index("impl Pet {")
        assert code.rstrip().endswith("}")
        assert (
            "pub mod generics {\n"
            "    #[derive(Debug, Clone)]\n"
            "    pub struct IdExists;\n"
            "\n"
            "    #[derive(Debug, Clone)]\n"
            "    pub struct MissingId;\n"
        ) in code

    def test_marker_names(self, generator, pet_post):
        assert generator.marker_names([pet_post]) == [
            "IdExists",
            "MissingId",
            "MissingName",
            "MissingVerbose",
            "NameExists",
            "VerboseExists",
        ]

    def test_idempotent(self, generator, pet_get, pet_post, thing):
        objects = [pet_get, thing, pet_post]
        assert generator.generate(objects) == generator.generate(objects)
        assert generator.generate(objects) == RustGenerator().generate(objects)

    def test_path_insertion_order_does_not_matter(self, generator):
        assert generator.generate([two_paths()]) == generator.generate(
            [two_paths(reverse=True)]
        )

    def test_impls_can_be_disabled(self, pet_get):
        code = RustGenerator({"emit_impls": False}).generate([pet_get])
        assert "impl " not in code
        assert "pub struct PetGetBuilder<Id>" in code

    def test_helper_module_prefix(self, pet_get):
        code = RustGenerator({"helper_module_prefix": "petstore::"}).generate([pet_get])
        assert "petstore::generics::MissingId" in code
        assert "petstore::client::Sendable<Client>" in code
        assert "crate::generics" not in code

    def test_missing_template(self, generator, pet, monkeypatch):
        monkeypatch.setattr(generator, "template_exists", lambda name: False)
        with pytest.raises(GeneratorError, match="object.rs.j2"):
            generator.generate([pet])

    def test_write(self, generator, pet):
        sink = io.StringIO()
        generator.write([pet], sink)
        assert sink.getvalue() == generator.generate([pet])


class TestValidateObjects:
    def test_clean_model(self, generator, pet_post):
        assert generator.validate_objects([pet_post]) == []

    def test_warnings(self, generator, pet_get):
        empty = ApiObject(name="Empty")
        warnings = generator.validate_objects([pet_get, empty, empty, two_paths()])
        assert "Object name 'Empty' is used by 2 objects" in warnings
        assert "Object name 'Pet' is used by 2 objects" in warnings
        assert "Object 'Empty' has no fields" in warnings
        assert any("'id' declared as 'i64' is dropped" in w for w in warnings)
        assert any("GET /pets/{id}" in w and "no operation ID" in w for w in warnings)

    def test_rust_identifier_clash(self, generator):
        obj = ApiObject(
            name="Clash",
            fields=[ObjectField("petId", "i64"), ObjectField("pet_id", "i64")],
        )
        assert generator.validate_objects([obj]) == [
            "Object 'Clash' has 2 fields named 'pet_id' in Rust",
            "ClashBuilder: 'pet_id' is dropped because 'petId' has the same Rust name 'pet_id'",
        ]

    def test_parameter_and_field_with_same_rust_name(self, generator):
        obj = ApiObject(
            name="Pet",
            fields=[ObjectField("pet_id", "String", is_required=True)],
            paths={
                "/pets/{petId}": PathOps(
                    req={
                        HttpMethod.PUT: OpRequirement(
                            id="updatePet",
                            body_required=True,
                            params=[
                                Parameter(
                                    "petId", "i64", required=True, presence=ParameterIn.PATH
                                )
                            ],
                        )
                    }
                )
            },
        )
        assert generator.validate_objects([obj]) == [
            "PetPutBuilder: 'pet_id' is dropped because 'petId' has the same Rust name 'pet_id'"
        ]

        code = generator.generate([obj])
        assert "pub struct PetPutBuilder<PetId> {" in code
        assert code.count("pub fn pet_id(") == 2

    def test_required_field_named_any(self, generator):
        obj = ApiObject(
            name="Thing",
            fields=[
                ObjectField("any", "String", is_required=True),
                ObjectField("extra", "Any", needs_any=True),
            ],
        )
        assert generator.validate_objects([obj]) == [
            "ThingBuilder: type parameter of 'any' is named 'AnyMarker' since 'Any' is taken"
        ]

        code = generator.generate([obj])
        assert "pub struct ThingBuilder<AnyMarker, Any> {" in code
        assert "    _any: core::marker::PhantomData<AnyMarker>,\n" in code
        assert "<Any, Any>" not in code
        assert "pub struct MissingAny;" in code

    def test_file_fields(self, generator):
        obj = ApiObject(
            name="Upload",
            fields=[ObjectField("data", "FILE", is_required=True)],
        )
        code = generator.generate([obj])
        assert "pub data: std::path::PathBuf," in code
        assert "pub fn data(mut self, value: impl AsRef<std::path::Path>)" in code
        assert "FILE" not in code


class TestGenerateCode:
    def test_success(self, generator, pet_get, thing):
        result = generate_code(generator, [pet_get, thing])
        assert isinstance(result, GenerationResult)
        assert result.success
        assert "pub struct Pet {" in result.code
        assert result.metadata == {
            "language": "rust",
            "file_extension": ".rs",
            "object_count": 2,
            "operation_count": 2,
            "needs_any": True,
        }
        assert any("dropped" in w for w in result.warnings)

    def test_warnings_logged_once(self, generator, pet_get, caplog):
        with caplog.at_level(logging.WARNING):
            result = generate_code(generator, [pet_get, two_paths()])

        messages = [r.getMessage() for r in caplog.records]
        assert messages == result.warnings
        assert len([m for m in messages if "'id' declared as 'i64' is dropped" in m]) == 1
        assert len([m for m in messages if "no operation ID" in m]) == 3

    def test_collision_policy_error(self, pet_get):
        generator = RustGenerator({"field_collision": "error"})
        result = generate_code(generator, [pet_get])
        assert not result.success
        assert "declared as" in result.error_message
        assert isinstance(result.exception, GeneratorError)

    def test_unnamed_operation_policy_error(self):
        generator = RustGenerator({"unnamed_operations": "error"})
        result = generate_code(generator, [two_paths()])
        assert not result.success
        assert "no operation ID" in result.error_message

    def test_invariant_errors_propagate(self, generator):
        obj = make_pet(
            {
                "/pets": PathOps(
                    req={
                        HttpMethod.GET: OpRequirement(
                            params=[
                                Parameter(
                                    "tags",
                                    "Vec<Vec<String>>",
                                    delimiting=[CollectionFormat.CSV],
                                )
                            ]
                        )
                    }
                )
            }
        )
        with pytest.raises(InvariantError):
            generate_code(generator, [obj])

    def test_format_code_collapses_blank_lines(self, generator):
        assert generator.format_code("a  \n\n\n\n\nb") == "a\n\n\nb"
