import logging

import pytest

from typestate_codegen.core.errors import GeneratorError
from typestate_codegen.core.model import (
    HttpMethod,
    ObjectField,
    Parameter,
    ParameterIn,
)
from typestate_codegen.languages.rust.builder import (
    ApiObjectBuilder,
    Property,
    describe_collision,
)

from conftest import PET_FIELDS


def make_builder(**kwargs):
    kwargs.setdefault("object", "Pet")
    kwargs.setdefault("fields", PET_FIELDS)
    return ApiObjectBuilder(**kwargs)


class TestStructFields:
    def test_object_builder_fields(self):
        builder = make_builder(body_required=True)
        props = [(f.name, f.prop) for f in builder.struct_fields]
        assert props == [
            ("id", Property.REQUIRED_FIELD),
            ("name", Property.REQUIRED_FIELD),
            ("tag", Property.OPTIONAL_FIELD),
        ]

    def test_fields_optional_without_body(self):
        builder = make_builder(body_required=False)
        assert not builder.required_fields

    def test_parameters_come_first(self):
        builder = make_builder(
            body_required=True,
            global_params=[Parameter("verbose", "bool", required=True)],
        )
        assert [f.name for f in builder.struct_fields] == ["verbose", "id", "name", "tag"]
        assert builder.struct_fields[0].prop is Property.REQUIRED_PARAM

    def test_local_parameter_replaces_global(self):
        builder = make_builder(
            global_params=[
                Parameter("limit", "i64"),
                Parameter("offset", "i64"),
            ],
            local_params=[Parameter("limit", "i64", required=True, description="Max")],
        )
        names = [f.name for f in builder.struct_fields]
        assert names[:2] == ["limit", "offset"]
        limit = builder.struct_fields[0]
        assert limit.prop is Property.REQUIRED_PARAM
        assert limit.desc == "Max"

    def test_local_parameter_with_other_type_wins(self):
        builder = make_builder(
            global_params=[Parameter("limit", "i64", description="Global")],
            local_params=[Parameter("limit", "String", description="Local")],
        )
        (limit,) = [f for f in builder.struct_fields if f.name == "limit"]
        assert (limit.ty, limit.desc) == ("String", "Local")
        assert builder.collisions == ()

    def test_same_type_collision_marks_override(self):
        builder = make_builder(
            body_required=True,
            local_params=[Parameter("name", "String", presence=ParameterIn.QUERY)],
        )
        names = [f.name for f in builder.struct_fields]
        assert names.count("name") == 1
        name = builder.struct_fields[0]
        assert name.prop is Property.OPTIONAL_PARAM
        assert name.overridden
        assert builder.collisions == ()

    def test_different_type_collision_is_dropped(self, caplog):
        builder = make_builder(
            local_params=[Parameter("id", "String", required=True, presence=ParameterIn.PATH)],
        )
        with caplog.at_level(logging.DEBUG):
            fields = builder.struct_fields

        assert [f.name for f in fields] == ["id", "name", "tag"]
        assert fields[0].ty == "String"
        assert len(builder.collisions) == 1
        kept, dropped = builder.collisions[0]
        assert (kept.ty, dropped.ty) == ("String", "i64")
        assert "'id' declared as 'i64' is dropped in favour of 'String'" in caplog.text
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_same_rust_name_and_type_merges(self):
        builder = make_builder(
            body_required=True,
            fields=[ObjectField("pet_id", "i64", is_required=True)],
            local_params=[Parameter("petId", "i64", required=True, presence=ParameterIn.PATH)],
        )
        (pet_id,) = builder.struct_fields
        assert pet_id.name == "petId"
        assert pet_id.overridden
        assert builder.collisions == ()
        assert builder.get_object_field("petId").name == "pet_id"

    def test_same_rust_name_is_dropped(self):
        builder = make_builder(
            body_required=True,
            fields=[ObjectField("pet_id", "String", is_required=True)],
            local_params=[Parameter("petId", "i64", required=True, presence=ParameterIn.PATH)],
        )
        assert [f.name for f in builder.struct_fields] == ["petId"]
        assert [f.name for f in builder.required_fields] == ["petId"]
        ((kept, dropped),) = builder.collisions
        assert (kept.name, dropped.name) == ("petId", "pet_id")
        assert describe_collision(kept, dropped) == (
            "'pet_id' is dropped because 'petId' has the same Rust name 'pet_id'"
        )

    def test_same_rust_name_between_parameters(self):
        builder = make_builder(
            global_params=[Parameter("type", "String")],
            local_params=[Parameter("Type", "String")],
        )
        names = [f.name for f in builder.struct_fields]
        assert names == ["type", "id", "name", "tag"]
        assert len(builder.collisions) == 1

    def test_same_rust_name_error_policy(self):
        builder = make_builder(
            fields=[ObjectField("pet_id", "String")],
            local_params=[Parameter("petId", "i64")],
            field_collision="error",
        )
        with pytest.raises(GeneratorError, match="same Rust name 'pet_id'"):
            builder.struct_fields

    def test_collision_error_policy(self):
        builder = make_builder(
            local_params=[Parameter("id", "String")],
            field_collision="error",
        )
        with pytest.raises(GeneratorError):
            builder.struct_fields

    def test_child_fields_and_file_flags(self):
        builder = make_builder(
            fields=[
                ObjectField("owner", "crate::user::User", child_req_fields=["email"]),
            ],
            local_params=[Parameter("upload", "FILE", presence=ParameterIn.FORM_DATA)],
        )
        upload, owner = builder.struct_fields
        assert upload.needs_file
        assert upload.param_loc is ParameterIn.FORM_DATA
        assert owner.strict_child_fields == ("email",)


class TestNames:
    def test_builder_names(self):
        assert make_builder().name == "PetBuilder"
        assert make_builder(method=HttpMethod.GET).name == "PetGetBuilder"
        assert make_builder(method=HttpMethod.GET, idx=2).name == "PetGetBuilder2"
        assert make_builder(method=HttpMethod.GET).container_name == "PetGetBuilderContainer"

    def test_constructor_from_operation_id(self):
        builder = make_builder(method=HttpMethod.GET, op_id="getPetById")
        assert builder.constructor_name == "get_pet_by_id"

    def test_constructor_for_object_builder(self):
        assert make_builder().constructor_name is None

    def test_constructor_from_method(self):
        assert make_builder(method=HttpMethod.DELETE).constructor_name == "delete"

    def test_constructor_indexed_when_ambiguous(self):
        first = make_builder(method=HttpMethod.GET, multiple_builders_exist=True)
        second = make_builder(method=HttpMethod.GET, idx=1, multiple_builders_exist=True)
        assert first.constructor_name == "get"
        assert second.constructor_name == "get_1"

    def test_constructor_error_policy(self):
        builder = make_builder(
            method=HttpMethod.GET,
            idx=1,
            multiple_builders_exist=True,
            unnamed_operations="error",
        )
        with pytest.raises(GeneratorError):
            builder.constructor_name

    def test_marker_slots(self):
        builder = make_builder(
            body_required=True,
            local_params=[Parameter("petId", "i64", required=True)],
        )
        slots = [f.marker_slot for f in builder.required_fields]
        assert slots == ["_param_pet_id", "_id", "_name"]
