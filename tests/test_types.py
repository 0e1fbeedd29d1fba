import pytest

from typestate_codegen.core.errors import InvariantError
from typestate_codegen.core.model import CollectionFormat
from typestate_codegen.languages.rust.types import (
    PATH_BUF,
    child_builder_type,
    convert_value,
    field_type,
    is_simple_type,
    leaf_type,
    param_type,
    with_any_generic,
    wrap_delimited,
)

MAP = "std::collections::BTreeMap"


class TestIsSimpleType:
    def test_simple(self):
        assert is_simple_type("i64")
        assert is_simple_type("String")
        assert is_simple_type("crate::util::Delimited")

    def test_object(self):
        assert not is_simple_type("crate::pet::Pet")


class TestWithAnyGeneric:
    def test_placeholder_is_substituted(self):
        assert with_any_generic("Any", "serde_json::Value") == "serde_json::Value"

    def test_simple_types_untouched(self):
        assert with_any_generic("String") == "String"

    def test_objects_get_parameter(self):
        assert with_any_generic("crate::pet::Pet") == "crate::pet::Pet<Any>"

    def test_recurses_through_containers(self):
        ty = f"Vec<{MAP}<String, crate::pet::Pet>>"
        assert with_any_generic(ty, "X") == f"Vec<{MAP}<String, crate::pet::Pet<X>>>"

    def test_unknown_wrapper(self):
        with pytest.raises(InvariantError):
            with_any_generic("Option<crate::pet::Pet>")


class TestWrapDelimited:
    def test_nested_arrays(self):
        wrapped = wrap_delimited(
            "crate::", "Vec<Vec<String>>", [CollectionFormat.CSV, CollectionFormat.PIPES]
        )
        assert wrapped == (
            "crate::util::Delimited<crate::util::Delimited<String, crate::util::Pipes>, "
            "crate::util::Csv>"
        )

    def test_single_array(self):
        wrapped = wrap_delimited("api::", "Vec<i64>", [CollectionFormat.MULTI])
        assert wrapped == "api::util::Delimited<i64, api::util::Multi>"

    def test_scalar_unchanged(self):
        assert wrap_delimited("crate::", "String", []) == "String"

    def test_delimiter_count_must_match_nesting(self):
        with pytest.raises(InvariantError):
            wrap_delimited("crate::", "Vec<Vec<String>>", [CollectionFormat.CSV])

    def test_files_become_paths(self):
        assert param_type("crate::", "FILE", [], needs_file=True) == PATH_BUF


class TestFieldType:
    def test_file_field(self):
        assert field_type("FILE", needs_any=False) == PATH_BUF

    def test_any_field(self):
        assert field_type("Vec<Any>", needs_any=True) == "Vec<Any>"
        assert field_type("crate::thing::Thing", needs_any=True) == "crate::thing::Thing<Any>"

    def test_plain_field(self):
        assert field_type("crate::pet::Pet", needs_any=False) == "crate::pet::Pet"


class TestChildBuilders:
    def test_child_builder_type_keeps_wrappers(self):
        ty = child_builder_type("crate::", "Vec<crate::pet::Pet>", ["name", "id"])
        assert ty == (
            "Vec<crate::pet::PetBuilder<crate::generics::NameExists, "
            "crate::generics::IdExists>>"
        )

    def test_child_builder_type_with_any(self):
        ty = child_builder_type("crate::", f"{MAP}<String, crate::a::B>", ["x"], "Any")
        assert ty == f"{MAP}<String, crate::a::BBuilder<crate::generics::XExists, Any>>"

    def test_convert_leaf(self):
        assert convert_value("crate::pet::Pet") == "value.into()"

    def test_convert_vec(self):
        assert convert_value("Vec<crate::pet::Pet>") == (
            "value.into_iter().map(|value| value.into()).collect::<Vec<_>>()"
        )

    def test_convert_map(self):
        assert convert_value(f"{MAP}<String, crate::pet::Pet>") == (
            "value.into_iter().map(|(key, value)| (key, value.into()))"
            f".collect::<{MAP}<_, _>>()"
        )

    def test_leaf_type(self):
        assert leaf_type(f"Vec<{MAP}<String, crate::a::B>>") == "crate::a::B"
        assert leaf_type("String") == "String"
