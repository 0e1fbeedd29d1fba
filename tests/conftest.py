import pytest

from typestate_codegen.core.model import (
    ApiObject,
    HttpMethod,
    ObjectField,
    OpRequirement,
    Parameter,
    ParameterIn,
    PathOps,
    Response,
)
from typestate_codegen.languages.rust import RustGenerator

PET_FIELDS = [
    ObjectField(name="id", ty_path="i64", is_required=True),
    ObjectField(name="name", ty_path="String", is_required=True),
    ObjectField(name="tag", ty_path="String"),
]

ID_PARAM = Parameter(
    name="id", ty_path="String", required=True, presence=ParameterIn.PATH
)
VERBOSE_PARAM = Parameter(
    name="verbose", ty_path="bool", required=True, presence=ParameterIn.QUERY
)


def make_pet(paths=None, description="A pet.") -> ApiObject:
    return ApiObject(
        name="Pet",
        description=description,
        path="pet",
        fields=list(PET_FIELDS),
        paths=paths or {},
    )


@pytest.fixture
def pet():
    """Pet object without operations."""
    return make_pet()


@pytest.fixture
def pet_get():
    """Pet with a GET operation taking a required path parameter."""
    return make_pet(
        {
            "/pets/{id}": PathOps(
                req={
                    HttpMethod.GET: OpRequirement(
                        params=[ID_PARAM],
                        response=Response(ty_path="crate::pet::Pet"),
                    )
                }
            )
        }
    )


@pytest.fixture
def pet_post():
    """Pet with a POST operation taking a body and a required query parameter."""
    return make_pet(
        {
            "/pets": PathOps(
                req={
                    HttpMethod.POST: OpRequirement(
                        id="addPet",
                        params=[VERBOSE_PARAM],
                        body_required=True,
                        response=Response(ty_path="crate::pet::Pet"),
                    )
                }
            )
        }
    )


@pytest.fixture
def thing():
    """Object holding a dynamically-typed value."""
    return ApiObject(
        name="Thing",
        fields=[
            ObjectField(name="label", ty_path="String"),
            ObjectField(name="extra", ty_path="Any", needs_any=True),
        ],
        paths={
            "/things": PathOps(
                req={
                    HttpMethod.GET: OpRequirement(
                        id="listThings",
                        listable=True,
                        response=Response(ty_path="crate::thing::Thing", contains_any=True),
                    )
                }
            )
        },
    )


@pytest.fixture
def generator():
    return RustGenerator()
