"""
Object model consumed by the code generators.

Describes API objects, their fields and the operations which address them.
The model is built once per generation run by the schema resolver and is
treated as read-only afterwards, so it is safe to render several objects
from different threads.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple


# Type path denoting a file upload (parameters) or a file download (responses).
FILE_MARKER = "FILE"

# Name of the generic slot standing in for dynamically-typed values.
ANY_GENERIC_PARAMETER = "Any"


class HttpMethod(Enum):
    """HTTP methods, in the order their builders are generated."""

    GET = "Get"
    PUT = "Put"
    POST = "Post"
    DELETE = "Delete"
    OPTIONS = "Options"
    HEAD = "Head"
    PATCH = "Patch"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "HttpMethod":
        """Look up a method by name, ignoring case."""
        for method in cls:
            if method.value.lower() == name.lower():
                return method
        raise ValueError(f"Unknown HTTP method: {name}")


_METHOD_ORDER = {method: index for index, method in enumerate(HttpMethod)}


class ParameterIn(Enum):
    """Where a parameter lives in the request."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    FORM_DATA = "formData"
    BODY = "body"


class CollectionFormat(Enum):
    """How repeated values are joined into a single parameter value.

    The value is the name of the matching marker type in the helper ``util``
    module of the generated crate.
    """

    CSV = "Csv"
    SSV = "Ssv"
    TSV = "Tsv"
    PIPES = "Pipes"
    MULTI = "Multi"


@dataclass(frozen=True)
class Coder:
    """Opaque handle to an encoder/decoder for some media range."""

    encoder_path: str
    decoder_path: str
    error_path: str
    # Rust type used in place of `Any` when decoding with this coder.
    any_value: str
    prefer: bool = False


@dataclass(frozen=True)
class Response:
    """Response of an operation."""

    # Absent type path means the response is dynamically typed.
    ty_path: Optional[str] = None
    contains_any: bool = False

    def is_file(self) -> bool:
        """Whether this response is a file download."""
        return self.ty_path == FILE_MARKER


@dataclass(frozen=True)
class Parameter:
    """A header, path, query or form parameter."""

    name: str
    ty_path: str
    description: Optional[str] = None
    required: bool = False
    presence: ParameterIn = ParameterIn.QUERY
    # Outermost to innermost, one entry per level of array nesting.
    delimiting: List[CollectionFormat] = field(default_factory=list)


@dataclass(frozen=True)
class OpRequirement:
    """Requirements of one operation addressing an object."""

    id: Optional[str] = None
    description: Optional[str] = None
    deprecated: bool = False
    params: List[Parameter] = field(default_factory=list)
    body_required: bool = False
    listable: bool = False
    response: Response = field(default_factory=Response)
    encoding: Optional[Tuple[str, Coder]] = None
    decoding: Optional[Tuple[str, Coder]] = None


@dataclass(frozen=True)
class PathOps:
    """Operations available under one URL path."""

    req: Dict[HttpMethod, OpRequirement] = field(default_factory=dict)
    # Shared by every operation in this path.
    params: List[Parameter] = field(default_factory=list)

    def operations(self) -> Iterator[Tuple[HttpMethod, OpRequirement]]:
        """Yield operations ordered by method, independent of insertion order."""
        yield from sorted(self.req.items(), key=lambda item: _METHOD_ORDER[item[0]])


@dataclass(frozen=True)
class ObjectField:
    """A field of an API object."""

    name: str
    ty_path: str
    description: Optional[str] = None
    is_required: bool = False
    needs_any: bool = False
    boxed: bool = False
    # Required fields of the deepest non-container type reachable through
    # nested `Vec`/`BTreeMap` wrappers, e.g. `T` in `Vec<BTreeMap<String, T>>`.
    child_req_fields: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ApiObject:
    """A record type in the generated crate."""

    name: str
    description: Optional[str] = None
    # Dotted path locating this object in the generated namespace.
    path: str = ""
    fields: List[ObjectField] = field(default_factory=list)
    paths: Dict[str, PathOps] = field(default_factory=dict)

    @property
    def needs_any(self) -> bool:
        """Whether the object is generic over the `Any` placeholder."""
        return any(f.needs_any for f in self.fields)

    def sorted_paths(self) -> List[Tuple[str, PathOps]]:
        """Paths in lexical order."""
        return sorted(self.paths.items())

    def get_field(self, name: str) -> Optional[ObjectField]:
        """Get field by name."""
        for object_field in self.fields:
            if object_field.name == name:
                return object_field
        return None
