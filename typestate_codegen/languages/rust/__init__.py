"""
Rust code generator module.

Generates serde-enabled structs for API objects together with typestate
builders whose required properties are checked at compile time.
"""

from .builder import ApiObjectBuilder, Property, StructField
from .generator import RustGenerator
from .layout import BuilderLayout, plan_layout
from .naming import create_rust_sanitizer
from .typestate import TypeParameters, TypeParamMode, render_generics

__all__ = [
    "RustGenerator",
    "ApiObjectBuilder",
    "Property",
    "StructField",
    "BuilderLayout",
    "plan_layout",
    "TypeParameters",
    "TypeParamMode",
    "render_generics",
    "create_rust_sanitizer",
    # Factory functions
    "create_generator",
    "create_library_generator",
]


def create_generator(**kwargs):
    """
    Create a Rust generator.

    Args:
        **kwargs: Generator options (helper_module_prefix, add_comments, etc.)

    Returns:
        Configured RustGenerator instance
    """
    return RustGenerator(kwargs)


def create_library_generator(crate_name: str):
    """
    Create generator for code living in a module of another crate.

    Helper modules are then addressed through that crate instead of
    `crate::`, and every policy is strict.
    """
    return RustGenerator(
        {
            "helper_module_prefix": f"{crate_name}::",
            "field_collision": "error",
            "unnamed_operations": "error",
        }
    )
