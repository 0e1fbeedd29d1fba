"""
Core code generation components.

Provides the object model, base classes and utilities used by all language
generators.
"""

from .config import ConfigError, ConfigManager, GeneratorConfig, load_config
from .errors import GeneratorError, InvariantError
from .generator import CodeGenerator, GenerationResult, generate_code
from .model import (
    ANY_GENERIC_PARAMETER,
    FILE_MARKER,
    ApiObject,
    Coder,
    CollectionFormat,
    HttpMethod,
    ObjectField,
    OpRequirement,
    Parameter,
    ParameterIn,
    PathOps,
    Response,
)
from .naming import NameSanitizer, NamingCase
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GeneratorError",
    "InvariantError",
    "GenerationResult",
    "generate_code",
    # Object model
    "ANY_GENERIC_PARAMETER",
    "FILE_MARKER",
    "ApiObject",
    "Coder",
    "CollectionFormat",
    "HttpMethod",
    "ObjectField",
    "OpRequirement",
    "Parameter",
    "ParameterIn",
    "PathOps",
    "Response",
    # Naming utilities - language-agnostic
    "NameSanitizer",
    "NamingCase",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system - language-agnostic
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
