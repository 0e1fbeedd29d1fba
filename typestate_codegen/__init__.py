"""
Typestate Code Generation

Generates Rust data types and compile-time checked builders from a
resolved API object model.
"""

from typing import Any, Dict, Optional, Sequence

from .core.config import ConfigManager, GeneratorConfig, load_config
from .core.errors import GeneratorError, InvariantError
from .core.generator import CodeGenerator, GenerationResult, generate_code
from .core.model import (
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
from .logging_config import configure_logging, get_logger
from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_registry,
    list_supported_languages,
)

# Version info
__version__ = "0.1.0"


def generate_from_objects(
    objects: Sequence[ApiObject],
    language: str = "rust",
    config: Optional[Dict[str, Any]] = None,
) -> GenerationResult:
    """
    Generate code for a set of API objects.

    Args:
        objects: Objects of one generation run
        language: Target language name or alias
        config: Generator configuration dict or path

    Returns:
        GenerationResult with generated code
    """
    generator = get_generator(language, config)
    return generate_code(generator, objects)


def quick_generate(objects: Sequence[ApiObject], language: str = "rust", **options) -> str:
    """
    Quick code generation returning the code directly.

    Raises:
        GeneratorError: If generation fails
    """
    result = generate_from_objects(objects, language, options)

    if result.success:
        return result.code
    raise GeneratorError(f"Code generation failed: {result.error_message}")


__all__ = [
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
    "CodeGenerator",
    "ConfigManager",
    "GenerationResult",
    "GeneratorConfig",
    "GeneratorError",
    "GeneratorRegistry",
    "InvariantError",
    "RegistryError",
    "configure_logging",
    "generate_code",
    "generate_from_objects",
    "get_generator",
    "get_logger",
    "get_registry",
    "list_supported_languages",
    "load_config",
    "quick_generate",
]
