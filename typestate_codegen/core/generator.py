"""
Base generator interface for all code generation targets.

Defines the contract that all language generators must implement.
"""

from abc import ABC, abstractmethod
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, TextIO, Union

from ..logging_config import get_logger
from .config import GeneratorConfig, check_policies, load_config
from .errors import GeneratorError, InvariantError
from .model import ApiObject
from .templates import TemplateEngine, create_template_engine

logger = get_logger(__name__)


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[Union[GeneratorConfig, Dict[str, Any]]] = None):
        """Initialize generator with optional configuration."""
        if isinstance(config, GeneratorConfig):
            check_policies(config)
            self.config = config
        else:
            self.config = load_config(self.language_name, custom_config=config)
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        self._template_engine = create_template_engine(self.get_template_directory())

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'rust')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.rs')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Return None to use in-memory templates only.
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def generate(self, objects: Sequence[ApiObject]) -> str:
        """
        Generate code for all objects.

        Args:
            objects: Objects of one generation run

        Returns:
            Generated code as a string
        """
        pass

    @abstractmethod
    def generate_single_object(self, obj: ApiObject) -> str:
        """
        Generate code for a single object.

        Args:
            obj: Object to generate code for

        Returns:
            Generated code for this object only
        """
        pass

    def write(self, objects: Sequence[ApiObject], sink: TextIO) -> None:
        """Write generated code for all objects to a text sink.

        Sink failures propagate to the caller unchanged.
        """
        sink.write(self.generate(objects))

    def validate_objects(self, objects: Sequence[ApiObject]) -> List[str]:
        """
        Validate objects for basic structural issues.

        Language generators should override this to add language-specific validation.

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []

        counts = Counter(obj.name for obj in objects)
        for name, count in sorted(counts.items()):
            if count > 1:
                warnings.append(f"Object name '{name}' is used by {count} objects")

        for obj in objects:
            if not obj.fields:
                warnings.append(f"Object '{obj.name}' has no fields")

        return warnings

    def format_code(self, code: str) -> str:
        """
        Apply language-specific formatting to generated code.

        Args:
            code: Raw generated code

        Returns:
            Formatted code
        """
        # Basic cleanup - remove excessive blank lines
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 2:  # Allow max 2 consecutive blank lines
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines)

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template with context."""
        return self.template_engine.render_template(template_name, context)

    def template_exists(self, template_name: str) -> bool:
        """Check if a template exists."""
        return self.template_engine.template_exists(template_name)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        code: str,
        warnings: Optional[List[str]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize generation result.

        Args:
            code: Generated code
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @classmethod
    def error(cls, message: str, exception: Optional[Exception] = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(
    generator: CodeGenerator, objects: Sequence[ApiObject]
) -> GenerationResult:
    """
    Generate code using the specified generator with error handling.

    Generator errors (policy violations, template problems) become a failed
    result. Model invariant violations are not caught.

    Args:
        generator: Code generator instance
        objects: Objects to generate code for

    Returns:
        GenerationResult with code, warnings, and metadata
    """
    try:
        warnings = generator.validate_objects(objects)
        code = generator.generate(objects)
        formatted_code = generator.format_code(code)
    except InvariantError:
        raise
    except GeneratorError as e:
        logger.error("Code generation failed: %s", e)
        return GenerationResult.error(f"Code generation failed: {e}", exception=e)

    metadata = {
        "language": generator.language_name,
        "file_extension": generator.file_extension,
        "object_count": len(objects),
        "operation_count": sum(
            len(path_ops.req) for obj in objects for path_ops in obj.paths.values()
        ),
        "needs_any": any(obj.needs_any for obj in objects),
    }

    for warning in warnings:
        logger.warning(warning)

    return GenerationResult(formatted_code, warnings, metadata)
