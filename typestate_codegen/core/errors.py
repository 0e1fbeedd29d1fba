"""Exceptions raised during code generation."""


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class InvariantError(RuntimeError):
    """The object model broke an assumption the renderer relies on.

    This signals a bug in whatever produced the model. It is never turned
    into a failed ``GenerationResult``; generation stops right away.
    """

    pass
