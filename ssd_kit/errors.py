from __future__ import annotations


class PostprocessError(ValueError):
    """
    Base error for malformed detector output.

    Subclasses `ValueError` so callers that already guard post-processing with
    `except ValueError` keep working.
    """


class ShapeMismatchError(PostprocessError):
    """Raw buffers disagree with their declared shapes (or with each other)."""


class ClassIndexError(PostprocessError, IndexError):
    """A class index, after the layout offset, has no entry in the class table."""
