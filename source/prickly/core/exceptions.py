"""Error taxonomy for the param engine, plus the expected-error tuple for I/O seams."""

from __future__ import annotations

from typing import TypeAlias


class AppError(Exception):
    """Base class for expected application-layer failures."""


class AppRuntimeError(RuntimeError, AppError):
    """Raised for runtime operation failures with user-facing context."""


class ParamParseError(ValueError, AppError):
    """Edit text does not fit the target param type; the node stays unchanged."""


class InvalidHashLiteral(ParamParseError):
    """Malformed `0x...` hash literal."""


class LabelCorpusUnavailable(AppError):
    """The shared label corpus could not be read right now (busy or still loading)."""


class NameFilterError(ValueError, AppError):
    """Filter text is not a valid regular expression."""


class DocumentFormatError(ValueError, AppError):
    """A stored param document could not be decoded."""


class StructuralViolation(AssertionError):
    """Caller bug: navigating into a terminal node or indexing past a level's children."""


# Failures recovered at file, settings and logging seams.
EXPECTED_ERRORS: TypeAlias = (
    OSError,
    ValueError,
    TypeError,
    RuntimeError,
    KeyError,
)
