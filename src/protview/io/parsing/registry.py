"""Parser registry and custom exceptions."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
  from protview.io.parsing.pdb import ParsedStructure

# --- Exception Hierarchy ---


class ProtviewError(Exception):
  """Base class for all protview exceptions."""


class ParsingError(ProtviewError):
  """Error raised when parsing fails."""


class InvalidSourceError(ParsingError):
  """Error raised when a structure or property source is unreadable or malformed.

  Raised for the whole load operation, never for a single line: callers treat it
  as "nothing was loaded from this source".
  """


class FormatNotSupportedError(ProtviewError):
  """Error raised when file format is not supported."""


# --- Registry ---

# Parser function signature:
# (source: str | pathlib.Path | IO[str] | IO[bytes], tables: PropertyTables | None, **kwargs)
#   -> ParsedStructure
ParserFunc = Callable[..., "ParsedStructure"]

_PARSER_REGISTRY: dict[str, ParserFunc] = {}


def register_parser(formats: list[str]) -> Callable[[ParserFunc], ParserFunc]:
  """Decorator to register a parser function for specific file formats."""

  def decorator(fn: ParserFunc) -> ParserFunc:
    for fmt in formats:
      _PARSER_REGISTRY[fmt] = fn
    return fn

  return decorator


def get_parser(fmt: str) -> ParserFunc | None:
  """Get a parser function for a specific format."""
  return _PARSER_REGISTRY.get(fmt)


def list_supported_formats() -> list[str]:
  """List all supported formats."""
  return sorted(_PARSER_REGISTRY.keys())
