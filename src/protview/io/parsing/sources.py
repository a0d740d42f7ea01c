"""Reading text out of the different source kinds accepted by the loaders."""

from __future__ import annotations

import logging
import pathlib
import re
from typing import IO, Union

from protview.io.parsing.registry import InvalidSourceError

logger = logging.getLogger(__name__)

Source = Union[str, pathlib.Path, IO[str], IO[bytes]]

_LINE_BREAKS = re.compile(r"[\r\n]+")


def source_label(source: Source) -> str:
  """Return a short human readable label for a source, used in log and error messages."""
  if isinstance(source, (str, pathlib.Path)):
    return str(source)
  return str(getattr(source, "name", f"<{type(source).__name__}>"))


def source_path(source: Source) -> pathlib.Path | None:
  """Return the filesystem path behind a source, if there is one."""
  if isinstance(source, pathlib.Path):
    return source
  if isinstance(source, str):
    return pathlib.Path(source)
  name = getattr(source, "name", None)
  if isinstance(name, str):
    return pathlib.Path(name)
  return None


def read_text(source: Source, encoding: str = "utf-8") -> str:
  """Read the complete text of a source.

  Args:
    source: A filesystem path (``str`` or ``pathlib.Path``) or an open file
      object in text or binary mode.
    encoding: Encoding used for paths and binary file objects.

  Returns:
    The decoded text.

  Raises:
    InvalidSourceError: If the source cannot be opened, read or decoded.

  """
  label = source_label(source)
  logger.debug("Reading source %s (encoding=%s).", label, encoding)
  try:
    if isinstance(source, (str, pathlib.Path)):
      return pathlib.Path(source).read_text(encoding=encoding)
    data = source.read()
    if isinstance(data, bytes):
      return data.decode(encoding)
    return data
  except (OSError, UnicodeDecodeError, ValueError) as e:
    msg = f"Failed to read from source: {label}. {e}"
    logger.error(msg)
    raise InvalidSourceError(msg) from e


def split_lines(text: str) -> list[str]:
  """Split text on any run of line breaks, dropping empty lines."""
  return [line for line in _LINE_BREAKS.split(text) if line]
