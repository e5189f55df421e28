"""
Definition span lookup and source text extraction.

The span of a function is reflected from the ``ast`` of its defining file:
``lineno`` is the ``def`` line and ``end_lineno`` the last line of the body.
Decorators are not part of the span.
"""

import ast
import inspect
import logging
import tokenize
from dataclasses import dataclass
from pathlib import Path
from types import FunctionType
from typing import List, Union

from funccatalog.errors import SourceUnavailableError

logger = logging.getLogger(__name__)

_FUNCTION_NODES = (ast.FunctionDef, ast.AsyncFunctionDef)


@dataclass
class DefinitionSpan:
    """Where a function is defined, with the lines of its file."""
    file: Path
    line_start: int
    line_end: int
    lines: List[str]


def read_lines(file: Union[str, Path]) -> List[str]:
    """
    Read a file as a list of lines without their newline characters.

    Decodes per the file's coding cookie or BOM (UTF-8 otherwise).
    """
    with tokenize.open(file) as f:
        return f.read().split("\n")


def locate_definition(func: FunctionType) -> DefinitionSpan:
    """
    Find the defining file and line span of a function.

    Wrappers made with ``functools.wraps`` are followed to the wrapped function.

    Args:
        func: A plain Python function

    Returns:
        DefinitionSpan with 1-indexed, inclusive lines, line_start being the
        ``def`` line

    Raises:
        SourceUnavailableError: If the function has no source file or no
            matching definition exists in it
        OSError: If the defining file cannot be read
    """
    func = inspect.unwrap(func)
    name = func.__name__

    try:
        source_file = inspect.getsourcefile(func)
    except TypeError as e:
        raise SourceUnavailableError(name, str(e)) from e

    if source_file is None:
        raise SourceUnavailableError(name, f"no source file for {func.__code__.co_filename!r}")

    path = Path(source_file)
    lines = read_lines(path)
    tree = ast.parse("\n".join(lines), filename=str(path))

    # co_firstlineno points at the first decorator when there is one
    first_line = func.__code__.co_firstlineno
    for node in ast.walk(tree):
        if not isinstance(node, _FUNCTION_NODES) or node.name != name:
            continue
        node_first = node.decorator_list[0].lineno if node.decorator_list else node.lineno
        if node_first == first_line:
            logger.debug(f"{name}: lines {node.lineno}-{node.end_lineno} of {path}")
            return DefinitionSpan(path, node.lineno, node.end_lineno, lines)

    raise SourceUnavailableError(name, f"no definition at line {first_line} of {path}")


def extract_span(
    lines: List[str],
    line_start: int,
    line_end: int,
    declaration_offset: int = 0
) -> str:
    """
    Join lines ``line_start - declaration_offset`` through ``line_end``
    (1-indexed, inclusive) with newlines.

    ``declaration_offset`` covers reflection facilities whose start line
    points past the declaration line; ``ast`` does not need it.

    Raises:
        ValueError: If the line numbers are inconsistent
    """
    if declaration_offset < 0:
        raise ValueError(f"declaration_offset must be >= 0, got {declaration_offset}")
    if line_start < 1 or line_end < line_start:
        raise ValueError(f"Invalid line span: {line_start}-{line_end}")

    start_index = max(line_start - 1 - declaration_offset, 0)
    return "\n".join(lines[start_index:line_end])


def get_source(
    file: Union[str, Path],
    line_start: int,
    line_end: int,
    declaration_offset: int = 0
) -> str:
    """
    Read ``file`` and extract a line span from it (see ``extract_span``).

    Raises:
        OSError: If the file cannot be read
        ValueError: If the line numbers are inconsistent
    """
    return extract_span(read_lines(file), line_start, line_end, declaration_offset)
