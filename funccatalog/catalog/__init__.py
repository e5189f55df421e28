"""Function catalog: reflect allow-listed functions into JSON records."""

from .builder import CatalogBuilder, load_module_from_file, user_functions
from .source import DefinitionSpan, extract_span, get_source, locate_definition

__all__ = [
    "CatalogBuilder",
    "load_module_from_file",
    "user_functions",
    "DefinitionSpan",
    "extract_span",
    "get_source",
    "locate_definition",
]
