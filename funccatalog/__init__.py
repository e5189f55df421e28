"""
funccatalog - function catalog builder and tokenizer demo.

Main Components:
- Catalog: reflect allow-listed functions of a module into JSON records
- Tokens: lex a source string and render its token stream

Usage:
    from funccatalog import CatalogBuilder, CatalogSettings

    builder = CatalogBuilder(CatalogSettings(allow_list=["add", "multiply"]))
    print(builder.to_json(builder.build()))
"""

from .schemas import FunctionRecord, ParamRecord, TokenRecord
from .config import CatalogSettings
from .errors import (
    FuncCatalogError,
    SourceUnavailableError,
    MalformedSourceError,
    ConfigurationError,
)
from .catalog import CatalogBuilder
from .tokens import DEMO_SOURCE, render_tokens, tokenize_source

__all__ = [
    # Schemas
    "FunctionRecord",
    "ParamRecord",
    "TokenRecord",

    # Configuration
    "CatalogSettings",

    # Errors
    "FuncCatalogError",
    "SourceUnavailableError",
    "MalformedSourceError",
    "ConfigurationError",

    # Catalog
    "CatalogBuilder",

    # Tokens
    "DEMO_SOURCE",
    "render_tokens",
    "tokenize_source",
]

__version__ = "0.1.0"
