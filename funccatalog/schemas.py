"""
Pydantic schemas for funccatalog.

This module defines the records produced by the two programs:
- ParamRecord: one formal parameter of a reflected function
- FunctionRecord: catalog entry for one allow-listed function
- TokenRecord: one lexical unit produced by the tokenizer demo
"""

from pydantic import BaseModel, Field
from typing import Any, List, Tuple


# ============================================================================
# CATALOG SCHEMAS
# ============================================================================

class ParamRecord(BaseModel):
    """Formal parameter of a cataloged function."""
    name: str = Field(description="Parameter name, prefixed with the configured sigil")
    type: str = Field(default="", description="Annotation text, empty if unannotated")
    default: Any = Field(
        None,
        description="Literal default value, null when no default is declared"
    )

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "name": "a",
                "type": "int",
                "default": None
            }
        }


class FunctionRecord(BaseModel):
    """
    Catalog entry for a single function.

    Serialized with the key ``type`` for the return type so the JSON output
    keeps the ``{name, type, params, source}`` shape.
    """
    name: str = Field(description="Declared function name")
    return_type: str = Field(
        default="",
        alias="type",
        description="Return annotation text, empty if unannotated"
    )
    params: List[ParamRecord] = Field(
        default_factory=list,
        description="Parameters in declaration order"
    )
    source: str = Field(description="Exact definition text, from the def line to the last line")

    class Config:
        frozen = True
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "name": "add",
                "type": "int",
                "params": [
                    {"name": "a", "type": "int", "default": None},
                    {"name": "b", "type": "int", "default": None}
                ],
                "source": "def add(a: int, b: int) -> int:\n    return a + b"
            }
        }


# ============================================================================
# TOKENIZER SCHEMAS
# ============================================================================

class TokenRecord(BaseModel):
    """Lexical unit produced by the tokenizer demo."""
    category: str = Field(description="Token category name, e.g. NAME, NUMBER, LPAR, WHITESPACE")
    text: str = Field(description="Literal text of the token")
    start: Tuple[int, int] = Field(description="(row, col) where the token starts")
    end: Tuple[int, int] = Field(description="(row, col) where the token ends")
    is_bare: bool = Field(
        default=False,
        description="True for single-character operators, rendered as the bare character"
    )

    class Config:
        frozen = True

    def render(self) -> str:
        """Render as ``CATEGORY : text``, or the bare character for one-char operators."""
        if self.is_bare:
            return self.text
        return f"{self.category} : {self.text}"
