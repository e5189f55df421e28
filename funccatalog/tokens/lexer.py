"""
Tokenizer demo built on the standard ``tokenize`` lexer.

The byte-oriented tokenizer always opens the stream with an ENCODING token,
which marks the start of source. Gaps between tokens are reported as
WHITESPACE tokens so that the token texts concatenate back to the input.
"""

import io
import logging
import tokenize
from typing import List, Tuple

from funccatalog.errors import MalformedSourceError
from funccatalog.schemas import TokenRecord

logger = logging.getLogger(__name__)

DEMO_SOURCE = "add(multiply(2, 3), 5);"

WHITESPACE = "WHITESPACE"


def _line_offsets(source: str) -> List[int]:
    offsets = [0]
    for i, ch in enumerate(source):
        if ch == "\n":
            offsets.append(i + 1)
    return offsets


def _to_offset(offsets: List[int], position: Tuple[int, int], limit: int) -> int:
    row, col = position
    if row - 1 >= len(offsets):
        return limit
    return min(offsets[row - 1] + col, limit)


def _category(tok: tokenize.TokenInfo) -> str:
    if tok.type == tokenize.OP:
        return tokenize.tok_name[tok.exact_type]
    return tokenize.tok_name[tok.type]


def tokenize_source(source: str, include_whitespace: bool = True) -> List[TokenRecord]:
    """
    Split ``source`` into lexical tokens in source order.

    Args:
        source: Python source text
        include_whitespace: Report gaps between tokens as WHITESPACE tokens

    Returns:
        TokenRecords, starting with the ENCODING marker

    Raises:
        MalformedSourceError: If the source cannot be lexed
    """
    offsets = _line_offsets(source)
    limit = len(source)
    readline = io.BytesIO(source.encode("utf-8")).readline

    records = []
    cursor = 0
    cursor_pos = (1, 0)
    try:
        for tok in tokenize.tokenize(readline):
            if tok.type == tokenize.ENCODING:
                records.append(TokenRecord(
                    category=_category(tok), text=tok.string, start=tok.start, end=tok.end
                ))
                continue

            start = _to_offset(offsets, tok.start, limit)
            end = _to_offset(offsets, tok.end, limit)

            if include_whitespace and start > cursor:
                records.append(TokenRecord(
                    category=WHITESPACE,
                    text=source[cursor:start],
                    start=cursor_pos,
                    end=tok.start,
                ))

            records.append(TokenRecord(
                category=_category(tok),
                text=tok.string,
                start=tok.start,
                end=tok.end,
                is_bare=tok.type == tokenize.OP and len(tok.string) == 1,
            ))

            if end >= cursor:
                cursor = end
                cursor_pos = tok.end
    except (tokenize.TokenError, SyntaxError) as e:
        raise MalformedSourceError(f"Cannot tokenize source: {e}") from e

    logger.debug(f"Tokenized {limit} characters into {len(records)} tokens")
    return records


def render_tokens(tokens: List[TokenRecord]) -> List[str]:
    """Render each token as ``CATEGORY : text`` or its bare character."""
    return [t.render() for t in tokens]
