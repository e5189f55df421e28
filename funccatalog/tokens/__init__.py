"""Tokenizer demo components."""

from .lexer import DEMO_SOURCE, WHITESPACE, render_tokens, tokenize_source

__all__ = ["DEMO_SOURCE", "WHITESPACE", "render_tokens", "tokenize_source"]
