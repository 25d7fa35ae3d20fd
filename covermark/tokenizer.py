"""Split a paragraph into plain, highlight and whitespace tokens."""

import re
from dataclasses import dataclass
from typing import List

_WHITESPACE_RUNS = re.compile(r"(\s+)")


@dataclass(frozen=True)
class Token:
    text: str
    is_highlight: bool = False
    is_space: bool = False


def _split_plain(span: str) -> List[Token]:
    tokens = []
    for piece in _WHITESPACE_RUNS.split(span):
        if piece:
            tokens.append(Token(piece, is_space=piece.isspace()))
    return tokens


def tokenize(paragraph: str, highlight_word: str = "") -> List[Token]:
    """Tokenize one paragraph (no embedded line breaks).

    Every case-insensitive occurrence of `highlight_word` becomes a highlight
    token, matched literally, left to right and without overlap. The text
    between matches is split into whitespace and non-whitespace runs.
    Joining the token texts gives back `paragraph` exactly.
    """
    if not paragraph:
        return []
    if not highlight_word or highlight_word.isspace():
        return _split_plain(paragraph)

    pattern = re.compile(re.escape(highlight_word), re.IGNORECASE)
    tokens: List[Token] = []
    last_end = 0
    for match in pattern.finditer(paragraph):
        start, end = match.span()
        if start > last_end:
            tokens.extend(_split_plain(paragraph[last_end:start]))
        tokens.append(Token(paragraph[start:end], is_highlight=True))
        last_end = end
    if last_end < len(paragraph):
        tokens.extend(_split_plain(paragraph[last_end:]))
    return tokens
