"""
Command-line tokenizer.

Splits a raw command line into tokens while keeping quoted spans and
brace-enclosed option objects together. Quotes and braces may nest inside
each other, so the scan keeps an explicit stack of open delimiters:

    tokenize('-options {-z "{A}B"} -n 1')
    # ['-options', '{-z "{A}B"}', '-n', '1']

The module also holds the small string helpers shared by the binder and the
parse engine (option reference checks, unwrapping, batch regrouping).
"""

from typing import Optional, Sequence

OPTION_PREFIX = "-"
OPEN_BRACKET = "{"
CLOSE_BRACKET = "}"
QUOTE = '"'
SINGLE_QUOTE = "'"
TRIPLE_QUOTES = '"""'
SEPARATOR = "|"
ESCAPE = "\\"


def _emit(tokens: list[str], text: str) -> None:
    text = text.strip()
    if text:
        tokens.append(text)


def tokenize(raw: str) -> list[str]:
    """
    Split a raw command line into an ordered list of tokens.

    Rules:
        - Unquoted whitespace separates tokens; empty runs are discarded.
        - "...", '...' and \"\"\"...\"\"\" spans are single tokens. An escaped
          quote does not close a span; an unterminated span runs to the end.
        - A balanced {...} span (which may contain braces, quotes and '|')
          is a single token including the braces. An unmatched '}' stands alone.
        - '|' outside quotes and braces is a standalone separator token.

    Malformed input never raises; whatever is left open is emitted as one token.

    Args:
        raw: The command line.

    Returns:
        list[str]: Trimmed, non-empty tokens.
    """
    tokens: list[str] = []
    stack: list[str] = []
    length = len(raw)
    start = 0
    position = 0

    while position < length:
        char = raw[position]
        escaped = position > 0 and raw[position - 1] == ESCAPE
        triple = raw.startswith(TRIPLE_QUOTES, position)

        if not stack:
            if char.isspace():
                _emit(tokens, raw[start:position])
                position += 1
                start = position
                continue
            if char in (SEPARATOR, CLOSE_BRACKET):
                _emit(tokens, raw[start:position])
                tokens.append(char)
                position += 1
                start = position
                continue
            if triple:
                _emit(tokens, raw[start:position])
                stack.append(TRIPLE_QUOTES)
                start = position
                position += len(TRIPLE_QUOTES)
                continue
            if char == OPEN_BRACKET or (
                char in (QUOTE, SINGLE_QUOTE) and not escaped
            ):
                _emit(tokens, raw[start:position])
                stack.append(char)
                start = position
                position += 1
                continue
            position += 1
            continue

        top = stack[-1]
        if top == TRIPLE_QUOTES:
            if triple:
                # A closing triple quote swallows any quotes that follow it.
                end = position + len(TRIPLE_QUOTES)
                while end < length and raw[end] == QUOTE:
                    end += 1
                stack.pop()
                position = end
                if not stack:
                    _emit(tokens, raw[start:position])
                    start = position
                continue
        elif top in (QUOTE, SINGLE_QUOTE):
            if char == top and not escaped:
                stack.pop()
                position += 1
                if not stack:
                    _emit(tokens, raw[start:position])
                    start = position
                continue
        else:
            if triple:
                stack.append(TRIPLE_QUOTES)
                position += len(TRIPLE_QUOTES)
                continue
            if char == OPEN_BRACKET:
                stack.append(char)
            elif char == CLOSE_BRACKET:
                stack.pop()
                position += 1
                if not stack:
                    _emit(tokens, raw[start:position])
                    start = position
                continue
            elif char in (QUOTE, SINGLE_QUOTE) and not escaped:
                stack.append(char)

        position += 1

    _emit(tokens, raw[start:])
    return tokens


def regroup(tokens: Sequence[str]) -> list[str]:
    """
    Join tokens into argument groups delimited by the '|' separator.

    Tokens inside a group are joined with single spaces. Every separator closes
    a group, so adjacent separators yield an empty string rather than being
    dropped. The trailing group is always emitted for non-empty input.
    """
    groups: list[str] = []
    current: list[str] = []
    for token in tokens:
        if token == SEPARATOR:
            groups.append(" ".join(current))
            current = []
        else:
            current.append(token)

    if tokens:
        groups.append(" ".join(current))
    return groups


def split_batches(raw: str) -> list[str]:
    """Tokenize ``raw`` and regroup it into '|' separated argument groups."""
    return regroup(tokenize(raw))


def is_option_reference(token: str) -> bool:
    return token.startswith(OPTION_PREFIX)


def strip_prefix(token: str) -> str:
    return token.strip(OPTION_PREFIX)


def option_equals(token: str, word: str) -> bool:
    """Compare a token to a reserved word, ignoring the option prefix and case."""
    return strip_prefix(token).casefold() == word.casefold()


def unwrap_braces(text: str) -> str:
    """Remove one pair of surrounding braces, if present."""
    if len(text) >= 2 and text.startswith(OPEN_BRACKET) and text.endswith(CLOSE_BRACKET):
        return text[1:-1]
    return text


def unwrap_double_quote(text: Optional[str]) -> Optional[str]:
    """Remove one pair of surrounding double quotes, if present."""
    if text is None:
        return None
    if len(text) >= 2 and text[0] == QUOTE and text[-1] == QUOTE:
        return text[1:-1]
    return text


def peek_command(raw: str) -> str:
    """
    Return the leading command word of a raw command line without tokenizing it.

    Returns an empty string when the line is blank or starts with an option
    reference.
    """
    stripped = raw.lstrip()
    if not stripped or stripped.startswith(OPTION_PREFIX):
        return ""
    return stripped.split(maxsplit=1)[0]


def create_alias(command_name: str) -> str:
    """Build an alias from the first letter of each hyphen-separated word.

    Example: ``remove-file`` becomes ``rf``.
    """
    words = [word.strip() for word in command_name.split("-")]
    return "".join(word[0] for word in words if word)


def pop_argument(
    tokens: Sequence[str], name: str
) -> tuple[bool, str, list[str]]:
    """
    Find ``-name value`` in a token list and remove the pair.

    The name is matched case-insensitively. An occurrence whose next token is
    another option reference is skipped; an occurrence that is the last token
    has no value and ends the search.

    Returns:
        tuple: Whether the pair was found, its value ("" when not found) and
        the remaining tokens.
    """
    remaining = list(tokens)
    wanted = name.casefold()
    for index, token in enumerate(remaining):
        if not is_option_reference(token):
            continue
        if token[len(OPTION_PREFIX):].casefold() != wanted:
            continue
        if index + 1 >= len(remaining):
            return False, "", remaining
        if is_option_reference(remaining[index + 1]):
            continue

        value = remaining[index + 1]
        del remaining[index : index + 2]
        return True, value, remaining

    return False, "", remaining


__all__ = [
    "OPTION_PREFIX",
    "SEPARATOR",
    "tokenize",
    "regroup",
    "split_batches",
    "is_option_reference",
    "option_equals",
    "unwrap_braces",
    "unwrap_double_quote",
    "peek_command",
    "create_alias",
    "pop_argument",
]
