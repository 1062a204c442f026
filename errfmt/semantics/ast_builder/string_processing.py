"""String literal decoding for schema attributes."""
from __future__ import annotations

from lark import Token


def process_string_escapes(raw_string: str) -> str:
    r"""Process escape sequences in a string literal body.

    Handles the escapes accepted in Rust string literals:
    - \n (newline), \t (tab), \r (carriage return)
    - \\ (backslash), \" (double quote), \' (single quote)
    - \0 (null character)
    - \xNN (hexadecimal escape, e.g., \x41 = 'A')
    - \u{N..} (Unicode escape with 1-6 hex digits, e.g., \u{1F363})
    - backslash at end of line, which skips the newline and the
      leading whitespace of the next line

    Unknown or malformed escapes are kept as written.

    Args:
        raw_string: The raw string with potential escape sequences

    Returns:
        The processed string with escape sequences converted to actual characters
    """
    simple_escapes = {
        'n': '\n',
        't': '\t',
        'r': '\r',
        '\\': '\\',
        '"': '"',
        "'": "'",
        '0': '\0',
    }

    result = []
    i = 0
    while i < len(raw_string):
        if raw_string[i] != '\\' or i + 1 >= len(raw_string):
            result.append(raw_string[i])
            i += 1
            continue

        next_char = raw_string[i + 1]

        if next_char in simple_escapes:
            result.append(simple_escapes[next_char])
            i += 2
        elif next_char == '\n':
            i += 2
            while i < len(raw_string) and raw_string[i] in ' \t\r\n':
                i += 1
        elif next_char == 'x' and i + 3 < len(raw_string) and _is_hex(raw_string[i + 2:i + 4]):
            result.append(chr(int(raw_string[i + 2:i + 4], 16)))
            i += 4
        elif next_char == 'u' and raw_string.startswith('{', i + 2):
            close = raw_string.find('}', i + 3)
            digits = raw_string[i + 3:close] if close != -1 else ""
            if 1 <= len(digits) <= 6 and _is_hex(digits) and int(digits, 16) <= 0x10FFFF:
                result.append(chr(int(digits, 16)))
                i = close + 1
            else:
                result.append(raw_string[i])
                i += 1
        else:
            result.append(raw_string[i])
            i += 1

    return ''.join(result)


def _is_hex(text: str) -> bool:
    return bool(text) and all(c in "0123456789abcdefABCDEF" for c in text)


def parse_string_token(tok: Token) -> str:
    """Strip the quotes from a STRING token and decode its escapes."""
    return process_string_escapes(str(tok)[1:-1])


def maps_directly(literal: str) -> bool:
    """True when offsets into the decoded string are offsets into the source line."""
    body = literal[1:-1]
    return '\\' not in body and '\n' not in body
