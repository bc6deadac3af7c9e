from typing import Any, Iterator

from tlox.errors import ErrorKind, ErrorReporter
from tlox.tokens import KEYWORDS, Token, TokenType as TT


def is_ascii_digit(char: str) -> bool:
    return char.isascii() and char.isdigit()


def is_identifier(char: str) -> bool:
    return char.isascii() and char.isidentifier()


class Scanner:
    """Turns source text into tokens.

    Iterating a scanner scans lazily from the start of the source, so the
    same scanner can be iterated again. Unrecognized characters and
    unterminated strings are reported and skipped.
    """

    def __init__(self, source: str, reporter: ErrorReporter | None = None) -> None:
        self.source = source
        self.reporter = reporter if reporter is not None else ErrorReporter()

        self.start = 0
        self.current = 0
        self.line = 1

    def __iter__(self) -> Iterator[Token]:
        self.start = 0
        self.current = 0
        self.line = 1

        while not self.at_end():
            self.start = self.current
            token = self.scan_token()
            if token is not None:
                yield token

        yield Token(TT.EOF, "", self.line)

    def scan_tokens(self) -> list[Token]:
        return list(self)

    def at_end(self) -> bool:
        return self.current >= len(self.source)

    def scan_token(self) -> Token | None:
        ch = self.advance()

        match ch:
            case "!" if self.match("="):
                return self.make_token(TT.BANG_EQUAL)
            case "=" if self.match("="):
                return self.make_token(TT.EQUAL_EQUAL)
            case "<" if self.match("="):
                return self.make_token(TT.LESS_EQUAL)
            case ">" if self.match("="):
                return self.make_token(TT.GREATER_EQUAL)
            case "/" if self.match("/"):
                while self.peek() != "\n" and not self.at_end():
                    self.advance()
            case (
                  "(" | ")" | "{" | "}" | ","
                | "." | "-" | "+" | ";" | "*"
                | "!" | "=" | "<" | ">" | "/"
            ):
                return self.make_token(TT(ch))
            case "\n":
                self.line += 1
            case '"':
                return self.string()
            case ch if is_ascii_digit(ch):
                return self.number()
            case ch if is_identifier(ch):
                return self.identifier()
            case ch if ch not in " \r\t":
                self.reporter.error(self.line, f"Unexpected character '{ch}'.", ErrorKind.LEX)

        return None

    def advance(self) -> str:
        ch = self.source[self.current]
        self.current += 1
        return ch

    def make_token(self, type: TT, literal: Any = None, line: int | None = None) -> Token:
        text = self.source[self.start : self.current]
        return Token(type, text, self.line if line is None else line, literal)

    def match(self, expected: str) -> bool:
        if self.at_end() or self.source[self.current] != expected:
            return False

        self.current += 1
        return True

    def peek(self) -> str:
        return self.source[self.current] if not self.at_end() else "\0"

    def peek_next(self) -> str:
        if self.current + 1 >= len(self.source):
            return "\0"
        return self.source[self.current + 1]

    def string(self) -> Token | None:
        start_line = self.line
        while self.peek() != '"' and not self.at_end():
            if self.peek() == "\n":
                self.line += 1
            self.advance()

        if self.at_end():
            self.reporter.error(start_line, "Unterminated string.", ErrorKind.LEX)
            return None

        self.advance()

        value = self.source[self.start + 1 : self.current - 1]
        return self.make_token(TT.STRING, value, line=start_line)

    def number(self) -> Token:
        while is_ascii_digit(self.peek()):
            self.advance()

        if self.peek() == "." and is_ascii_digit(self.peek_next()):
            self.advance()

            while is_ascii_digit(self.peek()):
                self.advance()

        value_str = self.source[self.start : self.current]
        return self.make_token(TT.NUMBER, float(value_str))

    def identifier(self) -> Token:
        while is_identifier(self.peek()) or is_ascii_digit(self.peek()):
            self.advance()

        text = self.source[self.start : self.current]

        return self.make_token(KEYWORDS.get(text, TT.IDENTIFIER))
