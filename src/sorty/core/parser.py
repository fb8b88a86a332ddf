"""
Top-level parser for Rust source files.

This is not a full Rust parser. It tokenizes the whole file (so that strings,
comments and nested delimiters are never misread) and then recognises, at
module level only:
- inner and outer attributes, including doc comments
- visibility qualifiers
- ``extern crate``, ``mod`` and ``use`` items
Every other item is skipped by balanced-delimiter scanning. Inline module
bodies are parsed recursively.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from sorty.core.syntax import (
    Attribute,
    ExternCrate,
    Item,
    Literal,
    LitKind,
    MetaItem,
    MetaList,
    MetaNameValue,
    MetaWord,
    ModDecl,
    Module,
    OtherItem,
    Span,
    UseDecl,
    UseGlob,
    UseList,
    UseSimple,
    UseTree,
    Visibility,
)

logger = logging.getLogger(__name__)

# Files whose child modules live next to them rather than in a subdirectory
DIRECTORY_OWNERS = {"lib.rs", "main.rs", "mod.rs"}

OPENERS = {"(": ")", "[": "]", "{": "}"}
CLOSERS = {")", "]", "}"}

ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    "0": "\0",
    "'": "'",
    '"': '"',
}


class ParseError(ValueError):
    """Raised when a source file cannot be tokenized or its items delimited"""

    def __init__(self, message: str, file: str, line: int, column: int):
        super().__init__(f"{file}:{line}:{column}: {message}")
        self.file = file
        self.line = line
        self.column = column


class TokenKind(Enum):
    IDENT = "ident"
    LIFETIME = "lifetime"
    LITERAL = "literal"
    PUNCT = "punct"
    DOC = "doc"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    lo: int
    hi: int
    literal: Literal | None = None
    inner: bool = False  # only meaningful for doc comments


def _position(text: str, offset: int) -> tuple[int, int]:
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return line, column


# ============================================================
# Tokenizer
# ============================================================


class Tokenizer:
    """Splits Rust source text into tokens, dropping plain comments"""

    def __init__(self, text: str, file: str):
        self.text = text
        self.file = file
        self.pos = 0

    def error(self, message: str, offset: int | None = None) -> ParseError:
        line, column = _position(self.text, self.pos if offset is None else offset)
        return ParseError(message, self.file, line, column)

    def peek(self, ahead: int = 0) -> str:
        index = self.pos + ahead
        return self.text[index] if index < len(self.text) else ""

    def tokenize(self) -> list[Token]:
        tokens = []
        if self.text.startswith("\ufeff"):
            self.pos = 1
        if self.text.startswith("#!", self.pos) and not self.text.startswith(
            "#![", self.pos
        ):
            # shebang line
            end = self.text.find("\n", self.pos)
            self.pos = len(self.text) if end == -1 else end
        while True:
            self._skip_whitespace()
            if self.pos >= len(self.text):
                return tokens
            token = self._next_token()
            if token is not None:
                tokens.append(token)

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _next_token(self) -> Token | None:
        char = self.peek()
        start = self.pos

        if char == "/" and self.peek(1) == "/":
            return self._line_comment()
        if char == "/" and self.peek(1) == "*":
            return self._block_comment()

        if char in "bcr" and (literal := self._prefixed_literal()) is not None:
            return literal
        if char == "r" and self.peek(1) == "#" and _is_ident_start(self.peek(2)):
            self.pos += 2
            name = self._identifier()
            return Token(TokenKind.IDENT, "r#" + name, start, self.pos)
        if _is_ident_start(char):
            name = self._identifier()
            return Token(TokenKind.IDENT, name, start, self.pos)
        if char.isdigit():
            return self._number()
        if char == '"':
            self.pos += 1
            value = self._quoted('"')
            return self._literal(LitKind.STR, value, start)
        if char == "'":
            return self._quote_or_lifetime()
        if char == ":" and self.peek(1) == ":":
            self.pos += 2
            return Token(TokenKind.PUNCT, "::", start, self.pos)

        self.pos += 1
        return Token(TokenKind.PUNCT, char, start, self.pos)

    def _literal(self, kind: LitKind, value: str, start: int) -> Token:
        text = self.text[start : self.pos]
        return Token(TokenKind.LITERAL, text, start, self.pos, Literal(kind, value))

    def _identifier(self) -> str:
        start = self.pos
        while self.pos < len(self.text) and _is_ident_continue(self.text[self.pos]):
            self.pos += 1
        return self.text[start : self.pos]

    def _line_comment(self) -> Token | None:
        start = self.pos
        end = self.text.find("\n", start)
        if end == -1:
            end = len(self.text)
        self.pos = end
        body = self.text[start:end]
        if body.startswith("///") and not body.startswith("////"):
            return Token(TokenKind.DOC, body, start, end, Literal(LitKind.STR, body[3:]))
        if body.startswith("//!"):
            return Token(
                TokenKind.DOC, body, start, end, Literal(LitKind.STR, body[3:]), True
            )
        return None

    def _block_comment(self) -> Token | None:
        start = self.pos
        depth = 0
        while self.pos < len(self.text):
            if self.text.startswith("/*", self.pos):
                depth += 1
                self.pos += 2
            elif self.text.startswith("*/", self.pos):
                depth -= 1
                self.pos += 2
                if depth == 0:
                    break
            else:
                self.pos += 1
        else:
            raise self.error("unterminated block comment", start)

        body = self.text[start : self.pos]
        content = body[3:-2]
        if body.startswith("/**") and not body.startswith("/***") and body != "/**/":
            return Token(TokenKind.DOC, body, start, self.pos, Literal(LitKind.STR, content))
        if body.startswith("/*!"):
            return Token(
                TokenKind.DOC, body, start, self.pos, Literal(LitKind.STR, content), True
            )
        return None

    def _prefixed_literal(self) -> Token | None:
        """Byte, C and raw string literals: b"", b'', br"", r"", r#""#, c"", cr"" """
        start = self.pos
        rest = self.text[start : start + 3]
        for prefix, kind in (
            ("br", LitKind.BYTE_STR),
            ("cr", LitKind.STR),
            ("r", LitKind.STR),
        ):
            if rest.startswith(prefix) and self.peek(len(prefix)) in ('"', "#"):
                hashes = 0
                while self.peek(len(prefix) + hashes) == "#":
                    hashes += 1
                if self.peek(len(prefix) + hashes) != '"':
                    return None
                self.pos += len(prefix) + hashes + 1
                terminator = '"' + "#" * hashes
                end = self.text.find(terminator, self.pos)
                if end == -1:
                    raise self.error("unterminated raw string literal", start)
                value = self.text[self.pos : end]
                self.pos = end + len(terminator)
                return self._literal(kind, value, start)

        if rest.startswith('b"'):
            self.pos += 2
            return self._literal(LitKind.BYTE_STR, self._quoted('"'), start)
        if rest.startswith('c"'):
            self.pos += 2
            return self._literal(LitKind.STR, self._quoted('"'), start)
        if rest.startswith("b'"):
            self.pos += 2
            return self._literal(LitKind.BYTE, self._quoted("'"), start)
        return None

    def _quoted(self, quote: str) -> str:
        """Read up to the closing quote, unescaping as we go"""
        start = self.pos - 1
        chars = []
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == quote:
                self.pos += 1
                return "".join(chars)
            if char == "\\":
                chars.append(self._escape())
                continue
            chars.append(char)
            self.pos += 1
        raise self.error("unterminated literal", start)

    def _escape(self) -> str:
        code = self.peek(1)
        if code in ESCAPES:
            self.pos += 2
            return ESCAPES[code]
        if code == "x":
            value = self.text[self.pos + 2 : self.pos + 4]
            self.pos += 4
            return chr(int(value, 16))
        if code == "u" and self.peek(2) == "{":
            end = self.text.find("}", self.pos)
            if end == -1:
                raise self.error("malformed unicode escape")
            value = self.text[self.pos + 3 : end].replace("_", "")
            self.pos = end + 1
            return chr(int(value, 16))
        if code == "\n":
            # line continuation: skip the newline and leading whitespace
            self.pos += 2
            self._skip_whitespace()
            return ""
        raise self.error(f"unknown character escape: \\{code}")

    def _quote_or_lifetime(self) -> Token:
        start = self.pos
        if self.peek(1) == "\\" or (self.peek(2) == "'" and self.peek(1) != ""):
            self.pos += 1
            return self._literal(LitKind.CHAR, self._quoted("'"), start)
        self.pos += 1
        name = self._identifier()
        return Token(TokenKind.LIFETIME, "'" + name, start, self.pos)

    def _number(self) -> Token:
        start = self.pos
        kind = LitKind.INT
        while self.pos < len(self.text) and (
            self.text[self.pos].isalnum() or self.text[self.pos] == "_"
        ):
            self.pos += 1
        if self.peek() == "." and self.peek(1).isdigit():
            kind = LitKind.FLOAT
            self.pos += 1
            while self.pos < len(self.text) and (
                self.text[self.pos].isalnum() or self.text[self.pos] == "_"
            ):
                self.pos += 1
        return self._literal(kind, self.text[start : self.pos], start)


def _is_ident_start(char: str) -> bool:
    return char == "_" or char.isalpha()


def _is_ident_continue(char: str) -> bool:
    return char == "_" or char.isalnum()


# ============================================================
# Attribute meta items
# ============================================================


class _MetaParser:
    """Parses the token stream between ``#[`` and ``]`` into a meta item"""

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.pos = 0

    def parse(self) -> MetaItem | None:
        meta = self._meta()
        if meta is None or self.pos != len(self.tokens):
            return None
        return meta

    def _peek(self) -> Token | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _is_punct(self, text: str) -> bool:
        token = self._peek()
        return token is not None and token.kind == TokenKind.PUNCT and token.text == text

    def _path(self) -> str | None:
        segments = []
        if self._is_punct("::"):
            segments.append("")
            self.pos += 1
        while True:
            token = self._peek()
            if token is None or token.kind != TokenKind.IDENT:
                return None
            segments.append(token.text)
            self.pos += 1
            if not self._is_punct("::"):
                return "::".join(segments)
            self.pos += 1

    def _literal(self) -> Literal | None:
        token = self._peek()
        if token is None:
            return None
        if token.kind == TokenKind.LITERAL:
            self.pos += 1
            return token.literal
        if token.kind == TokenKind.IDENT and token.text in ("true", "false"):
            self.pos += 1
            return Literal(LitKind.BOOL, token.text)
        return None

    def _meta(self) -> MetaItem | None:
        name = self._path()
        if name is None:
            return None
        if self._is_punct("="):
            self.pos += 1
            value = self._literal()
            return None if value is None else MetaNameValue(name, value)
        if self._is_punct("("):
            self.pos += 1
            items = []
            while not self._is_punct(")"):
                item = self._nested()
                if item is None:
                    return None
                items.append(item)
                if self._is_punct(","):
                    self.pos += 1
                elif not self._is_punct(")"):
                    return None
            self.pos += 1
            return MetaList(name, tuple(items))
        return MetaWord(name)

    def _nested(self) -> MetaItem | Literal | None:
        token = self._peek()
        if token is not None and token.kind == TokenKind.LITERAL:
            return self._literal()
        return self._meta()


# ============================================================
# Item parser
# ============================================================


class Parser:
    """Builds a ``Module`` tree from the tokens of one file"""

    def __init__(self, text: str, file: str | Path):
        self.text = text
        self.file = str(file)
        self.tokens = Tokenizer(text, self.file).tokenize()
        self.pos = 0

    def error(self, message: str, token: Token | None = None) -> ParseError:
        offset = token.lo if token is not None else len(self.text)
        line, column = _position(self.text, offset)
        return ParseError(message, self.file, line, column)

    # -------- token helpers --------

    def peek(self, ahead: int = 0) -> Token | None:
        index = self.pos + ahead
        return self.tokens[index] if index < len(self.tokens) else None

    def next(self) -> Token:
        token = self.peek()
        if token is None:
            raise self.error("unexpected end of file")
        self.pos += 1
        return token

    def is_punct(self, text: str, ahead: int = 0) -> bool:
        token = self.peek(ahead)
        return token is not None and token.kind == TokenKind.PUNCT and token.text == text

    def is_keyword(self, text: str, ahead: int = 0) -> bool:
        token = self.peek(ahead)
        return token is not None and token.kind == TokenKind.IDENT and token.text == text

    def expect_punct(self, text: str) -> Token:
        token = self.peek()
        if not self.is_punct(text):
            found = token.text if token is not None else "end of file"
            raise self.error(f"expected `{text}`, found `{found}`", token)
        return self.next()

    def expect_ident(self) -> Token:
        token = self.peek()
        if token is None or token.kind != TokenKind.IDENT:
            found = token.text if token is not None else "end of file"
            raise self.error(f"expected identifier, found `{found}`", token)
        return self.next()

    # -------- modules --------

    def parse_module(self, module_dir: Path) -> Module:
        items, inner_attrs = self._parse_items(module_dir, inline=False)
        return Module(file=self.file, items=items, inner_attrs=inner_attrs)

    def _parse_items(
        self, module_dir: Path, inline: bool
    ) -> tuple[tuple[Item, ...], tuple[Attribute, ...]]:
        items = []
        inner_attrs = []
        while True:
            token = self.peek()
            if token is None:
                if inline:
                    raise self.error("unclosed inline module body")
                break
            if inline and self.is_punct("}"):
                break
            if self.is_punct(";"):
                self.next()
                continue
            if self._at_inner_attribute():
                inner_attrs.append(self._parse_attribute())
                continue
            items.append(self._parse_item(module_dir))
        return tuple(items), tuple(inner_attrs)

    def _at_inner_attribute(self) -> bool:
        token = self.peek()
        if token is not None and token.kind == TokenKind.DOC:
            return token.inner
        return self.is_punct("#") and self.is_punct("!", 1) and self.is_punct("[", 2)

    def _at_outer_attribute(self) -> bool:
        token = self.peek()
        if token is not None and token.kind == TokenKind.DOC:
            return not token.inner
        return self.is_punct("#") and self.is_punct("[", 1)

    def _parse_attribute(self) -> Attribute:
        start = self.next()
        if start.kind == TokenKind.DOC:
            meta = MetaNameValue("doc", start.literal)
            return Attribute(meta, Span(start.lo, start.hi, self.file), start.inner)

        inner = self.is_punct("!")
        if inner:
            self.next()
        self.expect_punct("[")
        body = self._balanced_until("]")
        end = self.expect_punct("]")
        meta = _MetaParser(body).parse()
        if meta is None:
            logger.debug(f"Ignoring non-meta attribute at {self.file}:{start.lo}")
        return Attribute(meta, Span(start.lo, end.hi, self.file), inner)

    def _balanced_until(self, closer: str) -> list[Token]:
        """Collect tokens up to (not including) ``closer`` at depth zero"""
        collected = []
        stack = []
        while True:
            token = self.peek()
            if token is None:
                raise self.error(f"expected `{closer}` before end of file")
            if token.kind == TokenKind.PUNCT:
                if not stack and token.text == closer:
                    return collected
                if token.text in OPENERS:
                    stack.append(OPENERS[token.text])
                elif token.text in CLOSERS:
                    if not stack or stack.pop() != token.text:
                        raise self.error(f"unbalanced `{token.text}`", token)
            collected.append(self.next())

    def _parse_item(self, module_dir: Path) -> Item:
        first = self.peek()
        attrs = []
        while self._at_outer_attribute():
            attrs.append(self._parse_attribute())
        if self.peek() is None:
            raise self.error("expected item after attributes")

        vis = self._parse_visibility()
        if self.peek() is None:
            raise self.error("expected item after visibility")

        if self.is_keyword("extern") and self.is_keyword("crate", 1):
            kind = self._parse_extern_crate()
        elif self.is_keyword("mod") and self._is_mod_decl():
            kind = self._parse_mod(attrs, module_dir)
        elif self.is_keyword("use"):
            self.next()
            kind = UseDecl(self._parse_use_tree())
            self.expect_punct(";")
        else:
            kind = OtherItem(self.peek().text)
            self._skip_item()

        last = self.tokens[self.pos - 1]
        return Item(kind, Span(first.lo, last.hi, self.file), tuple(attrs), vis)

    def _parse_visibility(self) -> Visibility:
        if not self.is_keyword("pub"):
            return Visibility.INHERITED
        self.next()
        if self.is_punct("("):
            self.next()
            self._balanced_until(")")
            self.expect_punct(")")
            return Visibility.RESTRICTED
        return Visibility.PUBLIC

    def _parse_extern_crate(self) -> ExternCrate:
        self.next()
        self.next()
        name = self.expect_ident().text
        rename = None
        if self.is_keyword("as"):
            self.next()
            rename = self.expect_ident().text
        self.expect_punct(";")
        return ExternCrate(name, rename)

    def _is_mod_decl(self) -> bool:
        token = self.peek(1)
        return (
            token is not None
            and token.kind == TokenKind.IDENT
            and (self.is_punct(";", 2) or self.is_punct("{", 2))
        )

    def _parse_mod(self, attrs: list[Attribute], module_dir: Path) -> ModDecl:
        self.next()
        name_token = self.next()
        name = name_token.text.removeprefix("r#")

        if self.is_punct(";"):
            self.next()
            path_attr = _path_attribute(attrs)
            if path_attr is not None:
                target = Path(self.file).parent / path_attr
            else:
                target = resolve_module_file(module_dir, name)
            return ModDecl(name, Span(0, 0, str(target)))

        open_brace = self.expect_punct("{")
        items, inner_attrs = self._parse_items(module_dir / name, inline=True)
        close_brace = self.expect_punct("}")
        body = Module(file=self.file, items=items, inner_attrs=inner_attrs)
        return ModDecl(name, Span(open_brace.lo, close_brace.hi, self.file), body)

    def _skip_item(self) -> None:
        """Consume one unrecognised item: up to `;` or a closing `}` at depth zero"""
        start = self.pos
        stack = []
        while True:
            token = self.peek()
            if token is None:
                if stack:
                    raise self.error(f"expected `{stack[-1]}` before end of file")
                return
            if token.kind == TokenKind.PUNCT:
                if token.text in OPENERS:
                    stack.append(OPENERS[token.text])
                elif token.text in CLOSERS:
                    if not stack:
                        if token.text == "}" and self.pos > start:
                            # end of the enclosing inline module
                            return
                        raise self.error(f"unbalanced `{token.text}`", token)
                    if stack.pop() != token.text:
                        raise self.error(f"mismatched `{token.text}`", token)
                    if not stack and token.text == "}":
                        self.next()
                        return
                elif token.text == ";" and not stack:
                    self.next()
                    return
            self.next()

    # -------- use trees --------

    def _parse_use_tree(self) -> UseTree:
        segments = []
        if self.is_punct("::"):
            self.next()
            segments.append("")

        while True:
            if self.is_punct("*"):
                self.next()
                return UseGlob("::".join(segments))
            if self.is_punct("{"):
                self.next()
                members = []
                while not self.is_punct("}"):
                    members.append(self._parse_use_tree())
                    if self.is_punct(","):
                        self.next()
                    elif not self.is_punct("}"):
                        token = self.peek()
                        found = token.text if token is not None else "end of file"
                        raise self.error(f"expected `,` or `}}`, found `{found}`", token)
                self.next()
                return UseList("::".join(segments), tuple(members))

            segments.append(self.expect_ident().text)
            if not self.is_punct("::"):
                break
            self.next()

        rename = None
        if self.is_keyword("as"):
            self.next()
            rename = self.expect_ident().text
        return UseSimple("::".join(segments), rename)


# ============================================================
# Module file resolution
# ============================================================


def _path_attribute(attrs: list[Attribute]) -> str | None:
    for attr in attrs:
        match attr.meta:
            case MetaNameValue(name="path", value=Literal(kind=LitKind.STR, value=value)):
                return value
    return None


def module_directory(file: Path) -> Path:
    """Directory in which the out-of-line children of ``file`` live"""
    if file.name in DIRECTORY_OWNERS:
        return file.parent
    return file.parent / file.stem


def resolve_module_file(module_dir: Path, name: str) -> Path:
    """File holding the contents of ``mod name;`` declared in ``module_dir``"""
    candidates = [module_dir / f"{name}.rs", module_dir / name / "mod.rs"]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return candidates[0]


def parse_source(text: str, file: str | Path) -> Module:
    """Parse source text as the module stored in ``file``"""
    path = Path(file)
    return Parser(text, path).parse_module(module_directory(path))


def parse_file(path: Path) -> Module:
    """Read and parse a Rust source file"""
    logger.debug(f"Parsing {path}")
    return parse_source(path.read_text(encoding="utf-8"), path)
