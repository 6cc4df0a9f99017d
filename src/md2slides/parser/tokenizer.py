"""Markdown tokenizer built on markdown-it-py.

The stock CommonMark parser (with HTML, tables and strikethrough enabled) is
extended with two plugins:

- trailing attributes: ``# Title {.big}``, ``{.column}`` and
  ``{layout="Title Only"}`` suffixes on headings and paragraphs are stripped
  from the text and stored on the block's open token.
- emoji: ``:shortcode:`` becomes an ``emoji`` token resolved through the
  emoji package's alias table.

The resulting stream is flattened (inline children spliced in place) and
converted into the token dataclasses of :mod:`md2slides.parser.tokens`.
"""

import logging
import re
from typing import Iterator, Optional

import emoji
from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.rules_inline import StateInline
from markdown_it.token import Token as MdToken

from .tokens import (
    Token, HeadingOpen, HeadingClose, ParagraphOpen, ParagraphClose,
    Text, Emoji, SoftBreak, HardBreak, EmphasisOpen, EmphasisClose,
    StrongOpen, StrongClose, StrikethroughOpen, StrikethroughClose,
    LinkOpen, LinkClose, CodeInline, Fence, ListOpen, ListClose,
    ListItemOpen, ListItemClose, BlockquoteOpen, BlockquoteClose,
    TableOpen, TableClose, RowOpen, RowClose, CellOpen, CellClose,
    HtmlBlock, HtmlInline, HorizontalRule,
)

logger = logging.getLogger("Md2Slides.parser.tokenizer")

ATTR_SUFFIX_RE = re.compile(r"[ \t]*\{([^{}\n]*)\}[ \t]*$")
ATTR_ITEM_RE = re.compile(
    r"""\s*(?:
        \.(?P<cls>[\w-]+)
      | \#(?P<id>[\w-]+)
      | (?P<key>[\w-]+)=(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s"'{}]+))
    )""",
    re.VERBOSE,
)
EMOJI_RE = re.compile(r":([a-z0-9_+\-]+):")

_ATTR_BLOCKS = {"heading_open", "paragraph_open"}


def parse_attributes(source: str) -> Optional[dict[str, str]]:
    """Parse the inside of a ``{...}`` suffix. Returns None when malformed."""
    body = source.strip()
    if not body:
        return None

    attrs: dict[str, str] = {}
    classes: list[str] = []
    pos = 0
    while pos < len(body):
        match = ATTR_ITEM_RE.match(body, pos)
        if not match:
            return None
        if match.group("cls"):
            classes.append(match.group("cls"))
        elif match.group("id"):
            attrs["id"] = match.group("id")
        else:
            value = next(v for v in match.group("dq", "sq", "bare") if v is not None)
            attrs[match.group("key")] = value
        pos = match.end()

    if classes:
        attrs["class"] = " ".join(classes)
    return attrs


def _trailing_attrs_rule(state: StateCore) -> None:
    tokens = state.tokens
    for index, block in enumerate(tokens[:-1]):
        if block.type not in _ATTR_BLOCKS:
            continue
        inline = tokens[index + 1]
        if inline.type != "inline" or not inline.children:
            continue
        last = inline.children[-1]
        if last.type != "text":
            continue
        match = ATTR_SUFFIX_RE.search(last.content)
        if not match:
            continue
        attrs = parse_attributes(match.group(1))
        if attrs is None:
            logger.debug("Ignoring malformed attribute suffix %r", match.group(0))
            continue

        last.content = last.content[:match.start()]
        inline.content = ATTR_SUFFIX_RE.sub("", inline.content, count=1)
        for name, value in attrs.items():
            block.attrSet(name, value)


def trailing_attrs_plugin(md: MarkdownIt) -> None:
    md.core.ruler.push("trailing_attrs", _trailing_attrs_rule)


def _emoji_rule(state: StateInline, silent: bool) -> bool:
    if state.src[state.pos] != ":":
        return False
    match = EMOJI_RE.match(state.src, state.pos, state.posMax)
    if not match:
        return False
    glyph = emoji.emojize(match.group(0), language="alias")
    if glyph == match.group(0):
        return False
    if not silent:
        token = state.push("emoji", "", 0)
        token.markup = match.group(1)
        token.content = glyph
    state.pos = match.end()
    return True


def emoji_plugin(md: MarkdownIt) -> None:
    md.inline.ruler.push("emoji", _emoji_rule)


def build_markdown_parser() -> MarkdownIt:
    return (
        MarkdownIt("commonmark", {"html": True})
        .enable(["table", "strikethrough"])
        .use(trailing_attrs_plugin)
        .use(emoji_plugin)
    )


_parser = build_markdown_parser()

_SIMPLE_TOKENS = {
    "paragraph_close": ParagraphClose,
    "softbreak": SoftBreak,
    "hardbreak": HardBreak,
    "em_open": EmphasisOpen,
    "em_close": EmphasisClose,
    "strong_open": StrongOpen,
    "strong_close": StrongClose,
    "s_open": StrikethroughOpen,
    "s_close": StrikethroughClose,
    "link_close": LinkClose,
    "list_item_open": ListItemOpen,
    "list_item_close": ListItemClose,
    "blockquote_open": BlockquoteOpen,
    "blockquote_close": BlockquoteClose,
    "table_open": TableOpen,
    "table_close": TableClose,
    "tr_open": RowOpen,
    "tr_close": RowClose,
    "hr": HorizontalRule,
}

# Structure the slide model has no use for.
_DROPPED_TOKENS = {"thead_open", "thead_close", "tbody_open", "tbody_close", "image"}


def _string_attrs(token: MdToken) -> dict[str, str]:
    return {str(k): str(v) for k, v in (token.attrs or {}).items()}


def _convert(token: MdToken) -> Iterator[Token]:
    kind = token.type

    if kind == "inline":
        for child in token.children or []:
            yield from _convert(child)
        return

    simple = _SIMPLE_TOKENS.get(kind)
    if simple is not None:
        yield simple()
    elif kind == "heading_open":
        yield HeadingOpen(level=int(token.tag[1:]), attrs=_string_attrs(token))
    elif kind == "heading_close":
        yield HeadingClose(level=int(token.tag[1:]))
    elif kind == "paragraph_open":
        yield ParagraphOpen(attrs=_string_attrs(token))
    elif kind == "text":
        if token.content:
            yield Text(token.content)
    elif kind == "emoji":
        yield Emoji(content=token.content, name=token.markup)
    elif kind == "code_inline":
        yield CodeInline(token.content)
    elif kind == "fence":
        yield Fence(content=token.content, info=token.info.strip())
    elif kind == "code_block":
        yield Fence(content=token.content)
    elif kind == "link_open":
        yield LinkOpen(href=str(token.attrGet("href") or ""))
    elif kind in ("bullet_list_open", "ordered_list_open"):
        yield ListOpen(ordered=kind == "ordered_list_open")
    elif kind in ("bullet_list_close", "ordered_list_close"):
        yield ListClose(ordered=kind == "ordered_list_close")
    elif kind in ("th_open", "td_open"):
        yield CellOpen(header=kind == "th_open")
    elif kind in ("th_close", "td_close"):
        yield CellClose(header=kind == "th_close")
    elif kind == "html_block":
        yield HtmlBlock(token.content)
    elif kind == "html_inline":
        yield HtmlInline(token.content)
    elif kind in _DROPPED_TOKENS:
        logger.debug("Dropping %s token", kind)
    else:
        logger.debug("Ignoring unsupported token %s", kind)


def tokenize(markdown: str) -> list[Token]:
    """Lex Markdown into an ordered, flat token stream."""
    tokens: list[Token] = []
    for token in _parser.parse(markdown):
        tokens.extend(_convert(token))
    return tokens
