"""Fold a Markdown token stream into slide definitions."""

import logging
import re
from enum import Enum
from typing import Callable

from bs4 import BeautifulSoup, Comment, Tag

from .. import config
from ..core.slides import Link, OptionalColor, SlideDefinition, TextStyle
from ..errors import ParseError
from .context import ExtractionContext
from .tokenizer import tokenize
from .tokens import (
    Token, HeadingOpen, HeadingClose, ParagraphOpen, ParagraphClose,
    Text, Emoji, SoftBreak, HardBreak, EmphasisOpen, EmphasisClose,
    StrongOpen, StrongClose, StrikethroughOpen, StrikethroughClose,
    LinkOpen, LinkClose, CodeInline, Fence, ListOpen, ListClose,
    ListItemOpen, BlockquoteOpen, BlockquoteClose,
    TableOpen, TableClose, RowOpen, RowClose, CellOpen, CellClose,
    HtmlBlock, HtmlInline, HorizontalRule, has_class,
)

logger = logging.getLogger("Md2Slides.parser.extractor")

NOTES_RE = re.compile(r"<!--([\s\S]*)-->")

INLINE_HTML_STYLES = {
    "strong": TextStyle(bold=True),
    "b": TextStyle(bold=True),
    "em": TextStyle(italic=True),
    "i": TextStyle(italic=True),
    "code": TextStyle(font_family=config.MONOSPACE_FONT),
    "sub": TextStyle(baseline_offset="SUBSCRIPT"),
    "sup": TextStyle(baseline_offset="SUPERSCRIPT"),
    "span": TextStyle(),
}


class ParserMode(Enum):
    """Which rule table applies.

    DOCUMENT builds whole slides; INLINE only accumulates styled text and is
    used for speaker notes.
    """
    DOCUMENT = "document"
    INLINE = "inline"


Rule = Callable[[Token, ExtractionContext], None]


def process_tokens(tokens: list[Token], context: ExtractionContext,
                   mode: ParserMode = ParserMode.DOCUMENT) -> None:
    rules = RULES[mode]
    for index, token in enumerate(tokens):
        if index == 0 and isinstance(token, HorizontalRule):
            # Nothing to close yet.
            continue
        rule = rules.get(type(token))
        if rule is None:
            logger.debug("Ignoring %s token in %s mode", type(token).__name__, mode.value)
            continue
        rule(token, context)


def extract_slides(markdown: str) -> list[SlideDefinition]:
    """Parse Markdown into slide definitions, one per ``---`` separated section."""
    context = ExtractionContext()
    process_tokens(tokenize(markdown), context, ParserMode.DOCUMENT)
    slides = context.done()
    logger.info("Extracted %d slides", len(slides))
    return slides


# ── Inline rules ────────────────────────────────────────────────────────

def _styled(seed: TextStyle) -> Rule:
    def rule(_token, context):
        context.push_style(seed)
    return rule


def _pop_style(_token, context: ExtractionContext) -> None:
    context.pop_style()


def _append(text: str) -> Rule:
    def rule(_token, context):
        context.append_text(text)
    return rule


def _text(token, context: ExtractionContext) -> None:
    context.append_text(token.content)


def _inline_heading_open(_token, context: ExtractionContext) -> None:
    context.push_style(TextStyle(bold=True))


def _inline_heading_close(_token, context: ExtractionContext) -> None:
    context.pop_style()
    context.append_text("\n")


def _paragraph_open(token: ParagraphOpen, context: ExtractionContext) -> None:
    marker = False
    if has_class(token.attrs, "column"):
        context.split_column()
        marker = True
    layout = token.attrs.get("layout")
    if layout:
        context.set_custom_layout(layout)
        marker = True
    context.open_paragraph(marker=marker)


def _paragraph_close(_token, context: ExtractionContext) -> None:
    context.close_paragraph()


def _link_open(token: LinkOpen, context: ExtractionContext) -> None:
    context.push_style(TextStyle(link=Link(url=token.href or "#")))


def _code_inline(token: CodeInline, context: ExtractionContext) -> None:
    context.push_style(TextStyle(font_family=config.MONOSPACE_FONT))
    context.append_text(token.content)
    context.pop_style()


def _fence(token: Fence, context: ExtractionContext) -> None:
    # Vertical tabs keep the whole block in one paragraph.
    body = token.content.rstrip("\n").replace("\n", "\v")
    context.push_style(TextStyle(font_family=config.MONOSPACE_FONT))
    context.append_text(body)
    context.pop_style()
    context.append_text("\n")


def _list_open(token: ListOpen, context: ExtractionContext) -> None:
    context.open_list(token.ordered)


def _list_close(_token, context: ExtractionContext) -> None:
    context.close_list()


def _list_item_open(_token, context: ExtractionContext) -> None:
    context.open_list_item()


def _html_inline(token: HtmlInline, context: ExtractionContext) -> None:
    fragment = BeautifulSoup(token.content, "html.parser")
    node = next(iter(fragment.contents), None)
    if node is None:
        # A closing tag parses to nothing.
        if len(context.styles) <= 1:
            raise ParseError(f"Unmatched closing HTML tag: {token.content}")
        context.pop_style()
        return
    if isinstance(node, Comment):
        _apply_notes(token.content, context)
        return
    if not isinstance(node, Tag):
        raise ParseError(f"Expected HTML element node, got {token.content!r}")
    seed = INLINE_HTML_STYLES.get(node.name)
    if seed is None:
        raise ParseError(f"Unsupported inline HTML element: {node.name}")
    context.push_style(seed)


INLINE_RULES: dict[type, Rule] = {
    HeadingOpen: _inline_heading_open,
    HeadingClose: _inline_heading_close,
    ParagraphOpen: _paragraph_open,
    ParagraphClose: _paragraph_close,
    Text: _text,
    Emoji: _text,
    SoftBreak: _append(" "),
    HardBreak: _append("\v"),
    EmphasisOpen: _styled(TextStyle(italic=True)),
    EmphasisClose: _pop_style,
    StrongOpen: _styled(TextStyle(bold=True)),
    StrongClose: _pop_style,
    StrikethroughOpen: _styled(TextStyle(strikethrough=True)),
    StrikethroughClose: _pop_style,
    LinkOpen: _link_open,
    LinkClose: _pop_style,
    CodeInline: _code_inline,
    Fence: _fence,
    BlockquoteOpen: _styled(TextStyle(italic=True)),
    BlockquoteClose: _pop_style,
    ListOpen: _list_open,
    ListClose: _list_close,
    ListItemOpen: _list_item_open,
    HtmlInline: _html_inline,
}


# ── Document rules ──────────────────────────────────────────────────────

def _heading_open(token: HeadingOpen, context: ExtractionContext) -> None:
    if token.level > 2:
        _inline_heading_open(token, context)
        return
    if context.text is not None and not context.text.is_blank():
        logger.debug("Heading replaces pending text %r", context.text.raw_text)
    text = context.open_text_block()
    text.big = has_class(token.attrs, "big")


def _heading_close(token: HeadingClose, context: ExtractionContext) -> None:
    if token.level > 2:
        _inline_heading_close(token, context)
        return
    context.assign_heading(token.level)
    context.open_text_block()


def _apply_notes(html: str, context: ExtractionContext) -> None:
    """Process the body of an HTML comment as speaker notes for the open slide."""
    slide = context.require_slide()
    match = NOTES_RE.search(html)
    if match is None:
        raise ParseError(f"Unsupported HTML block: {html}")

    # Notes may hold Markdown; a separate context keeps the slide's state intact.
    notes_context = ExtractionContext()
    if slide.notes:
        notes_context.require_text().raw_text = slide.notes
    process_tokens(tokenize(match.group(1)), notes_context, ParserMode.INLINE)
    notes = notes_context.text
    if notes is not None and not notes.is_blank():
        context.set_notes(notes.raw_text)


def _html_block(token: HtmlBlock, context: ExtractionContext) -> None:
    _apply_notes(token.content, context)


def _horizontal_rule(_token, context: ExtractionContext) -> None:
    context.close_slide()
    context.open_slide()


def _table_open(_token, context: ExtractionContext) -> None:
    context.open_table()


def _table_close(_token, context: ExtractionContext) -> None:
    context.close_table()


def _row_open(_token, context: ExtractionContext) -> None:
    context.open_row()


def _row_close(_token, context: ExtractionContext) -> None:
    context.close_row()


def _cell_open(token: CellOpen, context: ExtractionContext) -> None:
    # Tables are not placeholders, so they don't inherit the theme text color.
    style = TextStyle(foreground_color=OptionalColor.theme(config.TABLE_TEXT_THEME_COLOR))
    if token.header:
        style = TextStyle(bold=True).merged(style)
    context.open_cell(style)


def _cell_close(_token, context: ExtractionContext) -> None:
    context.close_cell()


DOCUMENT_RULES: dict[type, Rule] = {
    **INLINE_RULES,
    HeadingOpen: _heading_open,
    HeadingClose: _heading_close,
    HtmlBlock: _html_block,
    HorizontalRule: _horizontal_rule,
    TableOpen: _table_open,
    TableClose: _table_close,
    RowOpen: _row_open,
    RowClose: _row_close,
    CellOpen: _cell_open,
    CellClose: _cell_close,
}

RULES = {
    ParserMode.INLINE: INLINE_RULES,
    ParserMode.DOCUMENT: DOCUMENT_RULES,
}
