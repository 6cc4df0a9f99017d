"""Token kinds produced by the tokenizer.

One frozen dataclass per kind; ``Token`` is their union. Block tokens that
can carry a trailing ``{...}`` attribute suffix expose it as ``attrs``.
"""

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class HeadingOpen:
    level: int
    attrs: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class HeadingClose:
    level: int


@dataclass(frozen=True)
class ParagraphOpen:
    attrs: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ParagraphClose:
    pass


@dataclass(frozen=True)
class Text:
    content: str


@dataclass(frozen=True)
class Emoji:
    content: str
    name: str = ""


@dataclass(frozen=True)
class SoftBreak:
    pass


@dataclass(frozen=True)
class HardBreak:
    pass


@dataclass(frozen=True)
class EmphasisOpen:
    pass


@dataclass(frozen=True)
class EmphasisClose:
    pass


@dataclass(frozen=True)
class StrongOpen:
    pass


@dataclass(frozen=True)
class StrongClose:
    pass


@dataclass(frozen=True)
class StrikethroughOpen:
    pass


@dataclass(frozen=True)
class StrikethroughClose:
    pass


@dataclass(frozen=True)
class LinkOpen:
    href: str = ""


@dataclass(frozen=True)
class LinkClose:
    pass


@dataclass(frozen=True)
class CodeInline:
    content: str


@dataclass(frozen=True)
class Fence:
    content: str
    info: str = ""


@dataclass(frozen=True)
class ListOpen:
    ordered: bool


@dataclass(frozen=True)
class ListClose:
    ordered: bool


@dataclass(frozen=True)
class ListItemOpen:
    pass


@dataclass(frozen=True)
class ListItemClose:
    pass


@dataclass(frozen=True)
class BlockquoteOpen:
    pass


@dataclass(frozen=True)
class BlockquoteClose:
    pass


@dataclass(frozen=True)
class TableOpen:
    pass


@dataclass(frozen=True)
class TableClose:
    pass


@dataclass(frozen=True)
class RowOpen:
    pass


@dataclass(frozen=True)
class RowClose:
    pass


@dataclass(frozen=True)
class CellOpen:
    header: bool = False


@dataclass(frozen=True)
class CellClose:
    header: bool = False


@dataclass(frozen=True)
class HtmlBlock:
    content: str


@dataclass(frozen=True)
class HtmlInline:
    content: str


@dataclass(frozen=True)
class HorizontalRule:
    pass


Token = Union[
    HeadingOpen, HeadingClose,
    ParagraphOpen, ParagraphClose,
    Text, Emoji, SoftBreak, HardBreak,
    EmphasisOpen, EmphasisClose,
    StrongOpen, StrongClose,
    StrikethroughOpen, StrikethroughClose,
    LinkOpen, LinkClose,
    CodeInline, Fence,
    ListOpen, ListClose, ListItemOpen, ListItemClose,
    BlockquoteOpen, BlockquoteClose,
    TableOpen, TableClose, RowOpen, RowClose, CellOpen, CellClose,
    HtmlBlock, HtmlInline,
    HorizontalRule,
]


def has_class(attrs: dict[str, str], cls: str) -> bool:
    return cls in attrs.get("class", "").split()
