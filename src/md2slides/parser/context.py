"""Mutable builder state for slide extraction.

The extractor's rules never touch slide models directly; they call the
named transitions below, which keep the current slide, text block, style
stack, list and table consistent with each other.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.slides import (
    BodyBlock, ListMarker, SlideDefinition, StyleRun, TableModel, TextBlock,
    TextStyle, new_object_id,
)
from ..errors import PreconditionError, StructuralError

logger = logging.getLogger("Md2Slides.parser.context")


@dataclass
class StyleFrame:
    """An open style: the merged style and the offset it started at."""
    style: TextStyle
    start: int


@dataclass
class ListState:
    ordered: bool
    start: int
    depth: int = 0


class ExtractionContext:
    """Builder for a sequence of SlideDefinitions.

    A fresh context already has an open slide with an empty text block.
    """

    def __init__(self):
        self.slides: list[SlideDefinition] = []
        self.current_slide: Optional[SlideDefinition] = None
        self.text: Optional[TextBlock] = None
        self.styles: list[StyleFrame] = [StyleFrame(style=TextStyle(), start=0)]
        self.list: Optional[ListState] = None
        self.table: Optional[TableModel] = None
        self.row: list[TextBlock] = []
        self.marker_paragraph = False
        self._paragraph_start = 0
        self._body_text: Optional[TextBlock] = None
        self.open_slide()

    # ── Slides ──────────────────────────────────────────────────────────

    def open_slide(self) -> SlideDefinition:
        self.current_slide = SlideDefinition(object_id=new_object_id())
        self.open_text_block()
        return self.current_slide

    def close_slide(self) -> None:
        """Finalize the open slide. Its pending body text becomes the last body."""
        slide = self.require_slide()
        if self.text is not None and not self.text.is_blank():
            slide.bodies.append(BodyBlock(text=self.text))
        self.slides.append(slide)
        logger.debug("Closed slide %s with %d bodies", slide.object_id, len(slide.bodies))
        self.current_slide = None
        self.text = None

    def done(self) -> list[SlideDefinition]:
        if self.current_slide is not None:
            self.close_slide()
        return self.slides

    def set_custom_layout(self, name: str) -> None:
        self.require_slide().custom_layout = name

    def assign_heading(self, level: int) -> None:
        """Attach the current text block as title (H1) or subtitle (H2)."""
        slide = self.require_slide()
        text = self.require_text()
        if level == 1:
            slide.title = text
        elif level == 2:
            slide.subtitle = text
        else:
            raise PreconditionError(f"Level {level} headings are not slide headings")

    def set_notes(self, notes: str) -> None:
        self.require_slide().notes = notes

    # ── Text ────────────────────────────────────────────────────────────

    def open_text_block(self) -> TextBlock:
        self.text = TextBlock()
        return self.text

    def append_text(self, value: str) -> None:
        self.require_text().raw_text += value

    def open_paragraph(self, marker: bool = False) -> None:
        """Start a paragraph. Marker paragraphs end without a line break
        unless text was written into them."""
        if self.text is None:
            self.open_text_block()
        self.marker_paragraph = marker
        self._paragraph_start = self._offset()

    def close_paragraph(self) -> None:
        wrote_text = self._offset() > self._paragraph_start
        if not self.marker_paragraph or wrote_text:
            self.append_text("\n")
        self.marker_paragraph = False

    def split_column(self) -> None:
        """Close the current text block into a body and start the next column."""
        slide = self.require_slide()
        slide.bodies.append(BodyBlock(text=self.text or TextBlock()))
        self.open_text_block()

    def _offset(self) -> int:
        return len(self.text.raw_text) if self.text is not None else 0

    # ── Styles ──────────────────────────────────────────────────────────

    def current_style(self) -> TextStyle:
        return self.styles[-1].style

    def push_style(self, style: TextStyle) -> StyleFrame:
        """Open a style nested in the current one, starting at the current offset."""
        frame = StyleFrame(style=self.current_style().merged(style), start=self._offset())
        self.styles.append(frame)
        return frame

    def pop_style(self) -> Optional[StyleRun]:
        """Close the innermost style, recording a run if it covers any text."""
        if len(self.styles) == 1:
            raise PreconditionError("Style stack underflow")
        frame = self.styles.pop()
        end = self._offset()
        if self.text is None or end <= frame.start or frame.style.is_empty():
            return None
        run = StyleRun(start=frame.start, end=end, style=frame.style)
        self.text.runs.append(run)
        return run

    # ── Lists ───────────────────────────────────────────────────────────

    def open_list(self, ordered: bool) -> None:
        self.require_text()
        if self.list is None:
            self.list = ListState(ordered=ordered, start=self._offset())
            return
        if self.list.ordered != ordered:
            raise StructuralError("Nested lists must match parent style")
        self.list.depth += 1

    def close_list(self) -> Optional[ListMarker]:
        if self.list is None:
            raise PreconditionError("No list is open")
        text = self.require_text()
        if self.list.depth > 0:
            self.list.depth -= 1
            return None
        marker = ListMarker(
            start=self.list.start,
            end=len(text.raw_text),
            type="ordered" if self.list.ordered else "unordered",
        )
        text.list_markers.append(marker)
        self.list = None
        return marker

    def open_list_item(self) -> None:
        if self.list is None:
            raise PreconditionError("List item outside of a list")
        self.append_text("\t" * self.list.depth)

    # ── Tables ──────────────────────────────────────────────────────────

    def open_table(self) -> None:
        slide = self.require_slide()
        if slide.tables or self.table is not None:
            raise StructuralError("Multiple tables per slide are not supported.")
        self.table = TableModel()
        self._body_text = self.text

    def open_row(self) -> None:
        self.row = []

    def open_cell(self, style: TextStyle) -> None:
        self.open_text_block()
        self.push_style(style)

    def close_cell(self) -> None:
        text = self.require_text()
        self.pop_style()
        self.row.append(text)
        self.open_text_block()

    def close_row(self) -> None:
        if self.table is None:
            raise PreconditionError("Table row outside of a table")
        self.table.add_row(self.row)
        self.row = []

    def close_table(self) -> TableModel:
        slide = self.require_slide()
        if self.table is None:
            raise PreconditionError("No table is open")
        table = self.table
        slide.tables.append(table)
        self.table = None
        self.text = self._body_text
        self._body_text = None
        return table

    # ── Guards ──────────────────────────────────────────────────────────

    def require_slide(self) -> SlideDefinition:
        if self.current_slide is None:
            raise PreconditionError("No slide is open")
        return self.current_slide

    def require_text(self) -> TextBlock:
        if self.text is None:
            raise PreconditionError("No text block is open")
        return self.text
