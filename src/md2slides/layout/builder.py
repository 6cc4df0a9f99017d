"""Turn a matched (layout, slide) pair into Slides API batch operations.

Generation runs in two passes. The first creates every slide from its
layout; the second, run against the reloaded deck once placeholder ids
exist, fills placeholders, tables and speaker notes.
"""

import logging
import warnings
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel

from .. import config
from ..core.presentation import (
    Presentation, find_layout_id_by_name, find_placeholder,
    find_speaker_notes_object_id, layout_names,
)
from ..core.requests import (
    CellLocation, CreateParagraphBulletsRequest, CreateSlideRequest,
    CreateTableRequest, InsertTextRequest, Request, UpdateTextStyleRequest,
)
from ..core.slides import SlideDefinition, TableModel, TextBlock, new_object_id
from ..errors import (
    LayoutResolutionError, MissingElementWarning, PreconditionError, StructuralError,
)
from .matcher import match_layout_for_presentation

logger = logging.getLogger("Md2Slides.layout.builder")

BULLET_PRESETS = {
    "ordered": config.ORDERED_BULLET_PRESET,
    "unordered": config.UNORDERED_BULLET_PRESET,
}


def compute_shallow_field_mask(obj: Any) -> list[str]:
    """Top-level keys of ``obj`` that hold a value.

    For a model, that is the explicitly assigned fields (by API alias) in
    declaration order. For a mapping every key counts, since a present
    ``None`` serializes to JSON null.
    """
    if isinstance(obj, BaseModel):
        fields = type(obj).model_fields
        return [fields[name].alias or name for name in fields if name in obj.model_fields_set]
    if isinstance(obj, Mapping):
        return list(obj.keys())
    raise TypeError(f"Cannot compute a field mask for {type(obj).__name__}")


class SlideRequestBuilder:
    """Emits the operations for one slide on a given layout."""

    def __init__(self, layout_name: str, presentation: Presentation, slide: SlideDefinition):
        self.layout_name = layout_name
        self.presentation = presentation
        self.slide = slide

    def append_create_slide_request(self, requests: list[Request]) -> list[Request]:
        layout_id = find_layout_id_by_name(self.presentation, self.layout_name)
        if not layout_id:
            raise LayoutResolutionError(self.layout_name, layout_names(self.presentation))

        self.slide.object_id = new_object_id()
        logger.debug("Creating slide %s with layout %s", self.slide.object_id, self.layout_name)
        requests.append(CreateSlideRequest(object_id=self.slide.object_id, layout_id=layout_id))
        return requests

    def append_content_requests(self, requests: list[Request]) -> list[Request]:
        if not self.slide.object_id:
            raise PreconditionError("Slide must be created before it is populated")

        if self.slide.title is not None:
            self._fill_placeholder(self.slide.title, ("TITLE", "CENTERED_TITLE"), requests)
        if self.slide.subtitle is not None:
            self._fill_placeholder(self.slide.subtitle, ("SUBTITLE",), requests)
        self._append_body_requests(requests)
        if self.slide.tables:
            self._append_table_requests(self.slide.tables, requests)
        if self.slide.notes:
            self._append_notes_requests(self.slide.notes, requests)
        return requests

    def _placeholders(self, role: str) -> list[dict]:
        return find_placeholder(self.presentation, self.slide.object_id, role) or []

    def _fill_placeholder(self, text: TextBlock, roles: tuple[str, ...],
                          requests: list[Request]) -> None:
        for role in roles:
            elements = self._placeholders(role)
            if elements:
                self._append_text_requests(text, elements[0]["objectId"], requests)
                return
        warnings.warn(
            f"Layout {self.layout_name} has no {' or '.join(roles)} placeholder; "
            f"dropping {text.raw_text!r}",
            MissingElementWarning,
            stacklevel=3,
        )

    def _append_body_requests(self, requests: list[Request]) -> None:
        if not self.slide.bodies:
            return
        elements = self._placeholders("BODY")
        for index, body in enumerate(self.slide.bodies):
            if index >= len(elements):
                warnings.warn(
                    f"Layout {self.layout_name} has {len(elements)} body placeholders; "
                    f"dropping body {index + 1} of {len(self.slide.bodies)}",
                    MissingElementWarning,
                    stacklevel=3,
                )
                continue
            self._append_text_requests(body.text, elements[index]["objectId"], requests)

    def _append_table_requests(self, tables: list[TableModel], requests: list[Request]) -> None:
        if len(tables) > 1:
            raise StructuralError("Multiple tables per slide are not supported.")
        table = tables[0]
        table_id = new_object_id()
        requests.append(CreateTableRequest(
            object_id=table_id,
            page_object_id=self.slide.object_id,
            rows=table.rows,
            columns=table.columns,
        ))
        for row_index, row in enumerate(table.cells):
            for column_index, cell in enumerate(row):
                location = CellLocation(row_index=row_index, column_index=column_index)
                self._append_text_requests(cell, table_id, requests, location)

    def _append_notes_requests(self, notes: str, requests: list[Request]) -> None:
        notes_id = find_speaker_notes_object_id(self.presentation, self.slide.object_id)
        if not notes_id:
            warnings.warn(
                f"Slide {self.slide.object_id} has no speaker notes shape; dropping notes",
                MissingElementWarning,
                stacklevel=3,
            )
            return
        self._append_text_requests(TextBlock(raw_text=notes), notes_id, requests)

    def _append_text_requests(self, text: TextBlock, object_id: str,
                              requests: list[Request],
                              cell_location: Optional[CellLocation] = None) -> None:
        """Insert the text, then style its runs, then bullet its lists."""
        if not text.raw_text:
            return
        requests.append(InsertTextRequest(
            object_id=object_id, text=text.raw_text, cell_location=cell_location,
        ))

        for run in text.runs:
            fields = compute_shallow_field_mask(run.style)
            if not fields:
                continue
            requests.append(UpdateTextStyleRequest(
                object_id=object_id,
                start_index=run.start,
                end_index=run.end,
                style=run.style,
                fields=fields,
                cell_location=cell_location,
            ))

        # Bulleting strips the leading tabs of nested items, shifting every
        # later offset, so the last list goes first.
        for marker in text.markers_in_application_order():
            requests.append(CreateParagraphBulletsRequest(
                object_id=object_id,
                start_index=marker.start,
                end_index=marker.end,
                bullet_preset=BULLET_PRESETS[marker.type],
                cell_location=cell_location,
            ))


def build_create_requests(presentation: Presentation,
                          slides: list[SlideDefinition]) -> list[Request]:
    """First pass: one createSlide per slide, in document order."""
    requests: list[Request] = []
    for slide in slides:
        layout = match_layout_for_presentation(presentation, slide)
        SlideRequestBuilder(layout, presentation, slide).append_create_slide_request(requests)
    return requests


def build_populate_requests(presentation: Presentation,
                            slides: list[SlideDefinition]) -> list[Request]:
    """Second pass, against the deck reloaded after the first."""
    requests: list[Request] = []
    for slide in slides:
        layout = match_layout_for_presentation(presentation, slide)
        SlideRequestBuilder(layout, presentation, slide).append_content_requests(requests)
    return requests
