"""Slide definition model."""

import uuid
from typing import Optional
from pydantic import BaseModel, Field

from .text import TextBlock
from .table import TableModel


def new_object_id() -> str:
    """Opaque id usable as a Slides API objectId."""
    return uuid.uuid4().hex


class BodyBlock(BaseModel):
    """Content for one body placeholder (one column)."""
    text: TextBlock = Field(default_factory=TextBlock)


class SlideDefinition(BaseModel):
    """Everything extracted for one slide, before a layout is chosen."""
    title: Optional[TextBlock] = None
    subtitle: Optional[TextBlock] = None
    bodies: list[BodyBlock] = Field(default_factory=list)
    tables: list[TableModel] = Field(default_factory=list)
    notes: Optional[str] = None
    custom_layout: Optional[str] = None
    object_id: Optional[str] = None

    def to_summary(self) -> dict:
        return {
            "object_id": self.object_id,
            "title": self.title.raw_text if self.title else None,
            "subtitle": self.subtitle.raw_text if self.subtitle else None,
            "body_count": len(self.bodies),
            "table_count": len(self.tables),
            "has_notes": self.notes is not None,
            "custom_layout": self.custom_layout,
        }
