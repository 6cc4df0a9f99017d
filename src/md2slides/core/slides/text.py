"""Text block models: style runs, list markers and the TextBlock itself."""

from typing import Literal
from pydantic import BaseModel, Field, model_validator

from .styles import TextStyle


class StyleRun(BaseModel):
    """A style applied to the half-open range [start, end) of a text block."""
    start: int = Field(ge=0)
    end: int = Field(ge=0)
    style: TextStyle = Field(default_factory=TextStyle)

    @model_validator(mode="after")
    def _check_range(self) -> "StyleRun":
        if self.start > self.end:
            raise ValueError(f"Run start {self.start} is past its end {self.end}")
        return self


class ListMarker(BaseModel):
    """Paragraphs in [start, end) form one (possibly nested) list."""
    start: int = Field(ge=0)
    end: int = Field(ge=0)
    type: Literal["ordered", "unordered"]

    @model_validator(mode="after")
    def _check_range(self) -> "ListMarker":
        if self.start > self.end:
            raise ValueError(f"List start {self.start} is past its end {self.end}")
        return self


class TextBlock(BaseModel):
    """Plain text plus the runs and list markers that index into it.

    Offsets count code points of ``raw_text``. Nested list items are encoded
    as leading tab characters rather than as a tree.
    """
    raw_text: str = ""
    runs: list[StyleRun] = Field(default_factory=list)
    list_markers: list[ListMarker] = Field(default_factory=list)
    big: bool = False

    def is_blank(self) -> bool:
        return not self.raw_text.strip()

    def markers_in_application_order(self) -> list[ListMarker]:
        """List markers sorted by descending start offset.

        Bullet creation strips the leading tabs of nested items, so later
        ranges have to be formatted first to keep earlier offsets valid.
        """
        return sorted(self.list_markers, key=lambda m: m.start, reverse=True)
