"""Batch operations sent to the Slides API ``presentations.batchUpdate``.

Each operation is a small model; ``to_api()`` renders the request object in
the shape the REST endpoint accepts.
"""

from typing import Any, Optional, Union
from pydantic import BaseModel, Field

from .slides.styles import TextStyle


class CellLocation(BaseModel):
    row_index: int
    column_index: int

    def to_api(self) -> dict[str, int]:
        return {"rowIndex": self.row_index, "columnIndex": self.column_index}


def _target(object_id: str, cell_location: Optional[CellLocation]) -> dict[str, Any]:
    target: dict[str, Any] = {"objectId": object_id}
    if cell_location is not None:
        target["cellLocation"] = cell_location.to_api()
    return target


def _fixed_range(start: int, end: int) -> dict[str, Any]:
    return {"type": "FIXED_RANGE", "startIndex": start, "endIndex": end}


class CreateSlideRequest(BaseModel):
    object_id: str
    layout_id: str

    def to_api(self) -> dict[str, Any]:
        return {
            "createSlide": {
                "objectId": self.object_id,
                "slideLayoutReference": {"layoutId": self.layout_id},
            }
        }


class InsertTextRequest(BaseModel):
    object_id: str
    text: str
    cell_location: Optional[CellLocation] = None

    def to_api(self) -> dict[str, Any]:
        body = _target(self.object_id, self.cell_location)
        body["text"] = self.text
        return {"insertText": body}


class UpdateTextStyleRequest(BaseModel):
    object_id: str
    start_index: int
    end_index: int
    style: TextStyle
    fields: list[str] = Field(default_factory=list)
    cell_location: Optional[CellLocation] = None

    def to_api(self) -> dict[str, Any]:
        body = _target(self.object_id, self.cell_location)
        body["textRange"] = _fixed_range(self.start_index, self.end_index)
        body["style"] = self.style.to_api()
        body["fields"] = ",".join(self.fields)
        return {"updateTextStyle": body}


class CreateParagraphBulletsRequest(BaseModel):
    object_id: str
    start_index: int
    end_index: int
    bullet_preset: str
    cell_location: Optional[CellLocation] = None

    def to_api(self) -> dict[str, Any]:
        body = _target(self.object_id, self.cell_location)
        body["textRange"] = _fixed_range(self.start_index, self.end_index)
        body["bulletPreset"] = self.bullet_preset
        return {"createParagraphBullets": body}


class CreateTableRequest(BaseModel):
    object_id: str
    page_object_id: str
    rows: int
    columns: int

    def to_api(self) -> dict[str, Any]:
        # Size and transform are left to the API defaults.
        return {
            "createTable": {
                "objectId": self.object_id,
                "elementProperties": {"pageObjectId": self.page_object_id},
                "rows": self.rows,
                "columns": self.columns,
            }
        }


class DeleteObjectRequest(BaseModel):
    object_id: str

    def to_api(self) -> dict[str, Any]:
        return {"deleteObject": {"objectId": self.object_id}}


Request = Union[
    CreateSlideRequest,
    InsertTextRequest,
    UpdateTextStyleRequest,
    CreateParagraphBulletsRequest,
    CreateTableRequest,
    DeleteObjectRequest,
]


def to_batch(requests: list[Request]) -> dict[str, list[dict[str, Any]]]:
    """Render operations as a ``batchUpdate`` request body."""
    return {"requests": [r.to_api() for r in requests]}
