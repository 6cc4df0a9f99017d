"""Table model."""

from pydantic import BaseModel, Field, model_validator

from .text import TextBlock


class TableModel(BaseModel):
    """Row-major grid of cell text blocks."""
    rows: int = 0
    columns: int = 0
    cells: list[list[TextBlock]] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_shape(self) -> "TableModel":
        if self.rows != len(self.cells):
            raise ValueError(f"Table declares {self.rows} rows but has {len(self.cells)}")
        widest = max((len(row) for row in self.cells), default=0)
        if self.columns != widest:
            raise ValueError(f"Table declares {self.columns} columns but widest row has {widest}")
        return self

    def add_row(self, row: list[TextBlock]) -> None:
        self.cells.append(row)
        self.rows = len(self.cells)
        self.columns = max(self.columns, len(row))
