"""Text style models — colors, dimensions, links and the sparse TextStyle.

Models serialize to the camelCase shape the Slides API expects. Only
attributes that were explicitly assigned count as "set"; everything else is
left out of both the serialized style and its field mask.
"""

from typing import Any, Literal, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for models that round-trip through the Slides API JSON."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_api(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


class RgbColor(ApiModel):
    """RGB components in the 0-1 range."""
    red: float = 0.0
    green: float = 0.0
    blue: float = 0.0


class OpaqueColor(ApiModel):
    """Either a theme color name (e.g. TEXT1) or an explicit RGB value."""
    theme_color: Optional[str] = None
    rgb_color: Optional[RgbColor] = None


class OptionalColor(ApiModel):
    opaque_color: Optional[OpaqueColor] = None

    @classmethod
    def theme(cls, name: str) -> "OptionalColor":
        return cls(opaque_color=OpaqueColor(theme_color=name))


class Dimension(ApiModel):
    """A magnitude with unit, e.g. 18 PT."""
    magnitude: float
    unit: str = "PT"


class Link(ApiModel):
    url: str


class TextStyle(ApiModel):
    """Sparse set of character attributes applied to a text run.

    Field order is the enumeration order used for field masks.
    """
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    foreground_color: Optional[OptionalColor] = None
    background_color: Optional[OptionalColor] = None
    strikethrough: Optional[bool] = None
    underline: Optional[bool] = None
    small_caps: Optional[bool] = None
    font_family: Optional[str] = None
    font_size: Optional[Dimension] = None
    link: Optional[Link] = None
    baseline_offset: Optional[Literal["NONE", "SUPERSCRIPT", "SUBSCRIPT"]] = None

    def set_fields(self) -> list[str]:
        """Python names of the explicitly assigned attributes, in field order."""
        return [name for name in type(self).model_fields if name in self.model_fields_set]

    def field_mask(self) -> list[str]:
        """API names of the explicitly assigned attributes, in field order."""
        fields = type(self).model_fields
        return [fields[name].alias or name for name in self.set_fields()]

    def is_empty(self) -> bool:
        return not self.model_fields_set

    def merged(self, other: "TextStyle") -> "TextStyle":
        """Return a copy where attributes set on ``other`` override ours."""
        values = {name: getattr(self, name) for name in self.set_fields()}
        values.update({name: getattr(other, name) for name in other.set_fields()})
        return TextStyle(**values)
