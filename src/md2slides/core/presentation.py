"""Read-only queries over a presentation resource (``presentations.get`` JSON)."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from ..errors import PreconditionError

logger = logging.getLogger("Md2Slides.core.presentation")

Presentation = dict[str, Any]
PageElement = dict[str, Any]


@dataclass
class Dimensions:
    width: float
    height: float


@dataclass
class BoundingBox:
    width: float
    height: float
    x: float = 0.0
    y: float = 0.0


def find_page(presentation: Presentation, page_id: str) -> Optional[dict]:
    for page in presentation.get("slides") or []:
        if page.get("objectId") == page_id:
            return page
    return None


def page_size(presentation: Presentation) -> Dimensions:
    size = presentation.get("pageSize") or {}
    width = (size.get("width") or {}).get("magnitude")
    height = (size.get("height") or {}).get("magnitude")
    if not width:
        raise PreconditionError("Presentation width is required")
    if not height:
        raise PreconditionError("Presentation height is required")
    return Dimensions(width=width, height=height)


def layout_names(presentation: Presentation) -> list[str]:
    """Names of the deck's layouts, in deck order."""
    names = []
    for layout in presentation.get("layouts") or []:
        name = (layout.get("layoutProperties") or {}).get("name")
        if name:
            names.append(name)
    return names


def find_layout_id_by_name(presentation: Presentation, name: str) -> Optional[str]:
    for layout in presentation.get("layouts") or []:
        if (layout.get("layoutProperties") or {}).get("name") == name:
            return layout.get("objectId")
    return None


def calculate_bounding_box(element: PageElement) -> BoundingBox:
    """On-page box of an element from its size and affine transform.

    Sizing helper for layouts that fit content to a placeholder.
    """
    size = element.get("size") or {}
    height = (size.get("height") or {}).get("magnitude")
    width = (size.get("width") or {}).get("magnitude")
    if not height or not width:
        raise PreconditionError(f"Element {element.get('objectId')} has no size")
    transform = element.get("transform") or {}
    scale_x = transform.get("scaleX", 1)
    scale_y = transform.get("scaleY", 1)
    shear_x = transform.get("shearX", 0)
    shear_y = transform.get("shearY", 0)
    return BoundingBox(
        width=scale_x * width + shear_x * height,
        height=scale_y * height + shear_y * width,
        x=transform.get("translateX", 0),
        y=transform.get("translateY", 0),
    )


def body_bounding_box(presentation: Presentation,
                      placeholder: Optional[PageElement]) -> BoundingBox:
    """Box of a body placeholder, or the whole page when there is none."""
    if placeholder:
        return calculate_bounding_box(placeholder)
    dims = page_size(presentation)
    return BoundingBox(width=dims.width, height=dims.height)


def _reading_position(element: PageElement) -> tuple[float, float]:
    transform = element.get("transform") or {}
    return (transform.get("translateX", 0), transform.get("translateY", 0))


def find_placeholder(presentation: Presentation, page_id: str,
                     role: str) -> Optional[list[PageElement]]:
    """Placeholders of ``role`` on a page, left-to-right then top-to-bottom.

    Returns None when the page has no such placeholder.
    """
    page = find_page(presentation, page_id)
    if page is None:
        raise PreconditionError(f"Can't find page {page_id}")

    matches = [
        element for element in page.get("pageElements") or []
        if ((element.get("shape") or {}).get("placeholder") or {}).get("type") == role
    ]
    if not matches:
        return None
    # Stable: elements without a transform keep document order.
    return sorted(matches, key=_reading_position)


def find_speaker_notes_object_id(presentation: Presentation,
                                 slide_id: str) -> Optional[str]:
    page = find_page(presentation, slide_id)
    if page is None:
        return None
    notes_page = (page.get("slideProperties") or {}).get("notesPage") or {}
    return (notes_page.get("notesProperties") or {}).get("speakerNotesObjectId")
