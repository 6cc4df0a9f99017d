"""Choose a deck layout for a slide from the shape of its content."""

import logging
from typing import Callable, Optional, Sequence

from ..core.presentation import Presentation, layout_names
from ..core.slides import SlideDefinition

logger = logging.getLogger("Md2Slides.layout.matcher")


def _is_big(slide: SlideDefinition) -> bool:
    return slide.title is not None and slide.title.big


# First match wins.
LAYOUT_MATCHERS: list[tuple[str, Callable[[SlideDefinition], bool]]] = [
    ("SECTION_TITLE_AND_DESCRIPTION",
     lambda s: s.title is not None and s.subtitle is not None and bool(s.bodies)),
    ("TITLE",
     lambda s: s.title is not None and s.subtitle is not None
     and not s.bodies and not s.tables),
    ("BIG_NUMBER", lambda s: _is_big(s) and len(s.bodies) == 1),
    ("MAIN_POINT", lambda s: _is_big(s) and not s.bodies),
    ("TITLE_AND_TWO_COLUMNS", lambda s: s.title is not None and len(s.bodies) == 2),
    ("TITLE_AND_BODY", lambda s: bool(s.bodies) or bool(s.tables)),
    ("SECTION_HEADER", lambda s: s.title is not None),
]

FALLBACK_LAYOUT = "BLANK"


def classify_slide(slide: SlideDefinition) -> str:
    """Name of the predefined layout that best fits the slide's shape."""
    for name, matches in LAYOUT_MATCHERS:
        if matches(slide):
            return name
    return FALLBACK_LAYOUT


def match_layout(available_layouts: Sequence[str], slide: SlideDefinition) -> str:
    """Pick a layout name for ``slide`` among ``available_layouts`` (deck order).

    A custom layout named in the Markdown wins when the deck has it. If the
    classified layout is missing, the deck's first layout is used; with no
    layouts at all the classified name is returned and creation will fail
    later with the list of what the deck offers.
    """
    if slide.custom_layout and slide.custom_layout in available_layouts:
        return slide.custom_layout
    if slide.custom_layout:
        logger.info("Custom layout %r not in deck, matching by content", slide.custom_layout)

    name = classify_slide(slide)
    if available_layouts and name not in available_layouts:
        logger.info("Layout %s not in deck, falling back to %s", name, available_layouts[0])
        return available_layouts[0]
    return name


def _layout_name_for_display_name(presentation: Presentation,
                                  display_name: str) -> Optional[str]:
    for layout in presentation.get("layouts") or []:
        props = layout.get("layoutProperties") or {}
        if props.get("displayName") == display_name:
            return props.get("name")
    return None


def match_layout_for_presentation(presentation: Presentation,
                                  slide: SlideDefinition) -> str:
    """Like match_layout, reading layouts from a deck.

    Custom layouts may be given by display name ("Title and Body") as well as
    by name.
    """
    names = layout_names(presentation)
    if slide.custom_layout and slide.custom_layout not in names:
        resolved = _layout_name_for_display_name(presentation, slide.custom_layout)
        if resolved:
            slide = slide.model_copy(update={"custom_layout": resolved})
    return match_layout(names, slide)
