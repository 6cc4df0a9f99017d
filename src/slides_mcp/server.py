"""Markdown Slides MCP Server - compile Markdown into Google Slides through MCP tools."""

from mcp.server.fastmcp import FastMCP, Context
import copy
import json
import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Any, Optional

from md2slides import config
from md2slides.core.presentation import layout_names
from md2slides.core.requests import CreateSlideRequest, to_batch
from md2slides.errors import Md2SlidesError
from md2slides.layout.builder import build_create_requests, build_populate_requests
from md2slides.layout.matcher import match_layout, match_layout_for_presentation
from md2slides.parser.extractor import extract_slides
from md2slides.remote.client import SlidesClient
from md2slides.remote.generator import generate_slides

# Configure logging
logging.basicConfig(level=logging.INFO,
                    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger("Md2Slides")


def _access_token() -> Optional[str]:
    return os.getenv(config.ACCESS_TOKEN_ENV)


def _missing_token_error() -> str:
    return f"Error: Set {config.ACCESS_TOKEN_ENV} to a Google OAuth access token with the presentations scope."


def _load_deck(presentation_json: str) -> Dict[str, Any]:
    deck = json.loads(presentation_json)
    if not isinstance(deck, dict):
        raise ValueError("Presentation JSON must be an object")
    return deck


def simulate_created_slides(presentation: Dict[str, Any], requests: list) -> Dict[str, Any]:
    """Deck as it would look after the create batch, for offline previews.

    Each created slide gets copies of its layout's placeholders and a speaker
    notes shape, with ids derived from the slide id.
    """
    deck = copy.deepcopy(presentation)
    layouts = {layout.get("objectId"): layout for layout in deck.get("layouts") or []}
    slides = deck.setdefault("slides", [])
    for request in requests:
        if not isinstance(request, CreateSlideRequest):
            continue
        layout = layouts.get(request.layout_id) or {}
        elements = []
        for index, element in enumerate(layout.get("pageElements") or []):
            if not (element.get("shape") or {}).get("placeholder"):
                continue
            placed = copy.deepcopy(element)
            placed["objectId"] = f"{request.object_id}_{index}"
            elements.append(placed)
        slides.append({
            "objectId": request.object_id,
            "pageElements": elements,
            "slideProperties": {
                "layoutObjectId": request.layout_id,
                "notesPage": {"notesProperties": {
                    "speakerNotesObjectId": f"{request.object_id}_notes",
                }},
            },
        })
    return deck


# ── Server Setup ────────────────────────────────────────────────────────

@asynccontextmanager
async def server_lifespan(server: FastMCP) -> AsyncIterator[Dict[str, Any]]:
    try:
        logger.info("Md2Slides server starting up")
        if not _access_token():
            logger.warning(f"{config.ACCESS_TOKEN_ENV} is not set - remote tools will be unavailable")
        yield {}
    finally:
        logger.info("Md2Slides server shut down")


mcp = FastMCP("Md2Slides", lifespan=server_lifespan)


# ═══════════════════════════════════════════════════════════════════════
# COMPILER TOOLS
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def compile_markdown(ctx: Context, markdown: str) -> str:
    """Parse Markdown into slide definitions and summarize each slide.

    Parameters:
    - markdown: Slide source. Separate slides with a line containing only ---
    """
    try:
        slides = extract_slides(markdown)
        return json.dumps({
            "slide_count": len(slides),
            "slides": [slide.to_summary() for slide in slides],
        }, indent=2)
    except Md2SlidesError as e:
        return f"Error compiling markdown: {str(e)}"


@mcp.tool()
def match_layouts(ctx: Context, markdown: str, available_layouts: list[str]) -> str:
    """Show which layout each slide would use.

    Parameters:
    - markdown: Slide source
    - available_layouts: Layout names of the target deck, in deck order
    """
    try:
        slides = extract_slides(markdown)
        return json.dumps([
            {
                "index": index,
                "title": slide.title.raw_text if slide.title else None,
                "layout": match_layout(available_layouts, slide),
            }
            for index, slide in enumerate(slides)
        ], indent=2)
    except Md2SlidesError as e:
        return f"Error matching layouts: {str(e)}"


@mcp.tool()
def preview_requests(ctx: Context, markdown: str, presentation_json: str) -> str:
    """Build both request batches offline against a deck's JSON.

    The populate batch is computed against a simulated copy of the deck in
    which every created slide carries its layout's placeholders.

    Parameters:
    - markdown: Slide source
    - presentation_json: The deck as returned by presentations.get
    """
    try:
        deck = _load_deck(presentation_json)
        slides = extract_slides(markdown)
        create = build_create_requests(deck, slides)
        populate = build_populate_requests(simulate_created_slides(deck, create), slides)
        return json.dumps({
            "layouts": [match_layout_for_presentation(deck, slide) for slide in slides],
            "create": to_batch(create),
            "populate": to_batch(populate),
        }, indent=2)
    except (Md2SlidesError, ValueError) as e:
        return f"Error building requests: {str(e)}"


# ═══════════════════════════════════════════════════════════════════════
# GOOGLE SLIDES TOOLS
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def list_layouts(ctx: Context, presentation_id: str) -> str:
    """List the layouts of an existing presentation.

    Parameters:
    - presentation_id: Google Slides presentation id
    """
    token = _access_token()
    if not token:
        return _missing_token_error()
    try:
        deck = SlidesClient(token).get_presentation(presentation_id)
        display_names = {
            (layout.get("layoutProperties") or {}).get("name"):
                (layout.get("layoutProperties") or {}).get("displayName")
            for layout in deck.get("layouts") or []
        }
        return json.dumps([
            {"name": name, "display_name": display_names.get(name)}
            for name in layout_names(deck)
        ], indent=2)
    except Md2SlidesError as e:
        return f"Error listing layouts: {str(e)}"


@mcp.tool()
def generate_presentation(ctx: Context, markdown: str, title: str = "",
                          template_id: str = "") -> str:
    """Create a Google Slides presentation from Markdown.

    Parameters:
    - markdown: Slide source
    - title: Title of the new presentation
    - template_id: Optional presentation to copy for its theme and layouts
    """
    token = _access_token()
    if not token:
        return _missing_token_error()
    try:
        presentation_id = generate_slides(
            token, markdown,
            template_id=template_id or None,
            title=title or None,
        )
        return json.dumps({
            "status": "generated",
            "presentation_id": presentation_id,
            "url": f"https://docs.google.com/presentation/d/{presentation_id}/edit",
        }, indent=2)
    except Md2SlidesError as e:
        return f"Error generating presentation: {str(e)}"


# ═══════════════════════════════════════════════════════════════════════
# PROMPTS
# ═══════════════════════════════════════════════════════════════════════

@mcp.prompt()
def slide_authoring_workflow() -> str:
    """Recommended workflow for writing slides in Markdown"""
    return """You are helping the user turn notes into a Google Slides deck. Follow this workflow:

1. **Draft**: Write one section per slide, separated by a line containing only ---.
   - # Heading becomes the title, ## Heading the subtitle
   - Paragraphs, lists and ### headings go in the body
   - Add {.big} to a title for a big number or main point slide
   - Put {.column} on its own line to start a second column
   - Put {layout="Title Only"} on its own line to force a layout
   - <!-- comments --> become speaker notes

2. **Check**: Use compile_markdown() to confirm the slide count and shapes.

3. **Layouts**: Use list_layouts() on the template deck, then match_layouts()
   to see which layout each slide will use.

4. **Preview**: Use preview_requests() with the deck JSON to inspect the
   batch requests before sending anything.

5. **Generate**: Use generate_presentation() with an optional template_id.

Tips:
- Only one table per slide is supported
- Nested lists must use the same list type as their parent
- Inline HTML is limited to strong, b, em, i, code, sub, sup and span
"""


# ── Main ────────────────────────────────────────────────────────────────

def main():
    """Run the MCP server"""
    mcp.run()


if __name__ == "__main__":
    main()
