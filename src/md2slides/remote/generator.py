"""End-to-end generation: Markdown in, populated presentation out."""

import logging
from typing import Any, Optional

from .. import config
from ..core.requests import DeleteObjectRequest, Request
from ..core.slides import SlideDefinition
from ..errors import SlidesApiError
from ..layout.builder import build_create_requests, build_populate_requests
from ..parser.extractor import extract_slides
from .client import SlidesClient

logger = logging.getLogger("Md2Slides.remote.generator")


class SlideGenerator:
    """Writes slides generated from Markdown into one presentation."""

    def __init__(self, client: SlidesClient, presentation: dict[str, Any]):
        self.client = client
        self.presentation = presentation
        self.slides: list[SlideDefinition] = []

    @property
    def presentation_id(self) -> str:
        return self.presentation["presentationId"]

    @classmethod
    def new_presentation(cls, client: SlidesClient, title: str) -> "SlideGenerator":
        """Generator for a new deck, with its default slides removed."""
        generator = cls(client, client.create_presentation(title))
        if generator.presentation.get("slides"):
            generator.erase()
        return generator

    @classmethod
    def copy_presentation(cls, client: SlidesClient, title: str,
                          presentation_id: str) -> "SlideGenerator":
        """Generator for a copy of an existing deck, e.g. a themed template."""
        return cls.for_presentation(client, client.copy_presentation(presentation_id, title))

    @classmethod
    def for_presentation(cls, client: SlidesClient, presentation_id: str) -> "SlideGenerator":
        return cls(client, client.get_presentation(presentation_id))

    def erase(self) -> None:
        """Delete every slide currently in the deck."""
        requests_: list[Request] = [
            DeleteObjectRequest(object_id=slide["objectId"])
            for slide in self.presentation.get("slides") or []
        ]
        logger.info(f"Erasing {len(requests_)} existing slides")
        self.client.batch_update(self.presentation_id, requests_)
        self.presentation["slides"] = []

    def create_slides(self) -> list[Request]:
        return build_create_requests(self.presentation, self.slides)

    def populate_slides(self) -> list[Request]:
        return build_populate_requests(self.presentation, self.slides)

    def reload(self) -> None:
        self.presentation = self.client.get_presentation(self.presentation_id)

    def generate_from_markdown(self, markdown: str) -> str:
        """Compile and send ``markdown``. Returns the presentation id."""
        self.slides = extract_slides(markdown)

        # Placeholder ids only exist once the slides are created.
        self.client.batch_update(self.presentation_id, self.create_slides())
        self.reload()
        if not self.presentation.get("slides"):
            raise SlidesApiError("Failed to create slides - no slides found after creation")

        self.client.batch_update(self.presentation_id, self.populate_slides())
        logger.info(f"Generated {len(self.slides)} slides in {self.presentation_id}")
        return self.presentation_id


def generate_slides(access_token: str, markdown: str,
                    template_id: Optional[str] = None,
                    title: Optional[str] = None) -> str:
    """Generate a presentation from Markdown and return its id.

    With ``template_id`` the template is copied first; if the copy fails a new
    blank deck is used instead.
    """
    client = SlidesClient(access_token)
    title = title or config.DEFAULT_PRESENTATION_TITLE

    if template_id:
        try:
            generator = SlideGenerator.copy_presentation(client, title, template_id)
        except SlidesApiError as e:
            logger.warning(f"Template copy failed, using a new presentation: {str(e)}")
            generator = SlideGenerator.new_presentation(client, title)
    else:
        generator = SlideGenerator.new_presentation(client, title)

    return generator.generate_from_markdown(markdown)
