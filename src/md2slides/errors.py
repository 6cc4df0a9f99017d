"""Error taxonomy for the Markdown to slides compiler."""


class Md2SlidesError(Exception):
    """Base class for every fatal compiler error."""


class ParseError(Md2SlidesError):
    """Markdown uses a construct the compiler can't represent."""


class StructuralError(Md2SlidesError):
    """Slide content has a shape the slide model doesn't support."""


class LayoutResolutionError(Md2SlidesError):
    """A layout name could not be resolved in the target deck."""

    def __init__(self, layout_name: str, available: list[str]):
        self.layout_name = layout_name
        self.available = available
        names = ", ".join(available) if available else "none"
        super().__init__(
            f'Unable to find layout "{layout_name}". '
            f"Available layouts in this presentation: {names}"
        )


class PreconditionError(Md2SlidesError):
    """Internal invariant violated. Always a programming error."""


class SlidesApiError(Md2SlidesError):
    """The remote Slides/Drive API rejected a request."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class MissingElementWarning(UserWarning):
    """Content was dropped because the layout has no matching placeholder."""
