"""Error kinds raised by the rendering core."""


class DocumentLoadError(Exception):
    """Raised when source bytes cannot be opened as a PDF document."""

    pass


class InvalidAssetError(Exception):
    """Raised when image bytes are undecodable or have a degenerate size."""

    pass
