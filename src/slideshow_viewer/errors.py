"""Failure kinds of the scrape-and-extract pipeline, each tied to an HTTP status."""


class SlideshowError(Exception):
    """Base class; status_code is what the web layer answers with."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingInputError(SlideshowError):
    """No usable URL (or share token) was supplied."""

    status_code = 400


class FetchError(SlideshowError):
    """A page could not be fetched: network error, timeout or non-2xx status."""

    status_code = 500


class NonceNotFoundError(SlideshowError):
    """The article page does not embed the picture nonce selector."""

    status_code = 404


class DataAttributeNotFoundError(SlideshowError):
    """The slideshow page has no data-images attribute line."""

    status_code = 404


class AttributeValueError(SlideshowError):
    """The data-images attribute is present but its quoted value can't be read."""

    status_code = 500


class MalformedPayloadError(SlideshowError):
    """The decoded data-images value is not a JSON array of objects."""

    status_code = 500
