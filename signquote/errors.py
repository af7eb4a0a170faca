"""
Quote and catalog error types.

Every request-validation failure is a QuoteValidationError and aborts the
computation; there is no partial breakdown. Routers map these to HTTP 422.
"""


class QuoteValidationError(ValueError):
    """Base class for requests the engine refuses to price."""


class SelectionError(QuoteValidationError):
    """A material the product mode requires was not chosen, or is unknown."""


class GeometryError(QuoteValidationError):
    """The piece or panel cannot be produced from the selected stock at all."""


class CatalogImportError(ValueError):
    """An uploaded catalog or cost file could not be parsed."""
