"""
Failure classification.

Every failure a caller can see is a KnownError subclass carrying a
FailureKind, a user-appropriate message and an HTTP status code.

Deliberate exclusions (a candidate that is too expensive, has no price,
or is the target itself) are never failures.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"

    # Resource failures
    NOT_FOUND = "not_found"

    # Service failures
    EXTERNAL_API_ERROR = "external_api_error"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        """Convert to a FailureDetail."""
        return FailureDetail(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class CardLookupError(KnownError):
    """Raised when the catalog cannot resolve a card name."""

    def __init__(self, name: str, detail: str | None = None):
        self.name = name
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f'Scryfall lookup failed for "{name}"',
            detail=detail,
            suggestion="Check the spelling or try a different name.",
            status_code=404,
        )


class CatalogSearchError(KnownError):
    """Raised when any page of a catalog search fails."""

    def __init__(self, query: str, status_code: int | None = None, detail: str | None = None):
        self.query = query
        self.http_status = status_code
        reason = f"HTTP {status_code}" if status_code is not None else "request failed"
        super().__init__(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message=f"Scryfall search failed ({reason}) for query: {query}",
            detail=detail,
            suggestion="Scryfall may be unavailable. Try again shortly.",
            status_code=502,
        )


class SubstituteSearchError(KnownError):
    """
    Raised when the candidate pool for a substitute search cannot be fetched.

    Distinct from "no substitutes found", which is an empty result.
    """

    def __init__(self, card_name: str, detail: str | None = None):
        self.card_name = card_name
        super().__init__(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message=f'Scryfall search error while finding substitutes for "{card_name}"',
            detail=detail,
            suggestion="Check your network connection and try again.",
            status_code=502,
        )


class UnrecognizedDeckUrlError(KnownError):
    """Raised when a deck URL or id matches no supported site."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message="Could not detect a valid Archidekt or Moxfield deck URL/ID.",
            detail=url,
            suggestion="Paste a full deck URL, or export your deck as text and paste it.",
            status_code=400,
        )


class DeckImportError(KnownError):
    """Raised when a recognized deck could not be imported."""

    def __init__(self, site: str, message: str, detail: str | None = None):
        self.site = site
        super().__init__(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message=message,
            detail=detail,
            suggestion="If this keeps failing, export your deck as text and paste it here.",
            status_code=502,
        )
