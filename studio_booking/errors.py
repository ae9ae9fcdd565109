"""Exceptions raised by the stores and the slot computer."""

from typing import Optional


class StudioError(Exception):
    """Base class for studio booking errors."""


class StoreUnavailable(StudioError):
    """The backing document store could not be reached at all."""


class PartialArtistFailure(StudioError):
    """One artist's template or override could not be read.

    Recorded by the slot computer and never raised out of a day
    computation; the artist simply contributes no slots.
    """

    def __init__(self, artist_id: str, cause: Optional[BaseException] = None) -> None:
        self.artist_id = artist_id
        self.cause = cause
        super().__init__(f"Availability for artist '{artist_id}' unavailable: {cause}")


class OverlappingTimeRanges(StudioError, ValueError):
    """Two active time ranges on the same day overlap."""


class InvalidDateError(StudioError, ValueError):
    """A date string is not a valid YYYY-MM-DD calendar date."""
