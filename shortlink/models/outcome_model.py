"""Outcomes of resolving a shortcode.

A resolution has exactly three possible outcomes:
    - Redirect: the shortcode is live; a click was recorded.
    - NotFound: no record with this shortcode was ever created.
    - Expired:  the record exists but is past its expiry time.

Presentation layers either branch on the outcome type or call
`raise_for_outcome()` to turn failures into exceptions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar

from shortlink.exceptions import ShortcodeExpiredError, ShortcodeNotFoundError


@dataclass(frozen=True)
class ResolutionOutcome(ABC):
    shortcode: str

    redirect: ClassVar[bool] = False

    @property
    @abstractmethod
    def message(self) -> str:
        """User-facing description of the outcome."""

    def raise_for_outcome(self) -> None:
        pass


@dataclass(frozen=True)
class Redirect(ResolutionOutcome):
    target_url: str = ''

    redirect: ClassVar[bool] = True

    @property
    def message(self) -> str:
        return f'Redirecting to {self.target_url}'


@dataclass(frozen=True)
class NotFound(ResolutionOutcome):
    @property
    def message(self) -> str:
        return 'Invalid or expired URL'

    def raise_for_outcome(self) -> None:
        raise ShortcodeNotFoundError(self.shortcode, f"Short URL with code '{self.shortcode}' not found.")


@dataclass(frozen=True)
class Expired(ResolutionOutcome):
    expired_at: datetime | None = None

    @property
    def message(self) -> str:
        return 'This URL has expired'

    def raise_for_outcome(self) -> None:
        raise ShortcodeExpiredError(self.shortcode, f"Short URL with code '{self.shortcode}' has expired.")
