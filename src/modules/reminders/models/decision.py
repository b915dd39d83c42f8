from dataclasses import dataclass
from datetime import datetime
from typing import Union


@dataclass(frozen=True)
class NoReminder:
    """The subject must not own a reminder."""

    reason: str


@dataclass(frozen=True)
class RemindAt:
    """The subject must own exactly one reminder firing at `at`."""

    at: datetime


Decision = Union[NoReminder, RemindAt]
