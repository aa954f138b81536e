"""Helpers shared by the services."""

from datetime import datetime
from typing import Callable, TypeVar

from studio.domain.errors import InvalidIdError

Clock = Callable[[], datetime]

IdT = TypeVar("IdT")


def parse_id(factory: Callable[[str], IdT], value: str, kind: str) -> IdT:
    """Parse a string identifier with ``factory`` (an ``Id.from_string``).

    Raises:
        InvalidIdError: If the value is not a valid UUID.
    """
    try:
        return factory(str(value))
    except (TypeError, ValueError, AttributeError):
        raise InvalidIdError(kind) from None
