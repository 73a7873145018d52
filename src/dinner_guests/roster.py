"""Request-scoped store of custom dinner guests."""

import re
import uuid
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import structlog

from .models import GuestProfile

logger = structlog.get_logger(__name__)

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    return _NON_SLUG.sub("-", name.lower()).strip("-") or "guest"


class GuestRegistry:
    """Custom guests added by a caller.

    The registry is an ordinary object handed around in a ``RequestContext``;
    there is no process-wide instance.
    """

    def __init__(self, guests: Optional[Iterable[GuestProfile]] = None):
        self._guests: Dict[str, GuestProfile] = {}
        self._counter = 0
        for guest in guests or ():
            self._guests[guest.id] = guest

    def __len__(self) -> int:
        return len(self._guests)

    def __contains__(self, guest_id: str) -> bool:
        return guest_id in self._guests

    def _next_id(self, name: str) -> str:
        while True:
            self._counter += 1
            guest_id = f"custom-{slugify(name)}-{self._counter}"
            if guest_id not in self._guests:
                return guest_id

    def add(self, name: str, era: str = "", description: str = "") -> GuestProfile:
        """Register a custom guest and return its profile."""
        name = name.strip()
        if not name:
            raise ValueError("Guest name must not be empty")
        guest = GuestProfile(
            id=self._next_id(name),
            name=name,
            era=era,
            description=description,
            custom=True,
        )
        self._guests[guest.id] = guest
        logger.debug("Custom guest added", guest_id=guest.id, name=name)
        return guest

    def remove(self, guest_id: str) -> bool:
        """Remove a guest; returns False when the id is unknown."""
        return self._guests.pop(guest_id, None) is not None

    def get(self, guest_id: str) -> Optional[GuestProfile]:
        return self._guests.get(guest_id)

    def resolve(self, guest_ids: Iterable[str]) -> List[GuestProfile]:
        """Profiles for the given ids in the given order; unknown ids are skipped."""
        guests = []
        for guest_id in guest_ids:
            guest = self._guests.get(guest_id)
            if guest is None:
                logger.warning("Unknown guest id", guest_id=guest_id)
                continue
            guests.append(guest)
        return guests

    def all(self) -> List[GuestProfile]:
        return list(self._guests.values())

    def clear(self) -> None:
        self._guests.clear()


@dataclass
class RequestContext:
    """Per-request state passed explicitly to service operations."""
    registry: GuestRegistry = field(default_factory=GuestRegistry)
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)
