"""Village registry: the list of retirement villages offered at sign-up."""

import logging

from studio.domain import Village, VillageId
from studio.domain.errors import (
    InvalidVillageInputError,
    VillageExistsError,
    VillageNotFoundError,
)
from studio.services.common import parse_id
from studio.stores.interfaces import StudioStore

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 255


def _name(value: str) -> str:
    name = " ".join((value or "").split())
    if not name:
        raise InvalidVillageInputError("Village name is required")
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidVillageInputError("Village name is too long")
    return name


class VillageService:
    """Service for the village registry.

    Names are unique ignoring case. Customers and bookings store the village
    name as text, so renaming or deleting a village leaves existing records as
    they are.
    """

    def __init__(self, store: StudioStore) -> None:
        self._store = store

    def list_villages(self) -> list[Village]:
        return self._store.list_villages()

    def create_village(self, name: str) -> Village:
        """Add a village.

        Raises:
            InvalidVillageInputError: If the name is blank or too long.
            VillageExistsError: If a village already has this name.
        """
        village = Village(id=VillageId.new(), name=_name(name))
        with self._store.atomic():
            if self._store.get_village_by_name(village.name) is not None:
                raise VillageExistsError(village.name)
            self._store.add_village(village)
        logger.info("Added village %s", village.name)
        return village

    def rename_village(self, village_id: str, name: str) -> Village:
        """Change a village's name.

        Raises:
            InvalidIdError: If the village_id is not a valid UUID.
            InvalidVillageInputError: If the name is blank or too long.
            VillageNotFoundError: If the village does not exist.
            VillageExistsError: If another village already has this name.
        """
        parsed = parse_id(VillageId.from_string, village_id, "village id")
        new_name = _name(name)
        with self._store.atomic():
            village = self._store.get_village(parsed)
            if village is None:
                raise VillageNotFoundError(village_id)
            owner = self._store.get_village_by_name(new_name)
            if owner is not None and owner.id != village.id:
                raise VillageExistsError(new_name)
            village = Village(id=village.id, name=new_name)
            self._store.save_village(village)
        return village

    def delete_village(self, village_id: str) -> None:
        """Remove a village from the registry.

        Raises:
            InvalidIdError: If the village_id is not a valid UUID.
            VillageNotFoundError: If the village does not exist.
        """
        parsed = parse_id(VillageId.from_string, village_id, "village id")
        with self._store.atomic():
            if not self._store.delete_village(parsed):
                raise VillageNotFoundError(village_id)
        logger.info("Deleted village %s", village_id)
