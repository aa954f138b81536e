"""Unit tests for VillageService."""

import pytest

from studio.domain.errors import (
    InvalidIdError,
    InvalidVillageInputError,
    VillageExistsError,
    VillageNotFoundError,
)

UNKNOWN_ID = "0b7e7a55-8c1f-4f4e-9d53-6a1c1bb7f001"


class TestCreateVillage:
    def test_listed_by_name(self, village_service):
        village_service.create_village("Rosewood")
        village_service.create_village("  Harbour   View ")

        assert [v.name for v in village_service.list_villages()] == ["Harbour View", "Rosewood"]

    def test_name_is_unique_ignoring_case(self, village_service):
        village_service.create_village("Rosewood")
        with pytest.raises(VillageExistsError):
            village_service.create_village("ROSEWOOD")

    @pytest.mark.parametrize("name", ["", "   ", "x" * 256])
    def test_name_must_be_present_and_short(self, village_service, name):
        with pytest.raises(InvalidVillageInputError):
            village_service.create_village(name)


class TestRenameVillage:
    def test_rename(self, village_service):
        village = village_service.create_village("Rosewood")

        renamed = village_service.rename_village(str(village.id), "Rosewood Gardens")

        assert renamed.id == village.id
        assert [v.name for v in village_service.list_villages()] == ["Rosewood Gardens"]

    def test_changing_case_of_own_name_is_allowed(self, village_service):
        village = village_service.create_village("rosewood")
        assert village_service.rename_village(str(village.id), "Rosewood").name == "Rosewood"

    def test_cannot_take_another_villages_name(self, village_service):
        village_service.create_village("Rosewood")
        other = village_service.create_village("Harbour View")
        with pytest.raises(VillageExistsError):
            village_service.rename_village(str(other.id), "rosewood")

    def test_unknown_village(self, village_service):
        with pytest.raises(VillageNotFoundError):
            village_service.rename_village(UNKNOWN_ID, "Rosewood")


class TestDeleteVillage:
    def test_delete(self, village_service):
        village = village_service.create_village("Rosewood")
        village_service.delete_village(str(village.id))
        assert village_service.list_villages() == []

    def test_customers_keep_their_village_name(self, village_service, customer_service):
        """Given a customer from a deleted village, their record is unchanged."""
        village = village_service.create_village("Rosewood")
        customer = customer_service.register_customer("Alice", "alice@example.com", village="Rosewood")

        village_service.delete_village(str(village.id))

        assert customer_service.get_customer(str(customer.id)).village == "Rosewood"

    def test_delete_twice(self, village_service):
        village = village_service.create_village("Rosewood")
        village_service.delete_village(str(village.id))
        with pytest.raises(VillageNotFoundError):
            village_service.delete_village(str(village.id))

    def test_malformed_id(self, village_service):
        with pytest.raises(InvalidIdError):
            village_service.delete_village("rosewood")
