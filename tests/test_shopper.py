from decimal import Decimal

import pytest

from supermarket_sim.containers import Equipment, EquipmentKind
from supermarket_sim.geometry import Direction, Point
from supermarket_sim.results import Denial
from supermarket_sim.shopper import Shopper

from conftest import make_product


class TestMovement:
    def test_starts_facing_north_on_ground_floor(self, make_shopper):
        shopper = make_shopper()
        assert shopper.facing is Direction.NORTH
        assert shopper.floor == 0
        assert not shopper.checked_out and not shopper.exited

    def test_negative_age_rejected(self):
        with pytest.raises(ValueError):
            Shopper("Nobody", -1, Point(0, 0))

    def test_step_onto_empty_tile(self, tiny_store, make_shopper):
        shopper = make_shopper(x=2, y=2)
        result = shopper.move(Direction.EAST, tiny_store)

        assert result.moved
        assert shopper.position == Point(3, 2)
        assert result.interaction is None
        # moving never turns the shopper
        assert shopper.facing is Direction.NORTH

    def test_blocked_by_display(self, tiny_store, make_shopper):
        shopper = make_shopper(x=1, y=2)
        result = shopper.move(Direction.NORTH, tiny_store)

        assert not result.moved
        assert result.reason is Denial.BLOCKED
        assert result.message == "Blocked by Shelf."
        assert shopper.position == Point(1, 2)

    def test_blocked_by_wall(self, tiny_store, make_shopper):
        shopper = make_shopper(x=4, y=2)
        assert not shopper.move(Direction.EAST, tiny_store)
        assert shopper.position == Point(4, 2)

    def test_entrance_seals_once_left(self, tiny_store, make_shopper):
        shopper = make_shopper()
        entrance = tiny_store.amenity_at(2, 5, 0)
        assert entrance.is_passable()

        assert shopper.move(Direction.NORTH, tiny_store).moved
        assert entrance.sealed
        assert not entrance.is_passable()

        back = shopper.move(Direction.SOUTH, tiny_store)
        assert not back.moved
        assert back.reason is Denial.BLOCKED
        assert shopper.position == Point(2, 4)
        assert "locked" in entrance.interact(shopper).message

    def test_stairs_toggle_floor_and_keep_position(self, tiny_store, make_shopper):
        shopper = make_shopper(x=1, y=2)

        up = shopper.move(Direction.SOUTH, tiny_store)
        assert up.floor_changed
        assert shopper.floor == 1
        assert shopper.position == Point(1, 3)

        # step off and back on from another side: one toggle per step
        shopper.move(Direction.EAST, tiny_store)
        assert shopper.floor == 1
        down = shopper.move(Direction.WEST, tiny_store)
        assert down.floor_changed
        assert shopper.floor == 0
        assert shopper.position == Point(1, 3)

    def test_stepping_onto_counter_interacts(self, tiny_store, make_shopper):
        shopper = make_shopper(x=3, y=2)
        result = shopper.move(Direction.SOUTH, tiny_store)

        assert result.moved
        assert shopper.position == Point(3, 3)
        assert result.interaction is not None
        assert result.interaction.reason is Denial.NOTHING_TO_PAY

    def test_face_only_turns(self, make_shopper):
        shopper = make_shopper()
        shopper.face(Direction.WEST)
        assert shopper.facing is Direction.WEST
        assert shopper.position == Point(2, 5)


class TestCarrying:
    def test_minor_cannot_take_alcohol(self, make_shopper):
        shopper = make_shopper(age=17)
        result = shopper.take_product(make_product("ALC001", consumable=True, beverage=True))

        assert not result.success
        assert result.reason is Denial.UNDERAGE
        assert shopper.hand_carried == ()
        assert shopper.all_products() == []

    def test_adult_threshold_is_inclusive(self, make_shopper):
        assert make_shopper(age=18).take_product(make_product("ALC001"))

    def test_minor_can_take_other_products(self, make_shopper):
        assert make_shopper(age=12).take_product(make_product("SNK001"))

    def test_two_hands_only(self, make_shopper):
        shopper = make_shopper()
        assert shopper.take_product(make_product("SNK001"))
        assert shopper.take_product(make_product("SNK002"))

        third = shopper.take_product(make_product("SNK003"))
        assert third.reason is Denial.HANDS_FULL
        assert len(shopper.hand_carried) == 2

    def test_equipment_takes_over_from_hands(self, make_shopper):
        shopper = make_shopper()
        shopper.acquire_equipment(Equipment(EquipmentKind.BASKET))
        for i in range(15):
            assert shopper.take_product(make_product(f"CAN{i:03d}"))

        full = shopper.take_product(make_product("CAN999"))
        assert full.reason is Denial.CONTAINER_FULL
        assert full.message == "Your Basket is full!"
        assert shopper.hand_carried == ()
        assert len(shopper.all_products()) == 15

    def test_equipment_requires_empty_hands(self, make_shopper):
        shopper = make_shopper()
        shopper.take_product(make_product("SNK001"))
        with pytest.raises(ValueError):
            shopper.acquire_equipment(Equipment(EquipmentKind.CART))

    def test_return_by_identity_hands_first(self, make_shopper):
        shopper = make_shopper()
        bread = make_product("BRD001", "Bread", "85.00")
        twin = make_product("BRD001", "Bread", "85.00")
        shopper.take_product(bread)

        assert shopper.holds(bread)
        assert not shopper.holds(twin)
        assert shopper.return_product(twin) is None
        assert shopper.return_product(bread) is bread
        assert shopper.all_products() == []

    def test_inventory_summary_and_total(self, make_shopper):
        shopper = make_shopper()
        shopper.acquire_equipment(Equipment(EquipmentKind.CART))
        milk = make_product("MLK001", "Milk", "115.00")
        shopper.take_product(milk)
        shopper.take_product(milk)
        shopper.take_product(make_product("CLE001", "Soap", "60.00"))

        summary = shopper.inventory_summary()
        assert [(row.name, row.quantity) for row in summary] == [("Milk", 2), ("Soap", 1)]
        assert shopper.running_total() == Decimal("290.00")
