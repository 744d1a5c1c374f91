from supermarket_sim.containers import Equipment, EquipmentKind
from supermarket_sim.geometry import Point
from supermarket_sim.results import Denial
from supermarket_sim.world.base import Wall
from supermarket_sim.world.services import BasketStation, CartStation, CheckoutCounter, Exit, ProductSearch, Stairs

from conftest import make_product


class TestEquipmentStations:
    def test_issue_cart(self, make_shopper):
        shopper = make_shopper()
        result = CartStation(Point(1, 20)).interact(shopper)

        assert result.success
        assert shopper.equipment is not None
        assert shopper.equipment.kind is EquipmentKind.CART
        assert shopper.equipment.capacity == 30

    def test_issue_basket(self, make_shopper):
        shopper = make_shopper()
        BasketStation(Point(20, 20)).interact(shopper)
        assert shopper.equipment.capacity == 15

    def test_return_empty_equipment(self, make_shopper):
        shopper = make_shopper()
        station = BasketStation(Point(20, 20))
        station.interact(shopper)

        result = station.interact(shopper)
        assert result.success
        assert "returned" in result.message
        assert not shopper.has_equipment

    def test_cannot_return_loaded_equipment(self, make_shopper):
        shopper = make_shopper()
        station = CartStation(Point(1, 20))
        station.interact(shopper)
        shopper.take_product(make_product("SNK001"))

        result = station.interact(shopper)
        assert result.reason is Denial.EQUIPMENT_NOT_EMPTY
        assert shopper.has_equipment

    def test_other_kind_already_held(self, make_shopper):
        shopper = make_shopper()
        CartStation(Point(1, 20)).interact(shopper)

        result = BasketStation(Point(20, 20)).interact(shopper)
        assert result.reason is Denial.ALREADY_HAS_EQUIPMENT
        assert shopper.equipment.kind is EquipmentKind.CART

    def test_hands_must_be_empty(self, make_shopper):
        shopper = make_shopper()
        shopper.take_product(make_product("SNK001"))

        result = CartStation(Point(1, 20)).interact(shopper)
        assert result.reason is Denial.HANDS_NOT_EMPTY
        assert not shopper.has_equipment

    def test_nothing_issued_after_checkout(self, make_shopper):
        shopper = make_shopper()
        shopper.mark_checked_out()

        result = BasketStation(Point(20, 20)).interact(shopper)
        assert result.reason is Denial.CANNOT_RETRIEVE


class TestExit:
    def test_empty_handed_shopper_may_leave(self, make_shopper):
        shopper = make_shopper()
        result = Exit(Point(10, 21)).interact(shopper)

        assert result.success
        assert shopper.exited
        assert "Goodbye" in result.message

    def test_equipment_blocks_exit(self, make_shopper):
        shopper = make_shopper()
        shopper.acquire_equipment(Equipment(EquipmentKind.BASKET))

        result = Exit(Point(10, 21)).interact(shopper)
        assert result.reason is Denial.EQUIPMENT_STILL_HELD
        assert not shopper.exited

    def test_unpaid_products_block_exit(self, make_shopper):
        shopper = make_shopper()
        shopper.take_product(make_product("SNK001"))

        result = Exit(Point(10, 21)).interact(shopper)
        assert result.reason is Denial.UNPAID_PRODUCTS
        assert not shopper.exited

    def test_paid_shopper_may_leave(self, make_shopper):
        shopper = make_shopper()
        shopper.take_product(make_product("SNK001"))
        CheckoutCounter(Point(2, 18)).interact(shopper)

        assert Exit(Point(10, 21)).interact(shopper).success
        assert shopper.exited

    def test_exit_is_a_barrier(self):
        assert not Exit(Point(10, 21)).is_passable()


def test_informational_amenities(make_shopper):
    shopper = make_shopper()
    assert Stairs(Point(1, 15)).is_passable()
    assert not ProductSearch(Point(8, 15)).is_passable()
    assert "Search" in ProductSearch(Point(8, 15)).interact(shopper).message
    wall = Wall(Point(0, 0)).interact(shopper)
    assert wall.success
    assert "wall" in wall.message
    assert shopper.all_products() == []
