import pytest
from sqlalchemy.exc import OperationalError

from storefront.cart.models import CartItem
from storefront.cart.service import CartService


def cart_rows(db, user_id):
    db.expire_all()
    return db.query(CartItem).filter(CartItem.user_id == user_id).order_by(CartItem.id).all()


@pytest.mark.asyncio
async def test_first_add_creates_line_with_quantity_one(db_session, user_id, make_product):
    product = make_product()

    result = await CartService.add_to_cart(db_session, product.id, user_id)

    assert result == {"success": True}
    rows = cart_rows(db_session, user_id)
    assert [(r.product_id, r.quantity) for r in rows] == [(product.id, 1)]


@pytest.mark.asyncio
async def test_repeat_add_increments_the_existing_line(db_session, user_id, make_product):
    product = make_product()

    for _ in range(3):
        await CartService.add_to_cart(db_session, product.id, user_id)

    rows = cart_rows(db_session, user_id)
    assert len(rows) == 1
    assert rows[0].quantity == 3


@pytest.mark.asyncio
async def test_add_then_remove_leaves_no_line(db_session, user_id, make_product):
    product = make_product()

    await CartService.add_to_cart(db_session, product.id, user_id)
    result = await CartService.remove_from_cart(db_session, product.id, user_id)

    assert result == {"success": True}
    assert cart_rows(db_session, user_id) == []


@pytest.mark.asyncio
async def test_remove_decrements_when_more_than_one(db_session, user_id, make_product, add_cart_line):
    product = make_product()
    add_cart_line(product.id, quantity=3)

    await CartService.remove_from_cart(db_session, product.id, user_id)

    assert cart_rows(db_session, user_id)[0].quantity == 2


@pytest.mark.asyncio
async def test_remove_of_absent_line_succeeds_without_creating_one(db_session, user_id):
    result = await CartService.remove_from_cart(db_session, "never-added", user_id)

    assert result == {"success": True}
    assert cart_rows(db_session, user_id) == []


@pytest.mark.asyncio
async def test_mutations_require_a_user(db_session):
    assert await CartService.add_to_cart(db_session, "p1", None) == {"success": False, "error": "Not logged in"}
    assert await CartService.remove_from_cart(db_session, "p1", "") == {"success": False, "error": "Not logged in"}


@pytest.mark.asyncio
async def test_cart_lines_are_per_user(db_session, user_id, make_product, add_cart_line):
    product = make_product()
    add_cart_line(product.id, quantity=4, owner="someone-else")

    await CartService.add_to_cart(db_session, product.id, user_id)

    assert cart_rows(db_session, user_id)[0].quantity == 1
    assert cart_rows(db_session, "someone-else")[0].quantity == 4


@pytest.mark.asyncio
async def test_cart_count_matches_sum_of_quantities(db_session, user_id, make_product):
    apples, bread = make_product(name="Apples"), make_product(name="Bread")
    operations = [
        ("add", apples), ("add", apples), ("add", bread),
        ("remove", apples), ("add", bread), ("remove", bread),
        ("remove", bread), ("remove", bread), ("add", apples),
    ]

    for op, product in operations:
        if op == "add":
            await CartService.add_to_cart(db_session, product.id, user_id)
        else:
            await CartService.remove_from_cart(db_session, product.id, user_id)
        expected = sum(r.quantity for r in cart_rows(db_session, user_id))
        assert await CartService.get_cart_count(db_session, user_id) == expected

    assert await CartService.get_cart_count(db_session, user_id) == 2


@pytest.mark.asyncio
async def test_cart_count_is_zero_without_user_or_rows(db_session, user_id):
    assert await CartService.get_cart_count(db_session, user_id) == 0
    assert await CartService.get_cart_count(db_session, None) == 0


@pytest.mark.asyncio
async def test_cart_count_reports_zero_when_lookup_fails(db_session, user_id, make_product, add_cart_line, mocker):
    add_cart_line(make_product().id, quantity=2)
    mocker.patch.object(db_session, "query", side_effect=OperationalError("SELECT", {}, Exception("connection lost")))

    assert await CartService.get_cart_count(db_session, user_id) == 0


@pytest.mark.asyncio
async def test_add_reports_store_failure_instead_of_raising(db_session, user_id, mocker):
    mocker.patch.object(db_session, "query", side_effect=OperationalError("SELECT", {}, Exception("connection lost")))

    result = await CartService.add_to_cart(db_session, "p1", user_id)

    assert result["success"] is False
    assert "connection lost" in result["error"]


@pytest.mark.asyncio
async def test_add_that_loses_the_insert_race_counts_as_an_increment(db_session, user_id, make_product, add_cart_line, mocker):
    product = make_product()
    line = add_cart_line(product.id, quantity=1)
    # First lookup misses the row another request just created
    mocker.patch.object(CartService, "_find_line", side_effect=[None, line])

    result = await CartService.add_to_cart(db_session, product.id, user_id)

    assert result == {"success": True}
    rows = cart_rows(db_session, user_id)
    assert len(rows) == 1
    assert rows[0].quantity == 2


@pytest.mark.asyncio
async def test_get_user_cart_joins_product_data(db_session, user_id, make_product, add_cart_line):
    milk = make_product(name="Milk", price=30.0, mrp=32.0, stock_value=8)
    add_cart_line(milk.id, quantity=2)
    add_cart_line("deleted-product", quantity=1)

    cart = await CartService.get_user_cart(db_session, user_id)

    assert cart["total_items"] == 3
    assert cart["total_value"] == 60.0
    first, second = cart["items"]
    assert first["name"] == "Milk"
    assert first["subtotal"] == 60.0
    assert first["mrp"] == 32.0
    assert second["name"] is None
    assert second["price"] == 0.0
