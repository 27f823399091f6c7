from storefront.catalog.models import Product
from storefront.orders.models import Order
from storefront.utils.order_utils import get_status_variant


def test_health_check(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_cart_requires_a_token(client):
    response = client.get("/cart/count")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTHENTICATION_FAILED"


def test_garbage_token_is_rejected(client):
    response = client.get("/cart/count", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


def test_add_and_remove_update_the_badge_count(client, auth_headers, make_product):
    product = make_product(name="Paneer 200g")

    first = client.post(f"/cart/items/{product.id}", headers=auth_headers)
    second = client.post(f"/cart/items/{product.id}", headers=auth_headers)
    removed = client.delete(f"/cart/items/{product.id}", headers=auth_headers)

    assert first.json() == {"success": True, "error": None, "count": 1}
    assert second.json()["count"] == 2
    assert removed.json()["count"] == 1
    assert client.get("/cart/count", headers=auth_headers).json() == {"count": 1}


def test_get_cart_lists_lines_with_product_data(client, auth_headers, make_product, add_cart_line):
    product = make_product(name="Curd", price=40.0, stock_value=6)
    add_cart_line(product.id, quantity=3)

    body = client.get("/cart/", headers=auth_headers).json()

    assert body["total_items"] == 3
    assert body["total_value"] == 120.0
    assert body["items"][0]["name"] == "Curd"


def test_product_list_is_served_from_cache_until_ttl(client, db_session, clock, make_product):
    product = make_product(name="Atta 5kg", price=250.0)

    assert client.get("/products/").json()[0]["price"] == 250.0

    db_session.query(Product).filter(Product.id == product.id).update({Product.price: 275.0})
    db_session.commit()
    assert client.get("/products/").json()[0]["price"] == 250.0

    clock.advance(301)
    assert client.get("/products/").json()[0]["price"] == 275.0


def test_hidden_product_is_not_found(client, make_product):
    hidden = make_product(user_visibility=False)

    response = client.get(f"/products/{hidden.id}")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "PRODUCT_NOT_FOUND"


def test_place_order_and_read_it_back(client, db_session, auth_headers, address, make_product, add_cart_line):
    product = make_product(name="Olive Oil", price=450.0, stock_value=4)
    add_cart_line(product.id, quantity=2)

    response = client.post("/orders/", json={"address_id": address.id, "payment_mode": "cod"}, headers=auth_headers)

    assert response.status_code == 201
    order_id = response.json()["order_id"]

    order = client.get(f"/orders/{order_id}", headers=auth_headers).json()
    assert order["total_amount"] == 900.0
    assert order["status"] == "pending"
    assert order["status_variant"] == "warning"
    assert [i["quantity"] for i in order["order_items"]] == [2]

    listing = client.get("/orders/", headers=auth_headers).json()
    assert listing["total"] == 1
    assert listing["orders"][0]["id"] == order_id
    assert client.get("/cart/count", headers=auth_headers).json() == {"count": 0}


def test_place_order_with_empty_cart_is_a_conflict(client, auth_headers, address):
    response = client.post("/orders/", json={"address_id": address.id}, headers=auth_headers)

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CART_EMPTY"


def test_place_order_with_unknown_address(client, auth_headers, make_product, add_cart_line):
    add_cart_line(make_product().id)

    response = client.post("/orders/", json={"address_id": "nowhere"}, headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "ADDRESS_NOT_FOUND"


def test_insufficient_stock_is_a_conflict(client, auth_headers, address, make_product, add_cart_line):
    add_cart_line(make_product(name="Rare Honey", stock_value=1).id, quantity=3)

    response = client.post("/orders/", json={"address_id": address.id}, headers=auth_headers)

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "INSUFFICIENT_STOCK"


def test_online_payment_is_switched_off(client, db_session, auth_headers, user_id, address, make_product, add_cart_line):
    add_cart_line(make_product().id)

    response = client.post("/orders/", json={"address_id": address.id, "payment_mode": "online"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "PAYMENT_MODE_UNAVAILABLE"
    assert db_session.query(Order).filter(Order.user_id == user_id).count() == 0


def test_unknown_payment_mode_fails_validation(client, auth_headers, address):
    response = client.post("/orders/", json={"address_id": address.id, "payment_mode": "barter"}, headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_orders_of_other_users_are_not_visible(client, db_session, auth_headers):
    foreign = Order(
        user_id="someone-else", items=[], total_amount=0, address_line="1 Elsewhere St",
        phone="9000000000", pincode="110001", payment_mode="cod"
    )
    db_session.add(foreign)
    db_session.commit()

    response = client.get(f"/orders/{foreign.id}", headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "ORDER_NOT_FOUND"


def test_status_update_requires_admin(client, db_session, auth_headers, admin_headers, address, make_product, add_cart_line):
    add_cart_line(make_product().id)
    order_id = client.post("/orders/", json={"address_id": address.id}, headers=auth_headers).json()["order_id"]

    forbidden = client.put(f"/orders/{order_id}/status", json={"status": "delivered"}, headers=auth_headers)
    assert forbidden.status_code == 403

    updated = client.put(f"/orders/{order_id}/status", json={"status": "delivered"}, headers=admin_headers)
    assert updated.status_code == 200
    assert updated.json()["status"] == "delivered"
    assert updated.json()["status_variant"] == "success"


def test_create_and_list_addresses(client, auth_headers):
    first = client.post("/addresses/", json={
        "address_line": "4th Cross, Jayanagar",
        "phone": "9123456780",
        "pincode": "560041",
    }, headers=auth_headers)
    second = client.post("/addresses/", json={
        "address_line": "Flat 9, HSR Layout",
        "phone": "9123456780",
        "pincode": "560102",
        "is_default": True,
    }, headers=auth_headers)

    assert first.status_code == 201
    assert first.json()["is_default"] is True
    assert second.json()["is_default"] is True

    listed = client.get("/addresses/", headers=auth_headers).json()
    assert [a["address_line"] for a in listed] == ["Flat 9, HSR Layout", "4th Cross, Jayanagar"]
    assert [a["is_default"] for a in listed] == [True, False]


def test_status_variants():
    assert get_status_variant("delivered") == "success"
    assert get_status_variant("processing") == "warning"
    assert get_status_variant("failed") == "danger"
    assert get_status_variant("hold") == "info"
