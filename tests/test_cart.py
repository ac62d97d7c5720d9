import uuid

from sqlmodel import select

from storefront.models.cart import Cart

from tests.conftest import bearer, register


def add(client, headers, product_id, quantity=None):
    body = {"productId": str(product_id)}
    if quantity is not None:
        body["quantity"] = quantity
    return client.post("/api/cart/add", json=body, headers=headers)


def test_cart_requires_auth(client):
    assert client.get("/api/cart").status_code == 401


def test_empty_cart_for_new_user(client, user_headers):
    response = client.get("/api/cart", headers=user_headers)

    assert response.status_code == 200
    assert response.json()["items"] == []
    assert response.json()["total"] == 0


def test_add_creates_cart_and_defaults_quantity(client, user_headers, make_product):
    product = make_product(price=250.0)

    response = add(client, user_headers, product.id)

    assert response.status_code == 200
    body = response.json()
    assert body["id"] is not None
    assert len(body["items"]) == 1
    assert body["items"][0]["quantity"] == 1
    assert body["items"][0]["product"]["name"] == "Silver Ring"
    assert body["items"][0]["product"]["imageUrl"]
    assert body["total"] == 250.0


def test_adding_same_product_twice_merges_lines(client, user_headers, make_product):
    product = make_product(price=100.0)

    add(client, user_headers, product.id, 2)
    response = add(client, user_headers, product.id, 3)

    items = response.json()["items"]
    assert len(items) == 1
    assert items[0]["quantity"] == 5
    assert response.json()["total"] == 500.0


def test_lines_keep_insertion_order(client, user_headers, make_product):
    first = make_product(name="Gold Chain", category="necklaces")
    second = make_product(name="Pearl Studs", category="earrings")

    add(client, user_headers, first.id)
    response = add(client, user_headers, second.id)

    names = [it["product"]["name"] for it in response.json()["items"]]
    assert names == ["Gold Chain", "Pearl Studs"]


def test_add_out_of_stock_product_rejected(client, user_headers, make_product):
    product = make_product(in_stock=False)

    response = add(client, user_headers, product.id)

    assert response.status_code == 400
    assert response.json()["message"] == "Product is out of stock"


def test_add_unknown_product_is_404(client, user_headers):
    response = add(client, user_headers, uuid.uuid4())

    assert response.status_code == 404
    assert response.json()["message"] == "Product not found"


def test_add_malformed_product_id_is_400(client, user_headers):
    response = add(client, user_headers, "12345")

    assert response.status_code == 400


def test_add_rejects_non_positive_quantity(client, user_headers, make_product):
    product = make_product()

    assert add(client, user_headers, product.id, 0).status_code == 400


def test_update_replaces_quantity(client, user_headers, make_product):
    product = make_product(price=10.0)
    add(client, user_headers, product.id, 2)

    response = client.put(
        "/api/cart/update",
        json={"productId": str(product.id), "quantity": 7},
        headers=user_headers,
    )

    assert response.status_code == 200
    assert response.json()["items"][0]["quantity"] == 7
    assert response.json()["total"] == 70.0


def test_update_to_zero_removes_line(client, user_headers, make_product):
    product = make_product()
    add(client, user_headers, product.id, 2)

    response = client.put(
        "/api/cart/update",
        json={"productId": str(product.id), "quantity": 0},
        headers=user_headers,
    )

    assert response.status_code == 200
    assert response.json()["items"] == []


def test_update_without_cart_or_line_is_404(client, user_headers, make_product):
    product = make_product()
    other = make_product(name="Other")

    no_cart = client.put(
        "/api/cart/update",
        json={"productId": str(product.id), "quantity": 1},
        headers=user_headers,
    )
    assert no_cart.status_code == 404
    assert no_cart.json()["message"] == "Cart not found"

    add(client, user_headers, product.id)
    no_line = client.put(
        "/api/cart/update",
        json={"productId": str(other.id), "quantity": 1},
        headers=user_headers,
    )
    assert no_line.status_code == 404
    assert no_line.json()["message"] == "Item not found in cart"


def test_remove_line(client, user_headers, make_product):
    keep = make_product(name="Keep")
    drop = make_product(name="Drop")
    add(client, user_headers, keep.id)
    add(client, user_headers, drop.id)

    response = client.delete(f"/api/cart/remove/{drop.id}", headers=user_headers)

    assert response.status_code == 200
    assert [it["product"]["name"] for it in response.json()["items"]] == ["Keep"]

    again = client.delete(f"/api/cart/remove/{drop.id}", headers=user_headers)
    assert again.status_code == 404


def test_remove_without_cart_is_404(client, user_headers):
    response = client.delete(f"/api/cart/remove/{uuid.uuid4()}", headers=user_headers)

    assert response.status_code == 404
    assert response.json()["message"] == "Cart not found"


def test_clear_keeps_cart(client, user_headers, make_product):
    assert client.delete("/api/cart/clear", headers=user_headers).status_code == 404

    product = make_product()
    cart_id = add(client, user_headers, product.id).json()["id"]

    response = client.delete("/api/cart/clear", headers=user_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Cart cleared successfully"
    assert response.json()["cart"]["items"] == []

    after = client.get("/api/cart", headers=user_headers).json()
    assert after["id"] == cart_id
    assert after["items"] == []


def test_deleted_product_is_skipped_in_total(client, user_headers, make_product, db_session):
    kept = make_product(name="Kept", price=30.0)
    gone = make_product(name="Gone", price=1000.0)
    add(client, user_headers, kept.id, 1)
    add(client, user_headers, gone.id, 1)

    db_session.delete(gone)
    db_session.commit()

    body = client.get("/api/cart", headers=user_headers).json()

    assert len(body["items"]) == 2
    dangling = [it for it in body["items"] if it["product"] is None]
    assert len(dangling) == 1
    assert body["total"] == 30.0


def test_carts_are_per_user(client, user_headers, other_headers, make_product):
    product = make_product()
    add(client, user_headers, product.id)

    assert client.get("/api/cart", headers=other_headers).json()["items"] == []


def test_token_of_deleted_account_cannot_create_cart(
    client, admin_headers, make_product, db_session
):
    body = register(client, "ghost@example.com")
    admin_delete = client.delete(
        f"/api/admin/users/{body['user']['id']}", headers=admin_headers
    )
    assert admin_delete.status_code == 200

    response = add(client, bearer(body["token"]), make_product().id)

    assert response.status_code == 404
    assert response.json()["message"] == "User not found!"
    assert db_session.exec(select(Cart)).all() == []
