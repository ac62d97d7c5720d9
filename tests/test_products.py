import uuid

from tests.conftest import HOSTED_IMAGE_URL, bearer, register

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def create_form(**overrides):
    data = {
        "name": "Emerald Ring",
        "description": "Emerald set in 18k gold",
        "price": "4500",
        "category": "rings",
        "inStock": "true",
        "featured": "false",
    }
    data.update(overrides)
    return data


# -------- Public catalog --------


def test_list_defaults_to_newest_first(client, make_product):
    for i in range(3):
        make_product(name=f"Ring {i}")

    response = client.get("/api/products")

    assert response.status_code == 200
    body = response.json()
    assert [p["name"] for p in body["products"]] == ["Ring 2", "Ring 1", "Ring 0"]
    assert body["total"] == 3
    assert body["page"] == 1
    assert body["totalPages"] == 1


def test_list_paginates(client, make_product):
    for i in range(5):
        make_product(name=f"Ring {i}")

    body = client.get("/api/products", params={"page": 2, "limit": 2}).json()

    assert [p["name"] for p in body["products"]] == ["Ring 2", "Ring 1"]
    assert body["total"] == 5
    assert body["totalPages"] == 3


def test_list_search_is_case_insensitive(client, make_product):
    make_product(name="Diamond Solitaire")
    make_product(name="Pearl Drop", category="earrings")

    body = client.get("/api/products", params={"search": "diamond"}).json()

    assert [p["name"] for p in body["products"]] == ["Diamond Solitaire"]


def test_list_search_treats_wildcards_literally(client, make_product):
    make_product(name="Plain Band")

    body = client.get("/api/products", params={"search": "%"}).json()

    assert body["products"] == []
    assert body["total"] == 0


def test_list_filters_by_category_and_sorts(client, make_product):
    make_product(name="Cheap Ring", price=50.0)
    make_product(name="Dear Ring", price=900.0)
    make_product(name="Chain", category="necklaces", price=10.0)

    body = client.get(
        "/api/products",
        params={"category": "rings", "sort": "price", "order": "asc"},
    ).json()

    assert [p["name"] for p in body["products"]] == ["Cheap Ring", "Dear Ring"]


def test_list_rejects_unknown_sort_field(client):
    response = client.get("/api/products", params={"sort": "passwordHash"})

    assert response.status_code == 400


def test_featured_returns_newest_four(client, make_product):
    for i in range(6):
        make_product(name=f"Star {i}", featured=True)
    make_product(name="Plain")

    names = [p["name"] for p in client.get("/api/products/featured").json()]

    assert names == ["Star 5", "Star 4", "Star 3", "Star 2"]


def test_category_section_returns_newest_six(client, make_product):
    for i in range(8):
        make_product(name=f"Watch {i}", category="watches")
    make_product(name="Ring")

    products = client.get("/api/products/category/watches").json()

    assert len(products) == 6
    assert products[0]["name"] == "Watch 7"
    assert all(p["category"] == "watches" for p in products)


def test_get_product(client, make_product):
    product = make_product(name="Tennis Bracelet", category="bracelets")

    response = client.get(f"/api/products/{product.id}")

    assert response.status_code == 200
    assert response.json()["name"] == "Tennis Bracelet"
    assert response.json()["inStock"] is True
    assert response.json()["discount"] == "0%"

    missing = client.get(f"/api/products/{uuid.uuid4()}")
    assert missing.status_code == 404
    assert missing.json()["message"] == "Product not found!"


# -------- Admin products --------


def test_admin_creates_product_with_image(client, admin_headers, storage):
    response = client.post(
        "/api/admin/products",
        data=create_form(),
        files={"image": ("ring.png", PNG_BYTES, "image/png")},
        headers=admin_headers,
    )

    assert response.status_code == 201, response.text
    product = response.json()["product"]
    assert product["name"] == "Emerald Ring"
    assert product["price"] == 4500
    assert product["imageUrl"] == HOSTED_IMAGE_URL
    assert product["rating"] == 5

    storage["upload"].assert_called_once()
    path, data, content_type = storage["upload"].call_args.args
    assert path.startswith("products/") and path.endswith(".png")
    assert data == PNG_BYTES
    assert content_type == "image/png"

    listed = client.get("/api/products").json()
    assert listed["total"] == 1


def test_admin_create_rejects_bad_category(client, admin_headers, storage):
    response = client.post(
        "/api/admin/products",
        data=create_form(category="tiaras"),
        files={"image": ("ring.png", PNG_BYTES, "image/png")},
        headers=admin_headers,
    )

    assert response.status_code == 400
    storage["upload"].assert_not_called()


def test_admin_create_rejects_unsupported_image(client, admin_headers, storage):
    response = client.post(
        "/api/admin/products",
        data=create_form(),
        files={"image": ("ring.gif", b"GIF89a", "image/gif")},
        headers=admin_headers,
    )

    assert response.status_code == 400
    storage["upload"].assert_not_called()


def test_admin_create_requires_image(client, admin_headers):
    response = client.post(
        "/api/admin/products", data=create_form(), headers=admin_headers
    )

    assert response.status_code == 400


def test_non_admin_cannot_manage_products(client, user_headers, make_product):
    product = make_product()

    create = client.post(
        "/api/admin/products",
        data=create_form(),
        files={"image": ("ring.png", PNG_BYTES, "image/png")},
        headers=user_headers,
    )
    assert create.status_code == 403

    delete = client.delete(f"/api/admin/products/{product.id}", headers=user_headers)
    assert delete.status_code == 403


def test_admin_lists_every_product(client, admin_headers, make_product):
    for i in range(12):
        make_product(name=f"Item {i}")

    products = client.get("/api/admin/products", headers=admin_headers).json()

    assert len(products) == 12
    assert products[0]["name"] == "Item 11"


def test_admin_updates_product(client, admin_headers, make_product):
    product = make_product(price=100.0)

    response = client.put(
        f"/api/admin/products/{product.id}",
        json={"price": 150.0, "inStock": False, "featured": True},
        headers=admin_headers,
    )

    assert response.status_code == 200
    updated = response.json()["product"]
    assert updated["price"] == 150.0
    assert updated["inStock"] is False
    assert updated["featured"] is True
    assert updated["name"] == "Silver Ring"


def test_admin_update_validation(client, admin_headers, make_product):
    product = make_product()

    bad_price = client.put(
        f"/api/admin/products/{product.id}",
        json={"price": -1},
        headers=admin_headers,
    )
    assert bad_price.status_code == 400

    missing = client.put(
        f"/api/admin/products/{uuid.uuid4()}",
        json={"price": 10},
        headers=admin_headers,
    )
    assert missing.status_code == 404


def test_admin_deletes_product_and_image(client, admin_headers, make_product, storage):
    product = make_product()

    response = client.delete(f"/api/admin/products/{product.id}", headers=admin_headers)

    assert response.status_code == 200
    storage["delete"].assert_called_once_with(HOSTED_IMAGE_URL)
    assert client.get(f"/api/products/{product.id}").status_code == 404

    again = client.delete(f"/api/admin/products/{product.id}", headers=admin_headers)
    assert again.status_code == 404


# -------- Admin users --------


def test_admin_lists_and_reads_users(client, admin_headers, user_headers):
    users = client.get("/api/admin/users", headers=admin_headers).json()

    emails = {u["email"] for u in users}
    assert emails == {"admin@example.com", "alice@example.com"}
    assert all("passwordHash" not in u for u in users)

    alice = next(u for u in users if u["email"] == "alice@example.com")
    one = client.get(f"/api/admin/users/{alice['id']}", headers=admin_headers)
    assert one.status_code == 200
    assert one.json()["name"] == "Alice"

    missing = client.get(f"/api/admin/users/{uuid.uuid4()}", headers=admin_headers)
    assert missing.status_code == 404


def test_admin_promotes_user(client, admin_headers):
    body = register(client, "ivy@example.com", name="Ivy")
    user_id = body["user"]["id"]

    response = client.put(
        f"/api/admin/users/{user_id}",
        json={"isAdmin": True},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["user"]["isAdmin"] is True

    # promotion takes effect on the existing token
    dashboard = client.get("/api/auth/admin-dashboard", headers=bearer(body["token"]))
    assert dashboard.status_code == 200


def test_admin_update_rejects_taken_email(client, admin_headers):
    first = register(client, "jack@example.com")
    register(client, "kate@example.com")

    response = client.put(
        f"/api/admin/users/{first['user']['id']}",
        json={"email": "kate@example.com"},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Email is already in use!"


def test_admin_deletes_user(client, admin_headers):
    body = register(client, "leo@example.com")
    user_id = body["user"]["id"]

    response = client.delete(f"/api/admin/users/{user_id}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "User deleted successfully!"
    assert client.get(f"/api/admin/users/{user_id}", headers=admin_headers).status_code == 404


def test_admin_routes_require_admin(client, user_headers):
    assert client.get("/api/admin/users", headers=user_headers).status_code == 403
    assert client.get("/api/admin/users").status_code == 401


def test_replacing_image_url_removes_old_image(
    client, admin_headers, make_product, storage
):
    product = make_product()
    new_url = HOSTED_IMAGE_URL.replace("img.png", "new.png")

    unchanged = client.put(
        f"/api/admin/products/{product.id}",
        json={"name": "Renamed Ring"},
        headers=admin_headers,
    )
    assert unchanged.status_code == 200
    storage["delete"].assert_not_called()

    response = client.put(
        f"/api/admin/products/{product.id}",
        json={"imageUrl": new_url},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["product"]["imageUrl"] == new_url
    storage["delete"].assert_called_once_with(HOSTED_IMAGE_URL)
