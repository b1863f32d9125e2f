"""
API tests for product listings, trash and permanent deletion
"""
from marketplace.domain.product import ProductStatus


class TestPermanentDelete:
    """DELETE /api/v1/products/{id}"""

    def test_owner_deletes_trashed_product(self, client, product_repo, seller, auth_header):
        product = product_repo.add(seller_id=int(seller.id), status=ProductStatus.SOFT_DELETED)

        response = client.delete(f"/api/v1/products/{product.id}", headers=auth_header(seller))

        assert response.status_code == 200
        assert response.json() == {"message": "Product permanently deleted successfully"}
        assert product_repo.find_by_id(product.id) is None
        assert client.get(f"/api/v1/products/{product.id}").status_code == 404

    def test_other_seller_cannot_delete(self, client, product_repo, seller, other_seller, auth_header):
        product = product_repo.add(seller_id=int(seller.id), status=ProductStatus.SOFT_DELETED)

        response = client.delete(f"/api/v1/products/{product.id}", headers=auth_header(other_seller))

        assert response.status_code == 403
        assert response.json()["message"] == "You can only delete your own products"
        assert product_repo.find_by_id(product.id) == product

    def test_other_seller_denied_then_owner_succeeds(self, client, product_repo, seller,
                                                    other_seller, auth_header):
        product = product_repo.add(seller_id=int(seller.id), status=ProductStatus.SOFT_DELETED)

        denied = client.delete(f"/api/v1/products/{product.id}", headers=auth_header(other_seller))
        allowed = client.delete(f"/api/v1/products/{product.id}", headers=auth_header(seller))

        assert denied.status_code == 403
        assert allowed.status_code == 200
        assert product_repo.find_by_id(product.id) is None

    def test_admin_deletes_any_trashed_product(self, client, product_repo, seller, admin, auth_header):
        product = product_repo.add(seller_id=int(seller.id), status=ProductStatus.SOFT_DELETED)

        response = client.delete(f"/api/v1/products/{product.id}", headers=auth_header(admin))

        assert response.status_code == 200
        assert product_repo.find_by_id(product.id) is None

    def test_active_product_must_be_trashed_first(self, client, product_repo, seller, auth_header):
        product = product_repo.add(seller_id=int(seller.id))

        response = client.delete(f"/api/v1/products/{product.id}", headers=auth_header(seller))

        assert response.status_code == 403
        assert response.json() == {
            "status": "error",
            "message": "Product must be in trash before permanent deletion",
        }
        assert product_repo.find_by_id(product.id) == product

    def test_trash_check_comes_before_ownership(self, client, product_repo, seller, other_seller, auth_header):
        product = product_repo.add(seller_id=int(seller.id))

        response = client.delete(f"/api/v1/products/{product.id}", headers=auth_header(other_seller))

        assert response.status_code == 403
        assert response.json()["message"] == "Product must be in trash before permanent deletion"

    def test_missing_product_is_404(self, client, seller, auth_header):
        response = client.delete("/api/v1/products/999", headers=auth_header(seller))

        assert response.status_code == 404
        assert response.json()["message"] == "Product not found"

    def test_no_principal_is_403_and_nothing_changes(self, client, product_repo, seller):
        product = product_repo.add(seller_id=int(seller.id), status=ProductStatus.SOFT_DELETED)

        response = client.delete(f"/api/v1/products/{product.id}")

        assert response.status_code == 403
        assert response.json()["message"] == "Authentication required"
        assert product_repo.find_by_id(product.id) == product

    def test_invalid_token_counts_as_no_principal(self, client, product_repo, seller):
        product = product_repo.add(seller_id=int(seller.id), status=ProductStatus.SOFT_DELETED)

        response = client.delete(
            f"/api/v1/products/{product.id}",
            headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 403
        assert product_repo.find_by_id(product.id) is not None

    def test_buyer_cannot_delete(self, client, product_repo, seller, buyer, auth_header):
        product = product_repo.add(seller_id=int(seller.id), status=ProductStatus.SOFT_DELETED)

        response = client.delete(f"/api/v1/products/{product.id}", headers=auth_header(buyer))

        assert response.status_code == 403
        assert product_repo.find_by_id(product.id) is not None


class TestTrashLifecycle:

    def test_trash_then_restore(self, client, product_repo, seller, auth_header):
        product = product_repo.add(seller_id=int(seller.id))

        trashed = client.patch(f"/api/v1/products/{product.id}/trash", headers=auth_header(seller))
        assert trashed.status_code == 200
        assert trashed.json()["data"]["is_deleted"] is True
        assert client.get(f"/api/v1/products/{product.id}").status_code == 404

        restored = client.patch(f"/api/v1/products/{product.id}/restore", headers=auth_header(seller))
        assert restored.status_code == 200
        assert restored.json()["data"]["status"] == "active"
        assert client.get(f"/api/v1/products/{product.id}").status_code == 200

    def test_trash_twice_is_bad_request(self, client, product_repo, seller, auth_header):
        product = product_repo.add(seller_id=int(seller.id), status=ProductStatus.SOFT_DELETED)

        response = client.patch(f"/api/v1/products/{product.id}/trash", headers=auth_header(seller))

        assert response.status_code == 400
        assert response.json()["message"] == "Product is already in trash"

    def test_restore_active_is_bad_request(self, client, product_repo, seller, auth_header):
        product = product_repo.add(seller_id=int(seller.id))

        response = client.patch(f"/api/v1/products/{product.id}/restore", headers=auth_header(seller))

        assert response.status_code == 400

    def test_non_owner_cannot_trash(self, client, product_repo, seller, other_seller, auth_header):
        product = product_repo.add(seller_id=int(seller.id))

        response = client.patch(f"/api/v1/products/{product.id}/trash", headers=auth_header(other_seller))

        assert response.status_code == 403
        assert product_repo.find_by_id(product.id).status == ProductStatus.ACTIVE

    def test_trash_listing_is_scoped_to_seller(self, client, product_repo, seller, other_seller,
                                               admin, auth_header):
        product_repo.add(seller_id=int(seller.id), status=ProductStatus.SOFT_DELETED)
        product_repo.add(seller_id=int(other_seller.id), status=ProductStatus.SOFT_DELETED)
        product_repo.add(seller_id=int(seller.id))

        own = client.get("/api/v1/products/trash", headers=auth_header(seller)).json()
        everything = client.get("/api/v1/products/trash", headers=auth_header(admin)).json()

        assert own["total"] == 1
        assert everything["total"] == 2


class TestListings:

    def test_list_only_active_products(self, client, product_repo, seller):
        product_repo.add(seller_id=int(seller.id), name="Lamp")
        product_repo.add(seller_id=int(seller.id), name="Chair", status=ProductStatus.SOFT_DELETED)

        response = client.get("/api/v1/products/")

        body = response.json()
        assert response.status_code == 200
        assert body["total"] == 1
        assert body["data"][0]["name"] == "Lamp"
        assert body["data"][0]["price"] == 19.99

    def test_seller_creates_product(self, client, product_repo, seller, auth_header):
        response = client.post(
            "/api/v1/products/",
            json={"name": "Desk", "price": "120.00", "stock": 3},
            headers=auth_header(seller)
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["seller_id"] == int(seller.id)
        assert data["status"] == "active"

    def test_buyer_cannot_create_product(self, client, buyer, auth_header):
        response = client.post(
            "/api/v1/products/",
            json={"name": "Desk", "price": "120.00"},
            headers=auth_header(buyer)
        )

        assert response.status_code == 403

    def test_invalid_product_payload_lists_issues(self, client, seller, auth_header):
        response = client.post(
            "/api/v1/products/",
            json={"name": "", "price": "-1"},
            headers=auth_header(seller)
        )

        assert response.status_code == 400
        paths = [issue["path"] for issue in response.json()["errors"]]
        assert ["name"] in paths
        assert ["price"] in paths
