"""Category counts, public provider directory and admin provider approval"""

import pytest

from app.domain.categories.service import CategoryService
from app.models import Category
from tests.conftest import auth_headers, make_admin, make_customer, make_provider


def test_seed_is_idempotent(db):
    assert db.query(Category).count() == 13
    assert CategoryService(db).seed() == 0
    assert db.query(Category).count() == 13


def test_counts_only_include_approved_providers(db):
    make_provider(db, email="a@example.com", category="plumbing")
    make_provider(db, email="b@example.com", category="plumbing")
    make_provider(db, email="c@example.com", category="plumbing", status="pending")
    make_provider(db, email="d@example.com", category="cleaning", status="rejected")

    counts = CategoryService(db).recompute_counts()
    assert counts["plumbing"] == 2
    assert counts["cleaning"] == 0
    assert counts["tutoring"] == 0


def test_reads_refresh_stale_counts(db):
    category = db.query(Category).filter(Category.slug == "electrical").one()
    category.provider_count = 42
    db.commit()

    make_provider(db, email="e@example.com", category="electrical")
    assert CategoryService(db).by_slug("electrical").provider_count == 1


async def test_category_endpoints(client, db):
    make_provider(db, email="a@example.com", category="cleaning")

    response = await client.get("/api/categories")
    assert response.status_code == 200
    by_slug = {c["slug"]: c for c in response.json()}
    assert by_slug["cleaning"]["providerCount"] == 1

    featured = (await client.get("/api/categories/featured")).json()
    assert len(featured) == 8
    assert featured[0]["slug"] == "cleaning"

    one = await client.get("/api/categories/slug/cleaning")
    assert one.json()["providerCount"] == 1
    assert (await client.get(f"/api/categories/{one.json()['id']}")).status_code == 200
    assert (await client.get("/api/categories/slug/astrology")).status_code == 404


async def test_public_provider_directory(client, db):
    make_provider(db, email="a@example.com", name="Cheap", rate=200, rating=4.0)
    make_provider(db, email="b@example.com", name="Top", rate=900, rating=4.9)
    make_provider(db, email="c@example.com", name="Hidden", status="pending")

    response = await client.get("/api/providers")
    assert response.status_code == 200
    names = [p["name"] for p in response.json()["providers"]]
    assert names == ["Top", "Cheap"]

    by_rate = (await client.get("/api/providers?sort=rate")).json()["providers"]
    assert [p["name"] for p in by_rate] == ["Cheap", "Top"]

    filtered = (await client.get("/api/providers?minRating=4.5")).json()
    assert filtered["pagination"]["totalCount"] == 1

    assert (await client.get("/api/providers?sort=cheapest")).status_code == 400


async def test_provider_detail_hides_unapproved(client, db):
    approved = make_provider(db, email="a@example.com")
    pending = make_provider(db, email="b@example.com", status="pending")

    response = await client.get(f"/api/providers/{approved.id}")
    assert response.status_code == 200
    assert response.json()["category"]["slug"] == "plumbing"
    assert (await client.get(f"/api/providers/{pending.id}")).status_code == 404


async def test_providers_by_category(client, db):
    make_provider(db, email="a@example.com", category="tutoring")
    response = await client.get("/api/providers/category/tutoring")
    assert response.status_code == 200
    assert response.json()["category"]["providerCount"] == 1
    assert len(response.json()["providers"]) == 1
    assert (await client.get("/api/providers/category/astrology")).status_code == 404


async def test_provider_updates_own_rate_and_category(client, db):
    provider = make_provider(db, email="a@example.com", category="plumbing")
    assert CategoryService(db).recompute_counts(["plumbing", "carpentry"]) == {"plumbing": 1, "carpentry": 0}

    response = await client.patch(
        "/api/providers/me",
        json={"hourlyRate": 750, "serviceCategory": "carpentry"},
        headers=auth_headers(provider),
    )
    assert response.status_code == 200, response.text
    assert response.json()["user"]["providerProfile"]["hourlyRate"] == 750

    counts = {c.slug: c.provider_count for c in db.query(Category).all()}
    assert counts["plumbing"] == 0
    assert counts["carpentry"] == 1


class TestAdminProviderApproval:
    @pytest.fixture
    def admin(self, db):
        return make_admin(db)

    async def test_approve_updates_count_and_emails_provider(self, client, db, admin, provider_decisions):
        applicant = make_provider(db, email="new@example.com", category="painting", status="pending")

        response = await client.put(
            f"/api/admin/providers/{applicant.id}/status",
            json={"status": "approved"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 200, response.text
        profile = response.json()["provider"]["providerProfile"]
        assert profile["status"] == "approved"
        assert profile["approvedBy"] == admin.id
        assert profile["rejectionReason"] is None

        painting = db.query(Category).filter(Category.slug == "painting").one()
        db.refresh(painting)
        assert painting.provider_count == 1
        assert provider_decisions == [
            {"to": "new@example.com", "name": applicant.name, "status": "approved", "reason": None}
        ]

    async def test_reject_clears_approval_metadata(self, client, db, admin):
        provider = make_provider(db, email="old@example.com", category="painting", status="pending")
        await client.put(
            f"/api/admin/providers/{provider.id}/status",
            json={"status": "approved"},
            headers=auth_headers(admin),
        )
        painting = db.query(Category).filter(Category.slug == "painting").one()
        db.refresh(painting)
        assert painting.provider_count == 1

        response = await client.put(
            f"/api/admin/providers/{provider.id}/status",
            json={"status": "rejected", "rejectionReason": "Documents expired"},
            headers=auth_headers(admin),
        )
        profile = response.json()["provider"]["providerProfile"]
        assert profile["status"] == "rejected"
        assert profile["rejectionReason"] == "Documents expired"
        assert profile["approvedAt"] is None
        assert profile["approvedBy"] is None

        db.refresh(painting)
        assert painting.provider_count == 0

    async def test_invalid_status(self, client, db, admin):
        provider = make_provider(db, email="x@example.com", status="pending")
        response = await client.put(
            f"/api/admin/providers/{provider.id}/status",
            json={"status": "unapproved"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 400

    async def test_admin_only(self, client, db):
        customer = make_customer(db)
        response = await client.get("/api/admin/providers", headers=auth_headers(customer))
        assert response.status_code == 403

    async def test_lists_and_dashboard(self, client, db, admin):
        make_customer(db)
        make_provider(db, email="p1@example.com", status="pending")
        make_provider(db, email="p2@example.com")

        pending = (await client.get("/api/admin/providers?status=pending", headers=auth_headers(admin))).json()
        assert pending["pagination"]["totalCount"] == 1

        users = (await client.get("/api/admin/users?role=provider", headers=auth_headers(admin))).json()
        assert users["pagination"]["totalCount"] == 2

        dashboard = (await client.get("/api/admin/dashboard", headers=auth_headers(admin))).json()
        assert dashboard["stats"] == {
            "totalCustomers": 1,
            "totalProviders": 2,
            "pendingProviders": 1,
            "approvedProviders": 1,
        }
        assert len(dashboard["recentApplications"]) == 2
