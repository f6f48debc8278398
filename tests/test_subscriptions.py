"""
Test suite for subscription routes.
Tests cover CRUD, soft delete, listing and the savings expense kept in step
with linked subscriptions.
"""

import pytest
from sqlalchemy.exc import OperationalError

from components.savings.repository import SavingsRepository
from components.subscription.repository import SubscriptionRepository

NETFLIX = {
    "name": "Netflix",
    "plan": "Premium ₹499/month",
    "totalSpend": 499,
    "duration": "1 month",
    "recurringPayment": "Yes",
    "category": "Streaming",
    "linkToSavingsPlan": True,
    "monthlyAmount": 499,
}

SPOTIFY = {
    "name": "Spotify",
    "plan": "Individual 199/month",
    "totalSpend": 199,
    "duration": "1 month",
    "recurringPayment": "No",
    "category": "Music",
}


def create(client, headers, base=None, **overrides):
    response = client.post("/api/subscriptions", json={**(base or NETFLIX), **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]["subscription"]


def savings_expenses(client, headers):
    response = client.get("/api/savings/expenses", headers=headers)
    assert response.status_code == 200
    return response.json()["data"]["expenses"]


class TestCreateSubscription:
    """Creating subscriptions."""

    def test_linked_subscription_creates_savings_expense(self, client, auth_headers):
        subscription = create(client, auth_headers)

        expenses = savings_expenses(client, auth_headers)
        assert len(expenses) == 1
        assert expenses[0]["id"] == subscription["savingsExpenseId"]
        assert expenses[0]["category"] == "Entertainment"
        assert expenses[0]["perMonth"] == 499
        assert expenses[0]["perYear"] == 499 * 12
        assert expenses[0]["subscriptionManaged"] is True

    def test_unlinked_subscription_creates_nothing(self, client, auth_headers):
        subscription = create(client, auth_headers, SPOTIFY, linkToSavingsPlan=False, monthlyAmount=0)
        assert subscription["savingsExpenseId"] is None
        assert savings_expenses(client, auth_headers) == []

    def test_linked_without_amount_creates_nothing(self, client, auth_headers):
        subscription = create(client, auth_headers, monthlyAmount=0)
        assert subscription["savingsExpenseId"] is None
        assert savings_expenses(client, auth_headers) == []

    def test_defaults(self, client, auth_headers):
        response = client.post("/api/subscriptions", json=SPOTIFY, headers=auth_headers)
        subscription = response.json()["data"]["subscription"]
        assert subscription["color"] == "blue"
        assert subscription["linkToSavingsPlan"] is False
        assert subscription["monthlyAmount"] == 0
        assert subscription["isActive"] is True

    def test_missing_required_field_is_rejected(self, client, auth_headers):
        payload = {key: value for key, value in NETFLIX.items() if key != "name"}
        response = client.post("/api/subscriptions", json=payload, headers=auth_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation errors"
        assert "name" in [error["field"] for error in body["errors"]]
        assert savings_expenses(client, auth_headers) == []

    def test_blank_name_is_rejected(self, client, auth_headers):
        response = client.post("/api/subscriptions", json={**NETFLIX, "name": "   "}, headers=auth_headers)
        assert response.status_code == 400

    def test_requires_authentication(self, client):
        response = client.post("/api/subscriptions", json=NETFLIX)
        assert response.status_code == 401
        assert response.json()["success"] is False


class TestUpdateSubscription:
    """Updating subscriptions and their savings expense."""

    def update(self, client, headers, subscription_id, **changes):
        response = client.put(f"/api/subscriptions/{subscription_id}", json=changes, headers=headers)
        assert response.status_code == 200, response.text
        return response.json()["data"]["subscription"]

    def test_linking_creates_expense(self, client, auth_headers):
        subscription = create(client, auth_headers, SPOTIFY)
        updated = self.update(client, auth_headers, subscription["id"], linkToSavingsPlan=True, monthlyAmount=199)

        expenses = savings_expenses(client, auth_headers)
        assert [expense["id"] for expense in expenses] == [updated["savingsExpenseId"]]
        assert expenses[0]["category"] == "Entertainment"

    def test_amount_change_updates_expense_in_place(self, client, auth_headers):
        subscription = create(client, auth_headers)
        updated = self.update(client, auth_headers, subscription["id"], monthlyAmount=649)

        assert updated["savingsExpenseId"] == subscription["savingsExpenseId"]
        expenses = savings_expenses(client, auth_headers)
        assert len(expenses) == 1
        assert expenses[0]["perMonth"] == 649

    def test_category_change_updates_expense_category(self, client, auth_headers):
        subscription = create(client, auth_headers)
        self.update(client, auth_headers, subscription["id"], category="Gym")
        assert savings_expenses(client, auth_headers)[0]["category"] == "Healthcare"

    def test_unlinking_deletes_expense(self, client, auth_headers):
        subscription = create(client, auth_headers)
        updated = self.update(client, auth_headers, subscription["id"], linkToSavingsPlan=False)

        assert updated["savingsExpenseId"] is None
        assert savings_expenses(client, auth_headers) == []

    def test_zero_amount_deletes_expense(self, client, auth_headers):
        subscription = create(client, auth_headers)
        updated = self.update(client, auth_headers, subscription["id"], monthlyAmount=0)
        assert updated["savingsExpenseId"] is None
        assert savings_expenses(client, auth_headers) == []

    def test_unrelated_change_leaves_expense(self, client, auth_headers):
        subscription = create(client, auth_headers)
        updated = self.update(client, auth_headers, subscription["id"], name="Netflix Family", color="red")

        assert updated["name"] == "Netflix Family"
        assert updated["savingsExpenseId"] == subscription["savingsExpenseId"]
        assert savings_expenses(client, auth_headers)[0]["perMonth"] == 499

    def test_repeated_update_is_idempotent(self, client, auth_headers):
        subscription = create(client, auth_headers)
        changes = {"linkToSavingsPlan": True, "monthlyAmount": 550}
        first = self.update(client, auth_headers, subscription["id"], **changes)
        second = self.update(client, auth_headers, subscription["id"], **changes)

        assert first["savingsExpenseId"] == second["savingsExpenseId"]
        expenses = savings_expenses(client, auth_headers)
        assert len(expenses) == 1
        assert expenses[0]["perMonth"] == 550

    def test_null_required_field_is_rejected(self, client, auth_headers):
        subscription = create(client, auth_headers)
        response = client.put(
            f"/api/subscriptions/{subscription['id']}", json={"name": None}, headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "name"

    def test_other_users_subscription_is_not_found(self, client, auth_headers, other_headers):
        subscription = create(client, auth_headers)
        response = client.put(
            f"/api/subscriptions/{subscription['id']}", json={"monthlyAmount": 1}, headers=other_headers
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Subscription not found"
        assert savings_expenses(client, auth_headers)[0]["perMonth"] == 499


class TestDeleteSubscription:
    """Soft deleting subscriptions."""

    def test_delete_removes_expense_and_hides_subscription(self, client, auth_headers):
        subscription = create(client, auth_headers)
        response = client.delete(f"/api/subscriptions/{subscription['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert savings_expenses(client, auth_headers) == []
        assert client.get(f"/api/subscriptions/{subscription['id']}", headers=auth_headers).status_code == 404
        listing = client.get("/api/subscriptions", headers=auth_headers).json()["data"]
        assert listing["subscriptions"] == []

    def test_deleted_subscription_cannot_be_updated_or_deleted_again(self, client, auth_headers):
        subscription = create(client, auth_headers)
        client.delete(f"/api/subscriptions/{subscription['id']}", headers=auth_headers)

        url = f"/api/subscriptions/{subscription['id']}"
        assert client.put(url, json={"name": "Again"}, headers=auth_headers).status_code == 404
        assert client.delete(url, headers=auth_headers).status_code == 404

    def test_delete_unlinked_subscription(self, client, auth_headers):
        subscription = create(client, auth_headers, SPOTIFY)
        response = client.delete(f"/api/subscriptions/{subscription['id']}", headers=auth_headers)
        assert response.status_code == 200


class TestListSubscriptions:
    """Listing, filtering and paging."""

    def test_only_own_subscriptions_are_listed(self, client, auth_headers, other_headers):
        create(client, auth_headers)
        create(client, other_headers, SPOTIFY)

        data = client.get("/api/subscriptions", headers=auth_headers).json()["data"]
        assert [sub["name"] for sub in data["subscriptions"]] == ["Netflix"]
        assert data["pagination"]["totalItems"] == 1

    def test_pagination(self, client, auth_headers):
        for index in range(3):
            create(client, auth_headers, name=f"Service {index}", linkToSavingsPlan=False)

        data = client.get("/api/subscriptions?page=2&limit=2", headers=auth_headers).json()["data"]
        assert len(data["subscriptions"]) == 1
        assert data["pagination"] == {
            "currentPage": 2, "totalPages": 2, "totalItems": 3, "itemsPerPage": 2,
        }

    @pytest.mark.parametrize("query, expected", [
        ("search=net", ["Netflix"]),
        ("category=Music", ["Spotify"]),
        ("recurringPayment=No", ["Spotify"]),
        ("category=All&sortBy=name&sortOrder=asc", ["Netflix", "Spotify"]),
    ])
    def test_filters(self, client, auth_headers, query, expected):
        create(client, auth_headers)
        create(client, auth_headers, SPOTIFY)

        data = client.get(f"/api/subscriptions?{query}", headers=auth_headers).json()["data"]
        assert [sub["name"] for sub in data["subscriptions"]] == expected


class TestSubscriptionSummary:
    """Summary overview over active subscriptions."""

    def test_summary(self, client, auth_headers):
        create(client, auth_headers)
        create(client, auth_headers, SPOTIFY)
        deleted = create(client, auth_headers, name="Gym", plan="999/month", totalSpend=999)
        client.delete(f"/api/subscriptions/{deleted['id']}", headers=auth_headers)

        data = client.get("/api/subscriptions/summary/overview", headers=auth_headers).json()["data"]
        assert data["overview"] == {
            "totalSpend": 698,
            "subscriptionCount": 2,
            "recurringCount": 1,
            "monthlyRecurringCost": 499,
        }
        assert data["categoryBreakdown"]["Music"] == {"totalSpend": 199, "count": 1}


class TestAmountPrecision:
    """Amounts are kept to the cent, as the store holds them."""

    def test_sub_cent_amount_does_not_link(self, client, auth_headers):
        subscription = create(client, auth_headers, monthlyAmount=0.001)
        assert subscription["monthlyAmount"] == 0
        assert subscription["savingsExpenseId"] is None
        assert savings_expenses(client, auth_headers) == []

    def test_sub_cent_update_unlinks(self, client, auth_headers):
        subscription = create(client, auth_headers)
        response = client.put(
            f"/api/subscriptions/{subscription['id']}", json={"monthlyAmount": 0.004}, headers=auth_headers
        )
        assert response.json()["data"]["subscription"]["savingsExpenseId"] is None
        assert savings_expenses(client, auth_headers) == []

    def test_amounts_are_rounded_to_cents(self, client, auth_headers):
        subscription = create(client, auth_headers, monthlyAmount=10.005, totalSpend=99.999)
        assert subscription["monthlyAmount"] == 10.01
        assert subscription["totalSpend"] == 100
        assert savings_expenses(client, auth_headers)[0]["perMonth"] == 10.01

    @pytest.mark.parametrize("field", ["monthlyAmount", "totalSpend"])
    def test_amount_beyond_store_range_is_rejected(self, client, auth_headers, field):
        response = client.post(
            "/api/subscriptions", json={**NETFLIX, field: 10_000_000_000}, headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == field
        assert savings_expenses(client, auth_headers) == []


async def failing(*args, **kwargs):
    raise OperationalError("statement", {}, Exception("store unavailable"))


class TestStoreFailures:
    """A store error leaves the subscription and its expense as they were."""

    def test_failed_expense_create_writes_nothing(self, client, auth_headers, monkeypatch):
        monkeypatch.setattr(SavingsRepository, "create_expense", failing)
        response = client.post("/api/subscriptions", json=NETFLIX, headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["success"] is False
        monkeypatch.undo()
        assert client.get("/api/subscriptions", headers=auth_headers).json()["data"]["subscriptions"] == []
        assert savings_expenses(client, auth_headers) == []

    def test_failed_subscription_write_leaves_no_orphan_expense(self, client, auth_headers, monkeypatch):
        monkeypatch.setattr(SubscriptionRepository, "add", failing)
        response = client.post("/api/subscriptions", json=NETFLIX, headers=auth_headers)

        assert response.status_code == 500
        monkeypatch.undo()
        assert client.get("/api/subscriptions", headers=auth_headers).json()["data"]["subscriptions"] == []
        assert savings_expenses(client, auth_headers) == []

    def test_failed_expense_delete_keeps_subscription_linked(self, client, auth_headers, monkeypatch):
        subscription = create(client, auth_headers)
        monkeypatch.setattr(SavingsRepository, "delete_expense", failing)
        response = client.delete(f"/api/subscriptions/{subscription['id']}", headers=auth_headers)

        assert response.status_code == 500
        monkeypatch.undo()
        current = client.get(f"/api/subscriptions/{subscription['id']}", headers=auth_headers)
        assert current.status_code == 200
        assert current.json()["data"]["subscription"]["isActive"] is True
        assert current.json()["data"]["subscription"]["savingsExpenseId"] == subscription["savingsExpenseId"]
        assert [e["id"] for e in savings_expenses(client, auth_headers)] == [subscription["savingsExpenseId"]]

    def test_failed_deactivate_restores_expense(self, client, auth_headers, monkeypatch):
        subscription = create(client, auth_headers)
        monkeypatch.setattr(SubscriptionRepository, "deactivate", failing)
        response = client.delete(f"/api/subscriptions/{subscription['id']}", headers=auth_headers)

        assert response.status_code == 500
        monkeypatch.undo()
        assert client.get(f"/api/subscriptions/{subscription['id']}", headers=auth_headers).status_code == 200
        assert [e["id"] for e in savings_expenses(client, auth_headers)] == [subscription["savingsExpenseId"]]

    def test_failed_unlink_keeps_expense(self, client, auth_headers, monkeypatch):
        subscription = create(client, auth_headers)
        monkeypatch.setattr(SavingsRepository, "delete_expense", failing)
        response = client.put(
            f"/api/subscriptions/{subscription['id']}", json={"linkToSavingsPlan": False}, headers=auth_headers
        )

        assert response.status_code == 500
        monkeypatch.undo()
        current = client.get(f"/api/subscriptions/{subscription['id']}", headers=auth_headers).json()
        assert current["data"]["subscription"]["linkToSavingsPlan"] is True
        assert savings_expenses(client, auth_headers)[0]["perMonth"] == 499
