"""
Test suite for savings plan routes.
Tests cover incomes, savings expenses, the monthly budget and the summary.
"""

from components.savings import schemas
from components.savings.summary import build_summary, savings_alerts


def income(amount, source="Salary"):
    return schemas.Income(id=1, source=source, amount=amount, created_at="2024-01-01T00:00:00")


def expense(per_month, category="Rent"):
    return schemas.SavingsExpense(id=1, category=category, per_month=per_month, created_at="2024-01-01T00:00:00")


class TestBuildSummary:
    """Savings arithmetic."""

    def test_monthly_savings(self):
        summary = build_summary([income(50000), income(5000, "Freelance")], [expense(15000), expense(499)], 20000)
        assert summary.income.total == 55000
        assert summary.expenses.monthly == 15499
        assert summary.expenses.yearly == 15499 * 12
        assert summary.monthly_savings == 55000 - 15499
        assert summary.alerts == []

    def test_alerts(self):
        alerts = savings_alerts(total_income=1000, monthly_expenses=1500, monthly_budget=1200)
        assert len(alerts) == 2
        assert "exceed your income" in alerts[0]
        assert "exceed your savings budget" in alerts[1]

    def test_no_alerts_without_income_or_budget(self):
        assert savings_alerts(0, 500, 0) == []

    def test_per_year_is_computed(self):
        assert expense(100).model_dump(by_alias=True)["perYear"] == 1200


class TestIncomeRoutes:
    """Income CRUD."""

    def test_crud(self, client, auth_headers):
        response = client.post("/api/savings/income", json={"source": "Salary", "amount": 40000}, headers=auth_headers)
        assert response.status_code == 201
        income_id = response.json()["data"]["income"]["id"]

        response = client.put(f"/api/savings/income/{income_id}", json={"amount": 45000}, headers=auth_headers)
        assert response.json()["data"]["income"]["amount"] == 45000

        incomes = client.get("/api/savings/income", headers=auth_headers).json()["data"]["incomes"]
        assert [item["amount"] for item in incomes] == [45000]

        assert client.delete(f"/api/savings/income/{income_id}", headers=auth_headers).status_code == 200
        assert client.get("/api/savings/income", headers=auth_headers).json()["data"]["incomes"] == []

    def test_invalid_source_is_rejected(self, client, auth_headers):
        response = client.post("/api/savings/income", json={"source": "Lottery", "amount": 1}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "source"

    def test_other_users_income_is_not_found(self, client, auth_headers, other_headers):
        response = client.post("/api/savings/income", json={"amount": 10}, headers=auth_headers)
        income_id = response.json()["data"]["income"]["id"]
        assert client.delete(f"/api/savings/income/{income_id}", headers=other_headers).status_code == 404


class TestSavingsExpenseRoutes:
    """Manually managed savings expenses."""

    def test_crud(self, client, auth_headers):
        response = client.post(
            "/api/savings/expenses", json={"category": "Rent", "perMonth": 15000}, headers=auth_headers
        )
        assert response.status_code == 201
        expense_id = response.json()["data"]["expense"]["id"]

        response = client.put(f"/api/savings/expenses/{expense_id}", json={"perMonth": 16000}, headers=auth_headers)
        assert response.json()["data"]["expense"]["perMonth"] == 16000
        assert response.json()["data"]["expense"]["category"] == "Rent"

        assert client.delete(f"/api/savings/expenses/{expense_id}", headers=auth_headers).status_code == 200
        assert client.get("/api/savings/expenses", headers=auth_headers).json()["data"]["expenses"] == []

    def test_subscription_managed_expense_is_protected(self, client, auth_headers):
        subscription = client.post("/api/subscriptions", json={
            "name": "Netflix",
            "plan": "499/month",
            "totalSpend": 499,
            "duration": "1 month",
            "recurringPayment": "Yes",
            "category": "Streaming",
            "linkToSavingsPlan": True,
            "monthlyAmount": 499,
        }, headers=auth_headers).json()["data"]["subscription"]
        expense_id = subscription["savingsExpenseId"]

        response = client.put(f"/api/savings/expenses/{expense_id}", json={"perMonth": 1}, headers=auth_headers)
        assert response.status_code == 400
        assert "Netflix" in response.json()["message"]
        assert client.delete(f"/api/savings/expenses/{expense_id}", headers=auth_headers).status_code == 400

        expenses = client.get("/api/savings/expenses", headers=auth_headers).json()["data"]["expenses"]
        assert expenses[0]["perMonth"] == 499


class TestSavingsBudgetAndSummary:
    """Monthly budget and the overall summary."""

    def test_budget_defaults_to_zero(self, client, auth_headers):
        response = client.get("/api/savings/budget", headers=auth_headers)
        assert response.json()["data"] == {"monthlyBudget": 0}

    def test_set_budget_twice_keeps_one_row(self, client, auth_headers):
        client.post("/api/savings/budget", json={"monthlyBudget": 20000}, headers=auth_headers)
        client.post("/api/savings/budget", json={"monthlyBudget": 25000}, headers=auth_headers)
        response = client.get("/api/savings/budget", headers=auth_headers)
        assert response.json()["data"]["monthlyBudget"] == 25000

    def test_summary_includes_subscription_expenses(self, client, auth_headers):
        client.post("/api/savings/income", json={"source": "Salary", "amount": 50000}, headers=auth_headers)
        client.post("/api/savings/expenses", json={"category": "Rent", "perMonth": 15000}, headers=auth_headers)
        client.post("/api/savings/budget", json={"monthlyBudget": 20000}, headers=auth_headers)
        client.post("/api/subscriptions", json={
            "name": "Gym",
            "plan": "1200/month",
            "totalSpend": 1200,
            "duration": "1 month",
            "recurringPayment": "Yes",
            "category": "Gym",
            "linkToSavingsPlan": True,
            "monthlyAmount": 1200,
        }, headers=auth_headers)

        data = client.get("/api/savings/summary", headers=auth_headers).json()["data"]
        assert data["income"]["total"] == 50000
        assert data["expenses"]["monthly"] == 16200
        assert data["budget"]["monthly"] == 20000
        assert data["monthlySavings"] == 50000 - 16200
        categories = {item["category"]: item["subscriptionManaged"] for item in data["expenses"]["breakdown"]}
        assert categories == {"Rent": False, "Healthcare": True}


class TestAmountPrecision:
    """Savings amounts are kept to the cent."""

    def test_per_month_is_rounded(self, client, auth_headers):
        response = client.post(
            "/api/savings/expenses", json={"category": "Rent", "perMonth": 1500.456}, headers=auth_headers
        )
        assert response.json()["data"]["expense"]["perMonth"] == 1500.46

    def test_oversized_budget_is_rejected(self, client, auth_headers):
        response = client.post("/api/savings/budget", json={"monthlyBudget": 1e12}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "monthlyBudget"
