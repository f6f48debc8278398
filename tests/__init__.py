"""
Budget-Mate API test suite.

- test_auth.py: signup, login and profile
- test_core.py: amount rounding shared by every money field
- test_linkage.py: link planning between subscriptions and savings expenses
- test_subscriptions.py: subscription API, including savings plan linkage
- test_subscription_summary.py: monthly cost parsing and aggregates
- test_savings.py: incomes, savings expenses, budget and summary
- test_budgets.py: budget CRUD with spending
- test_expenses.py: expense CRUD, filters and CSV import
- test_dashboard.py: dashboard figures
- test_analytics.py: yearly and monthly expense analytics

Run all tests:
    pytest tests/
"""
