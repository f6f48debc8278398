"""Savings plan arithmetic."""

from typing import List, Sequence

from components.savings import schemas


def savings_alerts(total_income: float, monthly_expenses: float, monthly_budget: float) -> List[str]:
    alerts = []
    if total_income > 0 and monthly_expenses > total_income:
        alerts.append(
            f"Monthly expenses ({monthly_expenses:.2f}) exceed your income ({total_income:.2f})"
        )
    if monthly_budget > 0 and monthly_expenses > monthly_budget:
        alerts.append(
            f"Monthly expenses ({monthly_expenses:.2f}) exceed your savings budget ({monthly_budget:.2f})"
        )
    return alerts


def build_summary(
    incomes: Sequence[schemas.Income],
    expenses: Sequence[schemas.SavingsExpense],
    monthly_budget: float,
) -> schemas.SavingsSummary:
    """Income minus recurring outflows, with the plan's budget alongside."""
    total_income = sum(income.amount for income in incomes)
    monthly_expenses = sum(expense.per_month for expense in expenses)
    return schemas.SavingsSummary(
        income=schemas.IncomeTotals(total=total_income, breakdown=list(incomes)),
        expenses=schemas.ExpenseTotals(
            monthly=monthly_expenses,
            yearly=monthly_expenses * 12,
            breakdown=list(expenses),
        ),
        budget=schemas.BudgetTotals(monthly=monthly_budget),
        monthly_savings=total_income - monthly_expenses,
        alerts=savings_alerts(total_income, monthly_expenses, monthly_budget),
    )
