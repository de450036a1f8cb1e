"""
Tests for budget use cases and the progress view
"""
from datetime import datetime
from decimal import Decimal

import pytest

from budgetbot.application.budgets import (
    UpsertBudgetUseCase, DeleteBudgetUseCase, BudgetValidationError, BudgetNotFoundError,
    build_budget_progress, list_budgets,
)
from budgetbot.application.transactions import CreateTransactionUseCase
from budgetbot.domain.budget_progress import Period, STATUS_EXCEEDED, STATUS_WARNING
from budgetbot.infrastructure.db.models import Budget


class TestUpsertBudget:
    def test_creates_budget(self, db_session, sample_account_id):
        budget = UpsertBudgetUseCase(db_session).execute(sample_account_id, 3, 2026, "  Food ", "5000")

        assert budget.id > 0
        assert budget.category == "Food"
        assert budget.limit_amount == Decimal("5000")
        assert (budget.month, budget.year) == (3, 2026)

    def test_same_key_updates_limit(self, db_session, sample_account_id):
        uc = UpsertBudgetUseCase(db_session)
        first = uc.execute(sample_account_id, 3, 2026, "Food", 5000)
        second = uc.execute(sample_account_id, 3, 2026, "Food", 6500)

        assert first.id == second.id
        assert second.limit_amount == Decimal("6500")
        assert db_session.query(Budget).count() == 1

    def test_different_month_or_owner_is_new_budget(self, db_session, sample_account_id):
        uc = UpsertBudgetUseCase(db_session)
        uc.execute(sample_account_id, 3, 2026, "Food", 5000)
        uc.execute(sample_account_id, 4, 2026, "Food", 5000)
        uc.execute(2, 3, 2026, "Food", 5000)

        assert db_session.query(Budget).count() == 3

    def test_zero_limit_allowed(self, db_session, sample_account_id):
        budget = UpsertBudgetUseCase(db_session).execute(sample_account_id, 3, 2026, "Shopping", 0)
        assert budget.limit_amount == 0

    @pytest.mark.parametrize("month, year, category, limit, message", [
        (3, 2026, "   ", 100, "Category is required"),
        (3, 2026, "Food", -1, "Limit must be a valid number"),
        (3, 2026, "Food", "abc", "Limit must be a valid number"),
        (0, 2026, "Food", 100, "Month and Year are required"),
        (3, None, "Food", 100, "Month and Year are required"),
        (13, 2026, "Food", 100, "Month must be between 1 and 12"),
        ("March", 2026, "Food", 100, "Month and Year must be numbers"),
        (3, "next", "Food", 100, "Month and Year must be numbers"),
    ])
    def test_validation(self, db_session, sample_account_id, month, year, category, limit, message):
        with pytest.raises(BudgetValidationError, match=message):
            UpsertBudgetUseCase(db_session).execute(sample_account_id, month, year, category, limit)


class TestListAndDelete:
    def test_list_filters_and_sorts(self, db_session, sample_account_id):
        uc = UpsertBudgetUseCase(db_session)
        uc.execute(sample_account_id, 3, 2026, "Travel", 100)
        uc.execute(sample_account_id, 3, 2026, "Food", 100)
        uc.execute(sample_account_id, 4, 2026, "Rent", 100)
        uc.execute(2, 3, 2026, "Health", 100)

        assert [b.category for b in list_budgets(db_session, sample_account_id)] == ["Food", "Rent", "Travel"]
        assert [b.category for b in list_budgets(db_session, sample_account_id, month=3, year=2026)] == ["Food", "Travel"]

    def test_delete_own(self, db_session, sample_account_id):
        budget = UpsertBudgetUseCase(db_session).execute(sample_account_id, 3, 2026, "Food", 100)

        DeleteBudgetUseCase(db_session).execute(sample_account_id, budget.id)

        assert db_session.query(Budget).count() == 0

    def test_delete_foreign_is_not_found(self, db_session, sample_account_id):
        budget = UpsertBudgetUseCase(db_session).execute(sample_account_id, 3, 2026, "Food", 100)

        with pytest.raises(BudgetNotFoundError):
            DeleteBudgetUseCase(db_session).execute(2, budget.id)
        assert db_session.query(Budget).count() == 1


class TestBuildBudgetProgress:
    def test_month_view(self, db_session, tz, sample_account_id):
        tx_uc = CreateTransactionUseCase(db_session, tz=tz)
        tx_uc.execute(sample_account_id, "expense", "Zomato", 300, datetime(2026, 3, 3, 13, 0))
        tx_uc.execute(sample_account_id, "expense", "Rent payment", 1200, datetime(2026, 3, 1, 0, 0))
        tx_uc.execute(sample_account_id, "income", "Salary", 50000, datetime(2026, 3, 1, 9, 0))
        # next month and other user are out of scope
        tx_uc.execute(sample_account_id, "expense", "Zomato", 999, datetime(2026, 4, 1, 0, 0))
        tx_uc.execute(2, "expense", "Zomato", 999, datetime(2026, 3, 3, 13, 0))

        budget_uc = UpsertBudgetUseCase(db_session)
        budget_uc.execute(sample_account_id, 3, 2026, "Food", 250)
        budget_uc.execute(sample_account_id, 3, 2026, "Rent", 1500)
        budget_uc.execute(sample_account_id, 3, 2026, "Shopping", 0)

        rows = build_budget_progress(db_session, sample_account_id, Period(2026, 3, tz))

        assert [(r.category, r.status) for r in rows] == [
            ("Food", STATUS_EXCEEDED),
            ("Rent", STATUS_WARNING),
        ]
        assert rows[0].spent_amount == Decimal("300")
        assert rows[0].percent == Decimal("120")
        assert rows[1].percent == Decimal("80")
