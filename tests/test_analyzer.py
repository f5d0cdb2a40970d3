from datetime import datetime, timezone

import pytest

from app.core.exceptions import StoreError
from app.db import dynamo
from app.utils.analyzer import FinanceAnalyzer, aggregate_for_user, parse_date

sample_transactions = [
    {"category": "Income", "amount": 2000.0, "date": "2025-10-01T09:00:00+00:00"},
    {"category": "Food", "amount": 250.0, "date": "2025-10-03T12:00:00+00:00"},
    {"category": "Transport", "amount": -80.0, "date": "2025-10-05T12:00:00+00:00"},
    {"category": "Food", "amount": 150.0, "date": "2025-11-02T12:00:00Z"},
    {"category": "Shopping", "amount": 400.0, "date": "2025-11-04T12:00:00"},
    {"category": "Income", "amount": 1500.0, "date": "2025-11-15T09:00:00+00:00"},
    {"category": "Utilities", "amount": 120.5, "date": "2024-12-20T08:00:00+00:00"},
]


def test_income_total():
    analyzer = FinanceAnalyzer()
    assert analyzer.income_total(sample_transactions) == 3500.0


def test_expense_total_counts_magnitudes():
    analyzer = FinanceAnalyzer()
    # Transport was stored negative, it still adds 80 to spending
    assert analyzer.expense_total(sample_transactions) == 1000.5


def test_category_totals_sorted_descending():
    analyzer = FinanceAnalyzer()
    result = analyzer.category_totals(sample_transactions)
    assert [(item.category, item.total) for item in result] == [
        ("Food", 400.0),
        ("Shopping", 400.0),
        ("Utilities", 120.5),
        ("Transport", 80.0),
    ]


def test_category_totals_exclude_income():
    analyzer = FinanceAnalyzer()
    categories = {item.category for item in analyzer.category_totals(sample_transactions)}
    assert "Income" not in categories


def test_monthly_totals_chronological_and_split():
    analyzer = FinanceAnalyzer()
    result = analyzer.monthly_totals(sample_transactions)
    assert [(m.year, m.month, m.is_income, m.total) for m in result] == [
        (2024, 12, False, 120.5),
        (2025, 10, False, 330.0),
        (2025, 10, True, 2000.0),
        (2025, 11, False, 550.0),
        (2025, 11, True, 1500.0),
    ]


def test_category_totals_sum_to_expense_total():
    analyzer = FinanceAnalyzer()
    result = analyzer.aggregate(sample_transactions)
    assert sum(item.total for item in result.expenses_by_category) == pytest.approx(result.expenses)


def test_monthly_totals_sum_to_income_plus_expenses():
    analyzer = FinanceAnalyzer()
    result = analyzer.aggregate(sample_transactions)
    assert sum(m.total for m in result.monthly_data) == pytest.approx(result.income + result.expenses)


def test_empty_transactions():
    result = FinanceAnalyzer().aggregate([])
    assert result.to_dict() == {
        "income": 0,
        "expenses": 0,
        "expensesByCategory": [],
        "monthlyData": [],
    }
    assert result.top_category is None


def test_to_dict_uses_wire_names():
    result = FinanceAnalyzer().aggregate(sample_transactions[:2])
    data = result.to_dict()
    assert data["expensesByCategory"] == [{"category": "Food", "total": 250.0}]
    assert data["monthlyData"][0] == {"year": 2025, "month": 10, "isIncome": False, "total": 250.0}


def test_aggregate_for_user_reads_store(monkeypatch):
    monkeypatch.setattr(dynamo, "get_transactions_for_user", lambda user_id: sample_transactions[:3])
    result = aggregate_for_user("user-1")
    assert result.income == 2000.0
    assert result.expenses == 330.0


def test_aggregate_for_user_surfaces_store_failure(monkeypatch):
    def unreachable(user_id):
        raise StoreError("get_transactions_for_user failed")

    monkeypatch.setattr(dynamo, "get_transactions_for_user", unreachable)
    with pytest.raises(StoreError):
        aggregate_for_user("user-1")


def test_parse_date_normalizes_to_utc():
    assert parse_date("2024-03-01T01:00:00+05:00") == datetime(2024, 2, 29, 20, 0, tzinfo=timezone.utc)
    assert parse_date("2024-03-01T01:00:00Z").tzinfo == timezone.utc
    assert parse_date("2024-03-01T01:00:00") == datetime(2024, 3, 1, 1, 0, tzinfo=timezone.utc)


def test_monthly_totals_bucket_by_utc_month():
    transactions = [
        {"category": "Food", "amount": 10.0, "date": "2024-03-01T01:00:00+05:00"},
        {"category": "Food", "amount": 20.0, "date": "2024-02-29T22:00:00+00:00"},
    ]
    result = FinanceAnalyzer().monthly_totals(transactions)
    assert [(m.year, m.month, m.is_income, m.total) for m in result] == [(2024, 2, False, 30.0)]
