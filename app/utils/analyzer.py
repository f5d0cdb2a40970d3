from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Tuple

from app.db import dynamo
from app.models.common import to_utc

INCOME_CATEGORY = "Income"


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    total: float

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category, "total": self.total}


@dataclass(frozen=True)
class MonthlyTotal:
    year: int
    month: int
    is_income: bool
    total: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "month": self.month,
            "isIncome": self.is_income,
            "total": self.total,
        }


@dataclass(frozen=True)
class AggregateResult:
    """Summary statistics for one owner's transactions. Never persisted."""

    income: float = 0.0
    expenses: float = 0.0
    expenses_by_category: List[CategoryTotal] = field(default_factory=list)
    monthly_data: List[MonthlyTotal] = field(default_factory=list)

    @property
    def top_category(self) -> CategoryTotal | None:
        return self.expenses_by_category[0] if self.expenses_by_category else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "income": self.income,
            "expenses": self.expenses,
            "expensesByCategory": [item.to_dict() for item in self.expenses_by_category],
            "monthlyData": [item.to_dict() for item in self.monthly_data],
        }


def is_income(transaction: Dict[str, Any]) -> bool:
    return transaction.get("category") == INCOME_CATEGORY


def counted_amount(transaction: Dict[str, Any]) -> float:
    """
    Amount as it enters the totals: income keeps its sign, expenses count
    by magnitude whatever sign they were stored with.
    """
    amount = float(transaction.get("amount", 0))
    return amount if is_income(transaction) else abs(amount)


def parse_date(value: Any) -> datetime:
    """Parse a stored timestamp as an aware UTC datetime."""
    if not isinstance(value, datetime):
        text = str(value)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)
    return to_utc(value)


class FinanceAnalyzer:
    """
    Turns a list of transaction records into income/expense totals,
    per-category spending and month buckets.
    """

    def income_total(self, transactions: Iterable[Dict[str, Any]]) -> float:
        return round(sum(counted_amount(tx) for tx in transactions if is_income(tx)), 2)

    def expense_total(self, transactions: Iterable[Dict[str, Any]]) -> float:
        return round(sum(counted_amount(tx) for tx in transactions if not is_income(tx)), 2)

    def category_totals(self, transactions: Iterable[Dict[str, Any]]) -> List[CategoryTotal]:
        totals: Dict[str, float] = defaultdict(float)
        for tx in transactions:
            if is_income(tx):
                continue
            totals[tx["category"]] += counted_amount(tx)
        ordered = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
        return [CategoryTotal(category=cat, total=round(total, 2)) for cat, total in ordered]

    def monthly_totals(self, transactions: Iterable[Dict[str, Any]]) -> List[MonthlyTotal]:
        buckets: Dict[Tuple[int, int, bool], float] = defaultdict(float)
        for tx in transactions:
            when = parse_date(tx["date"])
            buckets[(when.year, when.month, is_income(tx))] += counted_amount(tx)
        return [
            MonthlyTotal(year=year, month=month, is_income=income, total=round(total, 2))
            for (year, month, income), total in sorted(buckets.items())
        ]

    def aggregate(self, transactions: Iterable[Dict[str, Any]]) -> AggregateResult:
        transactions = list(transactions)
        return AggregateResult(
            income=self.income_total(transactions),
            expenses=self.expense_total(transactions),
            expenses_by_category=self.category_totals(transactions),
            monthly_data=self.monthly_totals(transactions),
        )


finance_analyzer = FinanceAnalyzer()


def aggregate_for_user(user_id: str) -> AggregateResult:
    """Aggregate the owner's current transactions. Store failures propagate."""
    transactions = dynamo.get_transactions_for_user(user_id)
    return finance_analyzer.aggregate(transactions)
