"""
Rule-based fallback advice used when the remote advisor is unavailable.

Both entry points are pure functions of an ``AggregateResult``: the same
aggregate always yields the same insights and the same answer.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import List

from app.utils.analyzer import AggregateResult

SAVINGS_RATE_TARGET = 20
TOP_CATEGORY_SHARE_LIMIT = 30
EXPENSE_TO_INCOME_LIMIT = 90
AFFORDABILITY_BUFFER = 100
# Categories whose high share of spending is expected and not flagged
EXEMPT_CATEGORIES = frozenset({"Housing"})

AUTOMATE_SAVINGS_TIP = (
    "Consider setting up automatic transfers to a savings account at the beginning "
    "of each month to build your emergency fund."
)
SAVINGS_TIP_ANSWER = (
    "Based on your spending patterns, you could save more by reducing your entertainment "
    "expenses and setting up automatic transfers to a savings account at the beginning of each month."
)
CLARIFICATION_ANSWER = (
    "I'm not sure how to answer that question. Try asking about your spending, savings, "
    "or whether you can afford a purchase."
)
NO_EXPENSES_ANSWER = "You don't have any recorded expenses yet."


def round_percent(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def savings_rate(result: AggregateResult) -> float:
    if result.income == 0:
        return 0.0
    return (result.income - abs(result.expenses)) * 100 / result.income


def generate_insights(result: AggregateResult) -> List[str]:
    insights: List[str] = []
    total_expenses = abs(result.expenses)

    rate = savings_rate(result)
    if rate < SAVINGS_RATE_TARGET:
        insights.append(
            "Your current savings rate is below the recommended 20%. Consider reducing "
            "discretionary spending to increase your savings."
        )
    else:
        insights.append(
            f"Great job! Your savings rate of {round_percent(rate)}% is above the "
            f"recommended minimum of 20%."
        )

    top = result.top_category
    if top is not None and total_expenses > 0:
        share = abs(top.total) * 100 / total_expenses
        if share > TOP_CATEGORY_SHARE_LIMIT and top.category not in EXEMPT_CATEGORIES:
            insights.append(
                f"Your {top.category} expenses account for {round_percent(share)}% of your "
                f"total spending, which is relatively high. Consider ways to reduce this category."
            )

    if result.income > 0 and total_expenses > 0:
        if total_expenses * 100 / result.income > EXPENSE_TO_INCOME_LIMIT:
            insights.append(
                "Your expenses are very close to your income. This leaves little room for "
                "unexpected costs or emergencies. Try to increase your buffer."
            )

    if len(insights) < 2:
        insights.append(AUTOMATE_SAVINGS_TIP)

    return insights


def answer_question(result: AggregateResult, question: str) -> str:
    text = question.lower()

    if "afford" in text:
        return _affordability_answer(result)
    if "spend" in text or "spending" in text:
        return _spending_answer(result)
    if "save" in text or "saving" in text:
        return SAVINGS_TIP_ANSWER
    return CLARIFICATION_ANSWER


def _affordability_answer(result: AggregateResult) -> str:
    savings = result.income - result.expenses
    if savings > AFFORDABILITY_BUFFER:
        verdict = "You can likely afford this purchase."
    else:
        verdict = "You might want to reconsider this purchase to maintain your budget."
    return (
        f"Based on your current financial situation, you have ${savings:.2f} "
        f"available for spending. {verdict}"
    )


def _spending_answer(result: AggregateResult) -> str:
    if not result.expenses_by_category:
        return NO_EXPENSES_ANSWER

    top = max(result.expenses_by_category, key=lambda item: abs(item.total))
    magnitude = sum(abs(item.total) for item in result.expenses_by_category)
    share = abs(top.total) * 100 / magnitude if magnitude else 0
    return (
        f"Your highest spending category is {top.category} at ${abs(top.total):.2f}. "
        f"This represents about {round_percent(share)}% of your total expenses."
    )
