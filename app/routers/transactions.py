import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.exceptions import AdvisorUnavailable
from app.db import dynamo
from app.models.common import to_utc, utcnow
from app.models.transaction import TransactionCreate, TransactionInDB, TransactionPublic, TransactionUpdate
from app.routers.auth import get_current_user_id
from app.utils.advisor_client import AdvisorClient, get_advisor_client
from app.utils.analyzer import aggregate_for_user, parse_date

router = APIRouter()
logger = logging.getLogger(__name__)


def _get_owned_transaction(transaction_id: str, user_id: str) -> dict:
    transaction = dynamo.get_transaction(transaction_id)
    if not transaction:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    if transaction.get("user_id") != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")
    return transaction


def _mirror_to_advisor(advisor: AdvisorClient, user_id: str, transaction: TransactionInDB) -> None:
    """Best-effort copy of a new transaction to the advisor; never raises."""
    record = transaction.to_item()
    payload = {key: record[key] for key in ("name", "amount", "date", "category", "notes")}
    try:
        advisor.import_transactions(user_id, [payload])
    except AdvisorUnavailable as e:
        logger.warning(f"Failed to sync transaction {transaction.transaction_id} with advisor: {e}")


@router.get("/", response_model=List[TransactionPublic])
def list_transactions(user_id: str = Depends(get_current_user_id)):
    transactions = dynamo.get_transactions_for_user(user_id)
    return sorted(transactions, key=lambda tx: parse_date(tx["date"]), reverse=True)


@router.get("/stats")
def transaction_stats(user_id: str = Depends(get_current_user_id)):
    """
    Income and expense totals, spending per category (largest first) and
    month-by-month totals split by income/expense.
    """
    return aggregate_for_user(user_id).to_dict()


@router.get("/{transaction_id}", response_model=TransactionPublic)
def get_transaction(transaction_id: str, user_id: str = Depends(get_current_user_id)):
    return _get_owned_transaction(transaction_id, user_id)


@router.post("/", response_model=TransactionPublic, status_code=status.HTTP_201_CREATED)
def create_transaction(
    transaction: TransactionCreate,
    user_id: str = Depends(get_current_user_id),
    advisor: AdvisorClient = Depends(get_advisor_client),
):
    when = to_utc(transaction.date) if transaction.date else utcnow()
    transaction_db = TransactionInDB(
        user_id=user_id,
        name=transaction.name,
        amount=transaction.amount,
        date=when.isoformat(),
        category=transaction.category,
        notes=transaction.notes,
    )
    dynamo.put_transaction(transaction_db.to_item())
    logger.info(f"Created transaction {transaction_db.transaction_id} for user {user_id}")

    _mirror_to_advisor(advisor, user_id, transaction_db)
    return TransactionPublic(**transaction_db.model_dump())


@router.put("/{transaction_id}", response_model=TransactionPublic)
def update_transaction(
    transaction_id: str,
    transaction_update: TransactionUpdate,
    user_id: str = Depends(get_current_user_id),
):
    updates = transaction_update.to_updates()
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    _get_owned_transaction(transaction_id, user_id)
    updated = dynamo.update_transaction(transaction_id, updates)
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return updated


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(transaction_id: str, user_id: str = Depends(get_current_user_id)):
    _get_owned_transaction(transaction_id, user_id)
    if not dynamo.delete_transaction(transaction_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return None
