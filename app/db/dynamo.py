import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings
from app.core.exceptions import StoreError

logger = logging.getLogger(__name__)

# Initialize DynamoDB resource
dynamodb = boto3.resource("dynamodb", region_name=settings.DYNAMO_REGION)

# Get table references
users_table = dynamodb.Table(settings.DYNAMO_USERS_TABLE)
transactions_table = dynamodb.Table(settings.DYNAMO_TRANSACTIONS_TABLE)
contacts_table = dynamodb.Table(settings.DYNAMO_CONTACTS_TABLE)


def _fail(operation: str, exc: Exception, **context) -> StoreError:
    if isinstance(exc, ClientError):
        message = exc.response.get("Error", {}).get("Message", str(exc))
    else:
        message = str(exc)
    logger.error(f"{operation} failed ({context}): {message}")
    return StoreError(f"{operation} failed")


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

def get_user_by_email(email: str) -> Optional[dict]:
    """Query the Users table by email (assumes a GSI exists on email)."""
    try:
        response = users_table.query(
            IndexName="email-index",
            KeyConditionExpression=Key("email").eq(email),
        )
    except (ClientError, BotoCoreError) as e:
        raise _fail("get_user_by_email", e, email=email) from e
    return _from_dynamo(response["Items"][0]) if response["Items"] else None


def get_user_by_id(user_id: str) -> Optional[dict]:
    try:
        response = users_table.get_item(Key={"user_id": user_id})
    except (ClientError, BotoCoreError) as e:
        raise _fail("get_user_by_id", e, user_id=user_id) from e
    item = response.get("Item")
    return _from_dynamo(item) if item else None


def put_user(user_item: dict) -> None:
    try:
        users_table.put_item(Item=_convert_for_dynamo(user_item))
    except (ClientError, BotoCoreError) as e:
        raise _fail("put_user", e, user_id=user_item.get("user_id")) from e


def update_user(user_id: str, updates: dict) -> Optional[dict]:
    """Apply partial updates to a user. Returns the updated item."""
    return _update_item(users_table, "update_user", {"user_id": user_id}, updates)


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------

def put_transaction(transaction_item: dict) -> None:
    try:
        transactions_table.put_item(Item=_convert_for_dynamo(transaction_item))
    except (ClientError, BotoCoreError) as e:
        raise _fail("put_transaction", e, transaction_id=transaction_item.get("transaction_id")) from e


def get_transaction(transaction_id: str) -> Optional[dict]:
    try:
        response = transactions_table.get_item(Key={"transaction_id": transaction_id})
    except (ClientError, BotoCoreError) as e:
        raise _fail("get_transaction", e, transaction_id=transaction_id) from e
    item = response.get("Item")
    return _from_dynamo(item) if item else None


def get_transactions_for_user(user_id: str) -> List[dict]:
    """
    Query every transaction owned by user_id through the user-index GSI,
    following pagination until the result set is exhausted.
    """
    items: List[dict] = []
    query_kwargs: Dict[str, Any] = {
        "IndexName": "user-index",
        "KeyConditionExpression": Key("user_id").eq(user_id),
    }
    try:
        while True:
            response = transactions_table.query(**query_kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            query_kwargs["ExclusiveStartKey"] = last_key
    except (ClientError, BotoCoreError) as e:
        raise _fail("get_transactions_for_user", e, user_id=user_id) from e
    return [_from_dynamo(item) for item in items]


def update_transaction(transaction_id: str, updates: dict) -> Optional[dict]:
    return _update_item(
        transactions_table,
        "update_transaction",
        {"transaction_id": transaction_id},
        updates,
    )


def delete_transaction(transaction_id: str) -> bool:
    try:
        response = transactions_table.delete_item(
            Key={"transaction_id": transaction_id},
            ReturnValues="ALL_OLD",
        )
    except (ClientError, BotoCoreError) as e:
        raise _fail("delete_transaction", e, transaction_id=transaction_id) from e
    return "Attributes" in response


# ---------------------------------------------------------------------------
# Contact messages
# ---------------------------------------------------------------------------

def put_contact(contact_item: dict) -> None:
    try:
        contacts_table.put_item(Item=_convert_for_dynamo(contact_item))
    except (ClientError, BotoCoreError) as e:
        raise _fail("put_contact", e, contact_id=contact_item.get("contact_id")) from e


def list_contacts() -> List[dict]:
    """Scan every stored contact message, following pagination."""
    items: List[dict] = []
    scan_kwargs: Dict[str, Any] = {}
    try:
        while True:
            response = contacts_table.scan(**scan_kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            scan_kwargs["ExclusiveStartKey"] = last_key
    except (ClientError, BotoCoreError) as e:
        raise _fail("list_contacts", e) from e
    return [_from_dynamo(item) for item in items]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _update_item(table, operation: str, key: dict, updates: dict) -> Optional[dict]:
    if not updates:
        return None

    update_expression_parts = []
    expression_attribute_values = {}
    expression_attribute_names = {}

    for idx, (field, value) in enumerate(updates.items()):
        placeholder = f"#f{idx}"
        value_placeholder = f":v{idx}"
        update_expression_parts.append(f"{placeholder} = {value_placeholder}")
        expression_attribute_names[placeholder] = field
        expression_attribute_values[value_placeholder] = value

    update_expression = "SET " + ", ".join(update_expression_parts)

    try:
        response = table.update_item(
            Key=key,
            UpdateExpression=update_expression,
            ExpressionAttributeNames=expression_attribute_names,
            ExpressionAttributeValues=_convert_for_dynamo(expression_attribute_values),
            ReturnValues="ALL_NEW",
        )
    except (ClientError, BotoCoreError) as e:
        raise _fail(operation, e, **key) from e
    attributes = response.get("Attributes")
    return _from_dynamo(attributes) if attributes else None


def _convert_for_dynamo(obj: Any):
    """
    Recursively convert floats to Decimal and datetimes to ISO strings
    for DynamoDB compatibility.
    """
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {k: _convert_for_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_convert_for_dynamo(v) for v in obj]
    return obj


def _from_dynamo(obj: Any):
    """
    Recursively convert Decimal instances back to native Python numeric types.
    """
    if isinstance(obj, list):
        return [_from_dynamo(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _from_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, Decimal):
        if obj % 1 == 0:
            return int(obj)
        return float(obj)
    return obj
