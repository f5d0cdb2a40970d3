"""
Health Check Router
Service liveness and DynamoDB reachability
"""
from datetime import datetime, timezone
import logging

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.db import dynamo
from app.utils.advisor_client import AdvisorClient, get_advisor_client

router = APIRouter()
logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
def health_check(advisor: AdvisorClient = Depends(get_advisor_client)):
    """
    Health check endpoint.
    Returns API status.
    """
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "advisor_configured": advisor.enabled,
        "timestamp": _now(),
    }


@router.get("/health/db")
def database_health():
    """
    Check that the Users, Transactions and Contacts tables are reachable.
    Responds 503 when any of them is not.
    """
    tables = {}
    for label, table, name in (
        ("users", dynamo.users_table, settings.DYNAMO_USERS_TABLE),
        ("transactions", dynamo.transactions_table, settings.DYNAMO_TRANSACTIONS_TABLE),
        ("contacts", dynamo.contacts_table, settings.DYNAMO_CONTACTS_TABLE),
    ):
        try:
            table.scan(Limit=1)
            tables[label] = {"name": name, "status": "accessible", "region": settings.DYNAMO_REGION}
        except (ClientError, BotoCoreError) as e:
            logger.error(f"DynamoDB check failed for {name}: {str(e)}")
            tables[label] = {"name": name, "status": "error", "error": str(e)}

    connected = all(table["status"] == "accessible" for table in tables.values())
    body = {
        "status": "ok" if connected else "error",
        "tables": tables,
        "timestamp": _now(),
    }
    return JSONResponse(status_code=200 if connected else 503, content=body)
