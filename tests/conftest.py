from copy import deepcopy

import httpx
import pytest
from fastapi.testclient import TestClient

from app.db import dynamo
from app.main import app
from app.routers.auth import get_current_user_id
from app.utils.advisor_client import AdvisorClient, get_advisor_client

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


class InMemoryStore:
    """Stands in for the DynamoDB tables behind app.db.dynamo."""

    def __init__(self):
        self.users = {}
        self.transactions = {}
        self.contacts = {}

    def put_user(self, item):
        self.users[item["user_id"]] = deepcopy(item)

    def get_user_by_id(self, user_id):
        return deepcopy(self.users.get(user_id))

    def get_user_by_email(self, email):
        for user in self.users.values():
            if user["email"] == email:
                return deepcopy(user)
        return None

    def update_user(self, user_id, updates):
        self.users[user_id].update(deepcopy(updates))
        return deepcopy(self.users[user_id])

    def put_transaction(self, item):
        self.transactions[item["transaction_id"]] = deepcopy(item)

    def get_transaction(self, transaction_id):
        return deepcopy(self.transactions.get(transaction_id))

    def get_transactions_for_user(self, user_id):
        return [deepcopy(tx) for tx in self.transactions.values() if tx["user_id"] == user_id]

    def update_transaction(self, transaction_id, updates):
        if transaction_id not in self.transactions:
            return None
        self.transactions[transaction_id].update(deepcopy(updates))
        return deepcopy(self.transactions[transaction_id])

    def delete_transaction(self, transaction_id):
        return self.transactions.pop(transaction_id, None) is not None

    def put_contact(self, item):
        self.contacts[item["contact_id"]] = deepcopy(item)

    def list_contacts(self):
        return [deepcopy(item) for item in self.contacts.values()]


@pytest.fixture
def store(monkeypatch):
    fake = InMemoryStore()
    for name in (
        "put_user",
        "get_user_by_id",
        "get_user_by_email",
        "update_user",
        "put_transaction",
        "get_transaction",
        "get_transactions_for_user",
        "update_transaction",
        "delete_transaction",
        "put_contact",
        "list_contacts",
    ):
        monkeypatch.setattr(dynamo, name, getattr(fake, name))
    return fake


class AdvisorCalls:
    """Records requests seen by the mock advisor and scripts its replies."""

    def __init__(self):
        self.requests = []
        self.handler = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.handler is None:
            raise httpx.ConnectError("connection refused", request=request)
        return self.handler(request)


@pytest.fixture
def advisor_calls():
    return AdvisorCalls()


@pytest.fixture
def advisor(advisor_calls):
    client = AdvisorClient(
        "http://advisor.test/api",
        timeout=1.0,
        transport=httpx.MockTransport(advisor_calls),
    )
    yield client
    client.close()


@pytest.fixture
def client(store, advisor):
    app.dependency_overrides[get_current_user_id] = lambda: USER_ID
    app.dependency_overrides[get_advisor_client] = lambda: advisor
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(store, advisor):
    app.dependency_overrides[get_advisor_client] = lambda: advisor
    yield TestClient(app)
    app.dependency_overrides.clear()
