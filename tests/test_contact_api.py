import pytest
from botocore.exceptions import ClientError

from app.core.exceptions import StoreError
from app.core.security import create_access_token
from app.db import dynamo
from app.routers.contact import THANK_YOU_MESSAGE
from tests.conftest import USER_ID

message = {
    "name": " Ada ",
    "email": "ada@example.com",
    "subject": "Budget export",
    "message": "Can I download my transactions as CSV?",
}


def test_submit_contact_is_public(anonymous_client, store):
    response = anonymous_client.post("/api/contact/", json=message)

    assert response.status_code == 201
    assert response.json() == {"message": THANK_YOU_MESSAGE}
    [stored] = store.contacts.values()
    assert stored["name"] == "Ada"
    assert stored["subject"] == "Budget export"
    assert stored["created_at"]


def test_submit_contact_validates_fields(anonymous_client, store):
    response = anonymous_client.post(
        "/api/contact/", json={"name": "", "email": "not-an-email", "subject": "  "}
    )
    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert fields == {"name", "email", "subject", "message"}
    assert store.contacts == {}


def test_list_contacts_requires_token(anonymous_client, store):
    assert anonymous_client.get("/api/contact/").status_code == 401


def test_list_contacts_newest_first(anonymous_client, store):
    for contact_id, created_at in (
        ("c1", "2025-10-01T08:00:00+00:00"),
        ("c2", "2025-10-03T08:00:00+00:00"),
        ("c3", "2025-10-02T08:00:00+00:00"),
    ):
        store.put_contact({**message, "contact_id": contact_id, "created_at": created_at})
    headers = {"Authorization": f"Bearer {create_access_token({'sub': USER_ID})}"}

    response = anonymous_client.get("/api/contact/", headers=headers)

    assert response.status_code == 200
    assert [item["contact_id"] for item in response.json()] == ["c2", "c3", "c1"]


def test_list_contacts_follows_pagination(monkeypatch):
    class PagedTable:
        def __init__(self):
            self.calls = []

        def scan(self, **kwargs):
            self.calls.append(kwargs)
            if "ExclusiveStartKey" not in kwargs:
                return {"Items": [{"contact_id": "c1"}], "LastEvaluatedKey": {"contact_id": "c1"}}
            return {"Items": [{"contact_id": "c2"}]}

    table = PagedTable()
    monkeypatch.setattr(dynamo, "contacts_table", table)

    assert [item["contact_id"] for item in dynamo.list_contacts()] == ["c1", "c2"]
    assert table.calls[1] == {"ExclusiveStartKey": {"contact_id": "c1"}}


def test_put_contact_failure_raises_store_error(monkeypatch):
    class BrokenTable:
        def put_item(self, **kwargs):
            raise ClientError({"Error": {"Code": "ResourceNotFoundException", "Message": "Table not found"}}, "PutItem")

    monkeypatch.setattr(dynamo, "contacts_table", BrokenTable())

    with pytest.raises(StoreError):
        dynamo.put_contact({"contact_id": "c1"})
