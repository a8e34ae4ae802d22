from warehouse_service.app.helpers.code_generator import next_code
from warehouse_service.app.models.sales.clients import Client


def add_client(db, code):
    db.add(Client(client_code=code, name=f"Client {code}"))
    db.commit()


def test_first_code_is_padded(db):
    assert next_code(db, Client.client_code, "CLI") == "CLI-0001"
    assert next_code(db, Client.client_code, "REQ", start=1000) == "REQ-1001"


def test_numbering_continues_past_the_padding_width(db):
    add_client(db, "CLI-0002")
    add_client(db, "CLI-9999")
    assert next_code(db, Client.client_code, "CLI") == "CLI-10000"

    add_client(db, "CLI-10000")
    assert next_code(db, Client.client_code, "CLI") == "CLI-10001"


def test_other_prefixes_are_ignored(db):
    add_client(db, "CLI-0007")
    add_client(db, "VIP-0500")

    assert next_code(db, Client.client_code, "CLI") == "CLI-0008"
    assert next_code(db, Client.client_code, "VIP") == "VIP-0501"
