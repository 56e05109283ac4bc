"""여러 세션이 하나의 저장소를 공유하는 시나리오 테스트."""
from __future__ import annotations

import pytest

from fastdoc.config import DocumentConventions
from fastdoc.core import ConcurrencyError, InvalidOperationError
from fastdoc.diff import ChangeType
from fastdoc.test.unit import FakeDocumentStore
from fastdoc.uow import DocumentSession
from tests import random_sku
from tests.app.models import Order, OrderLine, Product, ProductSummary, User
from tests.integration import insert_order


def test_unit_of_work_across_sessions(store: FakeDocumentStore):
    with DocumentSession(store) as session:
        order = Order("ann", [OrderLine("RED-CHAIR", 1)])
        session.store(order)
        session.save_changes()
        key = order.id

    with DocumentSession(store) as session:
        order = session.load(key, Order)
        assert order.lines == [OrderLine("RED-CHAIR", 1)]

        order.lines[0].qty = 5
        changes = session.what_changed()[key]
        assert [(c.change, c.field_name) for c in changes] == [
            (ChangeType.FIELD_CHANGED, "lines[0].qty")
        ]

        session.save_changes()

    assert store.get(key).data_as_json["lines"] == [{"sku": "RED-CHAIR", "qty": 5}]
    assert store.get(key).metadata["@python-type"] == "tests.app.models.Order"


def test_session_exit_clears_tracking(store: FakeDocumentStore):
    with DocumentSession(store) as session:
        session.store(User(name="Ann"))

    assert session.number_of_entities_in_unit_of_work == 0
    assert store.batches == []


def test_fields_unknown_to_model_survive_round_trip(store: FakeDocumentStore):
    sku = random_sku("lamp")
    store.put_document(
        "products/1",
        {"sku": sku, "name": "Lamp", "price": 10.0, "tags": []},
    )

    with DocumentSession(store) as session:
        summary = session.load("products/1", ProductSummary)
        summary.name = "Desk Lamp"
        session.save_changes()

    with DocumentSession(store) as session:
        product = session.load("products/1", Product)
        assert product.name == "Desk Lamp"
        assert product.price == 10.0
        assert not session.has_changes()


def test_refresh(store: FakeDocumentStore):
    store.put_document("users/1", {"name": "Ann"})
    conventions = DocumentConventions(use_optimistic_concurrency=True)
    stale = DocumentSession(store, conventions)
    fresh = DocumentSession(store, conventions)

    user = stale.load("users/1", User)
    fresh.load("users/1", User).name = "Annie"
    fresh.save_changes()

    stale.refresh(user)

    assert user.name == "Annie"
    assert stale.get_etag_for(user) == store.get("users/1").etag
    assert not stale.has_changed(user)

    user.name = "Anna"
    stale.save_changes()
    assert store.get("users/1").data_as_json == {"name": "Anna"}


def test_refresh_transient_instance(session: DocumentSession):
    with pytest.raises(InvalidOperationError):
        session.refresh(User(name="Ann"))


def test_refresh_raw_document(session: DocumentSession, store: FakeDocumentStore):
    store.put_document("notes/1", {"text": "hello"})
    note = session.load("notes/1")
    store.put_document("notes/1", {"text": "updated"})

    session.refresh(note)

    assert note == {"text": "updated"}
    assert not session.has_changed(note)


def test_stale_write_is_rejected_and_session_can_recover(store: FakeDocumentStore):
    insert_order(store, "orders/1", "ann", OrderLine("RED-CHAIR", 1))
    conventions = DocumentConventions(use_optimistic_concurrency=True)
    first = DocumentSession(store, conventions)
    second = DocumentSession(store, conventions)

    first.load("orders/1", Order).customer = "bob"
    order = second.load("orders/1", Order)
    order.customer = "cid"

    first.save_changes()
    with pytest.raises(ConcurrencyError):
        second.save_changes()

    second.refresh(order)
    assert order.customer == "bob"
    order.customer = "cid"
    second.save_changes()

    assert store.get("orders/1").data_as_json["customer"] == "cid"


def test_included_documents(session: DocumentSession, store: FakeDocumentStore):
    insert_order(store, "orders/1", "ann")
    order_doc = store.get("orders/1")
    order_doc.data_as_json.update(product_ids=["products/1"], gift_id="products/2")
    store.put_document(
        "products/1", {"sku": "LAMP", "name": "Lamp", "price": 1.0, "tags": []}
    )
    product_doc = store.get("products/1")

    session.track_document(dict, order_doc)
    session.track_included_document(product_doc)
    session.register_missing_includes(
        [order_doc.data_as_json], ["product_ids", "gift_id"]
    )

    assert session.is_loaded("products/1")
    assert session.is_deleted("products/2")
    assert session.check_if_id_already_included(["orders/1"], ["product_ids"])
    assert not session.check_if_id_already_included(["orders/1"], ["gift_id"])
    assert not session.check_if_id_already_included(["orders/2"], [])

    requests = len(store.gets)
    product = session.load("products/1", Product)
    assert product.name == "Lamp"
    assert len(store.gets) == requests
    assert "products/1" not in session.included_documents_by_key


def test_nested_include_paths(session: DocumentSession):
    doc = {"lines": [{"product": "products/7"}, {"product": "products/8"}]}

    session.register_missing_includes([doc], ["lines.product"])

    assert session.is_deleted("products/7")
    assert session.is_deleted("products/8")

    session.unregister_missing("products/8")
    assert not session.is_deleted("products/8")
