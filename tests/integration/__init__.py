from fastdoc.test.unit import FakeDocumentStore
from tests.app.models import OrderLine


def insert_order(store: FakeDocumentStore, key: str, customer: str, *lines: OrderLine):
    store.put_document(
        key,
        {"customer": customer, "lines": [{"sku": l.sku, "qty": l.qty} for l in lines]},
        {"@collection": "orders", "@python-type": "tests.app.models.Order"},
    )
