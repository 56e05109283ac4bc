# pylint: disable=redefined-outer-name, protected-access
"""pytest 에서 사용될 전역 Fixture들을 정의합니다."""
from __future__ import annotations

import pytest

from fastdoc.config import DocumentConventions
from fastdoc.listeners import DocumentSessionListeners
from fastdoc.test.unit import FakeDocumentStore, FakeListener
from fastdoc.uow import DocumentSession


@pytest.fixture
def store() -> FakeDocumentStore:
    """비어있는 :class:`FakeDocumentStore` 픽스처."""
    return FakeDocumentStore()


@pytest.fixture
def conventions() -> DocumentConventions:
    return DocumentConventions()


@pytest.fixture
def session(store: FakeDocumentStore, conventions: DocumentConventions) -> DocumentSession:
    """기본 설정의 세션. 낙관적 동시성 제어를 사용하지 않습니다."""
    return DocumentSession(store, conventions)


@pytest.fixture
def occ_session(store: FakeDocumentStore) -> DocumentSession:
    """낙관적 동시성 제어를 사용하는 세션."""
    return DocumentSession(store, DocumentConventions(use_optimistic_concurrency=True))


@pytest.fixture
def listener() -> FakeListener:
    return FakeListener()


@pytest.fixture
def listened_session(store: FakeDocumentStore, listener: FakeListener) -> DocumentSession:
    """:class:`FakeListener` 가 등록된 세션."""
    listeners = DocumentSessionListeners()
    listeners.register(listener)
    return DocumentSession(store, listeners=listeners)
