"""UnitOfWork 패턴 모듈.

:class:`DocumentSession` 은 :class:`~fastdoc.core.models.AbstractDocumentStore`
구현체를 이용해 문서를 읽고, 변경 내역을 한 번의 배치 요청으로 저장합니다. ::

    with DocumentSession(store) as session:
        user = session.load("users/1", User)
        user.name = "Annie"
        session.save_changes()
"""
from __future__ import annotations

import copy
from typing import Any, Optional, Type, TypeVar, overload

from fastdoc.config import DocumentConventions
from fastdoc.core.errors import DocumentNotFoundError, InvalidOperationError
from fastdoc.core.models import (
    ETAG,
    AbstractDocumentStore,
    AbstractSerializer,
    Document,
    JsonDocument,
)
from fastdoc.listeners import DocumentSessionListeners
from fastdoc.logging import get_logger
from fastdoc.session import DocumentSessionOperations

T = TypeVar("T")

logger = get_logger("fastdoc.uow")


class DocumentSession(DocumentSessionOperations):
    """저장소와 연결된 세션."""

    def __init__(
        self,
        store: AbstractDocumentStore,
        conventions: Optional[DocumentConventions] = None,
        listeners: Optional[DocumentSessionListeners] = None,
        serializer: Optional[AbstractSerializer] = None,
    ):
        super().__init__(conventions, listeners, serializer)
        self.document_store = store

    def __enter__(self) -> DocumentSession:
        return self

    def __exit__(self, *args: Any) -> None:
        """``with`` 블록을 빠져나가면 추적 정보를 모두 버립니다.

        저장하지 않은 변경 내역은 사라집니다.
        """
        self.clear()

    def _get_json_document(self, key: str) -> JsonDocument:
        document = self.document_store.get(key)
        if document is None:
            raise DocumentNotFoundError(f"Document with key {key} does not exist")
        return document

    @overload
    def load(self, key: str) -> Optional[Document]:
        ...

    @overload
    def load(self, key: str, entity_type: Type[T]) -> Optional[T]:
        ...

    def load(self, key: str, entity_type: Type[Any] = dict) -> Optional[Any]:
        """`key` 문서를 `entity_type` 엔티티로 로드합니다. 없으면 ``None``.

        이미 세션에 있는 키는 저장소에 요청하지 않고 세션의 객체를 리턴합니다.
        """
        if key in self.entities_by_key:
            return self.entities_by_key[key]

        if self.is_deleted(key):
            return None

        included = self.included_documents_by_key.pop(key, None)
        if included is not None:
            return self.track_document(entity_type, included)

        self.increment_request_count()
        document = self.document_store.get(key)
        if document is None:
            logger.debug("document not found: %s", key)
            self.register_missing(key)
            return None

        return self.track_document(entity_type, document)

    def refresh(self, entity: Any) -> None:
        """저장소의 최신 문서로 엔티티의 내용과 추적 정보를 덮어씁니다."""
        entry = self.entities.get(entity)
        if entry is None or entry.key is None:
            raise InvalidOperationError("Cannot refresh a transient instance")

        self.increment_request_count()
        document = self.document_store.get(entry.key)
        if document is None:
            raise DocumentNotFoundError(
                f"Document '{entry.key}' no longer exists and was probably deleted"
            )

        metadata = document.metadata
        if document.etag is not None:
            metadata.setdefault(ETAG, document.etag)

        entry.metadata = metadata
        entry.original_metadata = copy.deepcopy(metadata)
        entry.etag = document.etag
        entry.original_value = document.data_as_json

        fresh = self.convert_to_entity(
            type(entity), entry.key, copy.deepcopy(document.data_as_json), metadata
        )
        if isinstance(entity, dict):
            entity.clear()
            entity.update(fresh)
        else:
            vars(entity).update(vars(fresh))

    def save_changes(self) -> None:
        """세션의 모든 변경 내역을 한 번의 배치 요청으로 저장합니다.

        Raises:
            :class:`~fastdoc.core.errors.ConcurrencyError`: 저장소가 etag 불일치로
                배치를 거부했을 때. 재시도하지 않습니다.
        """
        with self.entity_to_json.caching_scope():
            data = self.prepare_for_save_changes()
            if not data.commands:
                return

            self.increment_request_count()
            self.log_batch(data)

            results = self.document_store.batch(data.commands)
            self.update_batch_results(results, data)
