"""엔티티를 문서 트리로 변환하고, 저장 작업 동안 변환 결과를 캐시합니다."""
from __future__ import annotations

import copy
from contextlib import contextmanager
from typing import Any, Callable, Generator, Optional

from fastdoc.config import DocumentConventions
from fastdoc.core.models import AbstractSerializer, Document
from fastdoc.identity import EntityIdGenerator
from fastdoc.listeners import DocumentSessionListeners
from fastdoc.utils import IdentityDict

JsonSimplifier = Callable[[Document], None]


class EntityToJson:
    """엔티티 -> 문서 변환기.

    - ``missing_dictionary``: 엔티티 타입에 없어서 역직렬화 때 버려진 필드를 엔티티별로
      기억합니다. 다시 변환할 때 문서에 되살려서 필드가 유실되지 않게 합니다.
    - ``cached_json_docs``: :meth:`caching_scope` 블록 안에서만 존재하는 캐시.
    """

    def __init__(
        self,
        conventions: DocumentConventions,
        listeners: DocumentSessionListeners,
        serializer: AbstractSerializer,
        id_generator: Optional[EntityIdGenerator] = None,
    ):
        self.conventions = conventions
        self.listeners = listeners
        self.serializer = serializer
        self.id_generator = id_generator or EntityIdGenerator(conventions)
        self.missing_dictionary = IdentityDict[Any, dict[str, Any]]()
        self.cached_json_docs: Optional[IdentityDict[Any, Document]] = None
        self.simplifiers = list[JsonSimplifier]()

    def convert_entity_to_json(
        self, key: Optional[str], entity: Any, metadata: Document
    ) -> Document:
        for listener in self.listeners.conversion_listeners:
            listener.before_conversion_to_document(key, entity, metadata)

        document = self.get_object_as_json(entity)
        if not isinstance(entity, dict):
            document.pop(self.id_generator.identity_property, None)

        for listener in self.listeners.conversion_listeners:
            listener.after_conversion_to_document(key, entity, document, metadata)

        return document

    def get_object_as_json(self, entity: Any) -> Document:
        if isinstance(entity, dict):
            return copy.deepcopy(entity)

        if self.cached_json_docs is not None and entity in self.cached_json_docs:
            return copy.deepcopy(self.cached_json_docs[entity])

        document = self.serializer.serialize(entity)
        for name, value in self.missing_dictionary.get(entity, {}).items():
            document.setdefault(name, copy.deepcopy(value))

        self.try_simplifying_json(document)

        if self.cached_json_docs is not None:
            self.cached_json_docs[entity] = document
            return copy.deepcopy(document)
        return document

    def try_simplifying_json(self, document: Document) -> None:
        for simplify in self.simplifiers:
            simplify(document)

    def register_missing_property(self, entity: Any, name: str, value: Any) -> None:
        self.missing_dictionary.setdefault(entity, {})[name] = value

    def discard_cached(self, entity: Any) -> None:
        """엔티티의 캐시된 변환 결과를 버립니다. 다음 변환 때 다시 직렬화합니다."""
        if self.cached_json_docs is not None:
            self.cached_json_docs.pop(entity, None)

    def clear_cache(self) -> None:
        if self.cached_json_docs is not None:
            self.cached_json_docs.clear()

    @contextmanager
    def caching_scope(self) -> Generator[EntityToJson, None, None]:
        """블록 안에서 일어나는 모든 엔티티 변환 결과를 캐시합니다.

        저장 작업 중에는 같은 엔티티를 여러 번 변환하게 되는데, 그 사이에 엔티티가
        수정되지 않는다고 가정합니다. 블록을 빠져나가면 예외 여부와 관계없이 캐시를
        버립니다. ::

            with entity_to_json.caching_scope():
                data = session.prepare_for_save_changes()
        """
        previous = self.cached_json_docs
        self.cached_json_docs = IdentityDict[Any, Document]()
        try:
            yield self
        finally:
            self.cached_json_docs = previous
