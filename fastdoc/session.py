"""세션 Unit of Work 핵심 모듈.

:class:`DocumentSessionOperations` 는 다음 세 가지를 담당합니다.

- **Identity Map**: 로드/저장된 엔티티와 문서 키, etag, 원본 스냅샷의 대응 관계를
  추적합니다. 세션 안에서 하나의 키는 항상 하나의 살아있는 객체로만 표현됩니다.
- **변경 감지 및 명령 생성**: 추적 중인 엔티티를 원본 스냅샷과 비교해서 저장소로
  보낼 최소한의 PUT/DELETE 명령 리스트를 만듭니다.
- **배치 결과 반영**: 저장소가 돌려준 배치 결과로 etag, 키, 스냅샷을 갱신합니다.

저장소와 실제로 통신하는 부분은 하위 클래스(:class:`fastdoc.uow.DocumentSession`)
가 구현합니다.
"""
from __future__ import annotations

import abc
import copy
import logging
from typing import Any, Iterable, Iterator, Optional, Sequence, Type

from fastdoc.config import DocumentConventions
from fastdoc.core.errors import (
    AmbiguousDeletionError,
    IdentityError,
    InvalidOperationError,
    MaxRequestsExceededError,
    NonAuthoritativeInformationError,
    NonUniqueObjectError,
    ReadOnlyViolationError,
    ReadVetoError,
)
from fastdoc.core.models import (
    COLLECTION,
    CREATE_VERSION,
    DOES_NOT_EXIST,
    EMPTY_ETAG,
    ETAG,
    LAST_MODIFIED,
    METADATA,
    NON_AUTHORITATIVE,
    PYTHON_TYPE,
    READ_ONLY,
    READ_VETO,
    TRANSIENT_METADATA,
    AbstractSerializer,
    BatchResult,
    CommandData,
    DeleteCommandData,
    Document,
    DocumentMetadata,
    JsonDocument,
    PutCommandData,
    SaveChangesData,
)
from fastdoc.diff import ChangeType, DocumentsChanges, deep_equals
from fastdoc.entity_to_json import EntityToJson
from fastdoc.identity import EntityIdGenerator
from fastdoc.listeners import DocumentSessionListeners
from fastdoc.logging import get_logger
from fastdoc.serializer import PydanticSerializer
from fastdoc.utils import CaseInsensitiveDict, CaseInsensitiveSet, IdentityDict, IdentitySet

ChangesMap = dict[Optional[str], list[DocumentsChanges]]

logger = get_logger("fastdoc.session")


def _same_key(a: Optional[str], b: Optional[str]) -> bool:
    if a is None or b is None:
        return a is b
    return a.lower() == b.lower()


def _is_read_only(metadata: Document) -> bool:
    return metadata.get(READ_ONLY) is True


def include_ids(document: Any, path: str) -> Iterator[str]:
    """``customer_id`` 나 ``lines.product_id`` 같은 include 경로가 가리키는 키들.

    경로 중간의 리스트는 원소마다 따라 내려갑니다.
    """
    name, _, rest = path.partition(".")
    value = document.get(name) if isinstance(document, dict) else None
    for item in value if isinstance(value, list) else [value]:
        if rest:
            yield from include_ids(item, rest)
        elif isinstance(item, str):
            yield item


class DocumentSessionOperations(abc.ABC):
    """저장소와 무관한 세션 Unit of Work 구현."""

    def __init__(
        self,
        conventions: Optional[DocumentConventions] = None,
        listeners: Optional[DocumentSessionListeners] = None,
        serializer: Optional[AbstractSerializer] = None,
    ):
        self.conventions = conventions or DocumentConventions()
        self.listeners = listeners or DocumentSessionListeners()
        self.serializer = serializer or PydanticSerializer()

        self.generate_entity_id = EntityIdGenerator(self.conventions)
        self.entity_to_json = EntityToJson(
            self.conventions, self.listeners, self.serializer, self.generate_entity_id
        )

        self.entities = IdentityDict[Any, DocumentMetadata]()
        self.entities_by_key = CaseInsensitiveDict[Any]()
        self.deleted = IdentitySet[Any]()
        self.known_missing_ids = CaseInsensitiveSet()
        self.included_documents_by_key = CaseInsensitiveDict[JsonDocument]()
        self._deferred_commands = list[CommandData]()

        self.number_of_requests = 0
        self.last_written_etag: Optional[str] = None
        self.use_optimistic_concurrency = self.conventions.use_optimistic_concurrency
        self.allow_non_authoritative_information = (
            self.conventions.allow_non_authoritative_information
        )

    def __repr__(self):
        return (
            f"{type(self).__name__}[entities={len(self.entities)}, "
            f"deleted={len(self.deleted)}, deferred={len(self._deferred_commands)}]"
        )

    @abc.abstractmethod
    def _get_json_document(self, key: str) -> JsonDocument:
        """저장소에서 `key` 문서를 가져옵니다. 없으면 예외를 발생시킵니다."""
        raise NotImplementedError

    # ---------------------------------------------------------------------
    # Identity Map 조회

    @property
    def number_of_entities_in_unit_of_work(self) -> int:
        return len(self.entities)

    @property
    def deferred_commands_count(self) -> int:
        return len(self._deferred_commands)

    def _get_document_metadata(self, entity: Any) -> DocumentMetadata:
        """엔티티의 추적 정보를 리턴합니다.

        추적 중이 아닌 엔티티는 식별자 속성에서 키를 읽어서 저장소의 현재 문서를
        기준으로 새로 추적을 시작합니다.

        Raises:
            IdentityError: 엔티티에서 키를 알아낼 수 없을 때.
        """
        entry = self.entities.get(entity)
        if entry is not None:
            return entry

        key = self.generate_entity_id.try_get_id_from_instance(entity)
        if key is None:
            raise IdentityError(f"Could not find the document key for {entity!r}")

        self.assert_no_non_unique_instance(entity, key)
        document = self._get_json_document(key)

        entry = DocumentMetadata(
            key=key,
            etag=EMPTY_ETAG if self.use_optimistic_concurrency else None,
            original_value={},
            original_metadata=document.metadata,
            metadata=copy.deepcopy(document.metadata),
        )
        self.entities_by_key[key] = entity
        self.entities[entity] = entry
        return entry

    def get_etag_for(self, entity: Any) -> Optional[str]:
        return self._get_document_metadata(entity).etag

    def get_metadata_for(self, entity: Any) -> Document:
        """엔티티의 메타데이터. 리턴된 dict 를 수정하면 다음 저장 때 반영됩니다."""
        return self._get_document_metadata(entity).metadata

    def get_document_id(self, entity: Any) -> Optional[str]:
        if entity is None:
            return None
        entry = self.entities.get(entity)
        return entry.key if entry else None

    def is_loaded(self, key: str) -> bool:
        if self.is_deleted(key):
            return False
        return key in self.entities_by_key or key in self.included_documents_by_key

    def is_deleted(self, key: str) -> bool:
        """`key` 가 삭제되었거나 존재하지 않는 것으로 알려져 있는지 여부."""
        return key in self.known_missing_ids

    def check_if_id_already_included(
        self, keys: Iterable[str], includes: Sequence[str]
    ) -> bool:
        """`keys` 문서와 그 include 대상 문서가 모두 이미 세션에 있는지 여부."""
        for key in keys:
            if key in self.known_missing_ids:
                continue
            entity = self.entities_by_key.get(key)
            entry = self.entities.get(entity) if entity is not None else None
            if entry is None:
                return False
            for path in includes:
                if not all(self.is_loaded(i) for i in include_ids(entry.original_value, path)):
                    return False
        return True

    # ---------------------------------------------------------------------
    # 변경 감지

    def has_changes(self) -> bool:
        if self.deleted:
            return True
        return any(
            self.entity_changed(entity, entry) for entity, entry in self.entities.items()
        )

    def has_changed(self, entity: Any) -> bool:
        """엔티티가 삭제 예정이거나 마지막 저장 이후 수정되었는지 여부.

        추적 중이 아닌 엔티티는 항상 변경된 것으로 봅니다.
        """
        if entity in self.deleted:
            return True
        return self.entity_changed(entity, self.entities.get(entity))

    def entity_changed(
        self,
        entity: Any,
        entry: Optional[DocumentMetadata],
        changes: Optional[ChangesMap] = None,
    ) -> bool:
        """엔티티를 원본 스냅샷과 비교합니다.

        `changes` 가 주어지면 필드 단위 변경 내역을 ``entry.key`` 아래에 기록합니다.
        """
        if entry is None:
            return True

        if entry.ignore_changes:
            return False

        key = self.generate_entity_id.try_get_id_from_instance(entity)
        if key is not None and entry.key is not None and not _same_key(key, entry.key):
            if changes is not None:
                changes[entry.key] = [
                    DocumentsChanges(
                        change=ChangeType.FIELD_CHANGED,
                        field_name=self.generate_entity_id.identity_property,
                        field_old_value=entry.key,
                        field_new_value=key,
                        field_old_type="String",
                        field_new_type="String",
                    )
                ]
            return True

        if _is_read_only(entry.original_metadata) and _is_read_only(entry.metadata):
            return False

        if not entry.original_value and not entry.original_metadata:
            if changes is not None:
                changes[entry.key] = [DocumentsChanges(change=ChangeType.DOCUMENT_ADDED)]
            return True

        document = self.entity_to_json.convert_entity_to_json(
            entry.key, entity, entry.metadata
        )

        if changes is None:
            return not deep_equals(document, entry.original_value) or not deep_equals(
                entry.metadata, entry.original_metadata
            )

        changed_data = list[DocumentsChanges]()
        deep_equals(document, entry.original_value, changed_data)
        deep_equals(entry.metadata, entry.original_metadata, changed_data, METADATA)
        if changed_data:
            changes[entry.key] = changed_data
        return bool(changed_data)

    def what_changed(self) -> ChangesMap:
        """저장하지 않고 현재 세션의 변경 내역을 문서 키별로 리턴합니다.

        세션 상태는 바뀌지 않습니다.
        """
        changes: ChangesMap = {}

        for entity in self.deleted:
            entry = self.entities.get(entity)
            if entry is not None and _is_read_only(entry.original_metadata):
                continue
            key = entry.key if entry else None
            changes[key] = [DocumentsChanges(change=ChangeType.DOCUMENT_DELETED)]

        for entity, entry in self.entities.items():
            if entity in self.deleted:
                continue
            self.entity_changed(entity, entry, changes)

        return changes

    # ---------------------------------------------------------------------
    # 엔티티 추적

    def increment_request_count(self) -> None:
        self.number_of_requests += 1
        limit = self.conventions.max_number_of_requests_per_session
        if self.number_of_requests > limit:
            raise MaxRequestsExceededError(
                f"The maximum number of requests ({limit}) allowed for this session "
                "has been reached."
            )

    def track_document(
        self, entity_type: Type[Any], document: JsonDocument
    ) -> Optional[Any]:
        """저장소에서 읽은 문서를 엔티티로 만들어 추적합니다.

        실제로 존재하지 않는 문서(``@does-not-exist``)는 ``None`` 을 리턴합니다.
        """
        if document.non_authoritative_information and not self.allow_non_authoritative_information:
            raise NonAuthoritativeInformationError(
                f"Document {document.key} returned non authoritative information "
                "(probably modified by a transaction in progress)"
            )

        metadata = document.metadata
        if metadata.get(DOES_NOT_EXIST) is True:
            return None

        if document.etag is not None and ETAG not in metadata:
            metadata[ETAG] = document.etag
        if document.last_modified is not None and LAST_MODIFIED not in metadata:
            metadata[LAST_MODIFIED] = document.last_modified.isoformat()

        return self.track_entity(entity_type, document.key, document.data_as_json, metadata)

    def track_entity(
        self,
        entity_type: Type[Any],
        key: str,
        document: Document,
        metadata: Document,
        no_tracking: bool = False,
    ) -> Any:
        document.pop(METADATA, None)

        # 이미 로드된 객체가 있으면 저장소의 더 최신 데이터보다 세션의 객체가 우선합니다.
        if key in self.entities_by_key:
            return self.entities_by_key[key]

        entity = self.convert_to_entity(entity_type, key, document, metadata)

        if metadata.get(NON_AUTHORITATIVE) is True and not self.allow_non_authoritative_information:
            raise NonAuthoritativeInformationError(
                f"Document {key} returned non authoritative information "
                "(probably modified by a transaction in progress)"
            )

        if no_tracking:
            return entity

        self.entities[entity] = DocumentMetadata(
            key=key,
            etag=metadata.get(ETAG),
            original_value=copy.deepcopy(document),
            original_metadata=copy.deepcopy(metadata),
            metadata=metadata,
        )
        self.entities_by_key[key] = entity
        return entity

    def ensure_not_read_vetoed(self, metadata: Document) -> None:
        veto = metadata.get(READ_VETO)
        if not veto:
            return
        if isinstance(veto, dict):
            raise ReadVetoError(
                "Document could not be read because of a read veto. "
                f"The read was vetoed by: {veto.get('trigger')}. "
                f"Veto reason: {veto.get('reason')}"
            )
        raise ReadVetoError(f"Document could not be read because of a read veto: {veto}")

    def convert_to_entity(
        self,
        entity_type: Type[Any],
        key: Optional[str],
        document: Document,
        metadata: Document,
        is_streaming: bool = False,
    ) -> Any:
        """문서를 `entity_type` 엔티티로 변환합니다.

        메타데이터에 기록된 파이썬 타입이 `entity_type` 의 하위 클래스면 그 타입을
        사용합니다. 엔티티 타입에 없는 필드는 다음 저장 때 되살리기 위해 기억해둡니다.
        """
        if entity_type is dict:
            return copy.deepcopy(document)

        for listener in self.listeners.conversion_listeners:
            listener.before_conversion_to_entity(key, document, metadata)

        self.ensure_not_read_vetoed(metadata)

        found = self.conventions.find_python_type(metadata)
        if found is not None and issubclass(found, entity_type):
            entity_type = found

        data = document
        id_generator = self.generate_entity_id
        if key is not None and id_generator.has_identity_property(entity_type):
            data = {**document, id_generator.identity_property: key}

        on_missing_field = None
        if not is_streaming and self.conventions.preserve_document_properties_not_found_on_model:
            on_missing_field = self.entity_to_json.register_missing_property

        entity = self.serializer.deserialize(data, entity_type, on_missing_field)
        id_generator.try_set_identity(entity, key)

        for listener in self.listeners.conversion_listeners:
            listener.after_conversion_to_entity(key, document, metadata, entity)

        return entity

    def track_included_document(self, include: JsonDocument) -> None:
        self.included_documents_by_key[include.key] = include

    def register_missing(self, key: str) -> None:
        self.known_missing_ids.add(key)

    def unregister_missing(self, key: str) -> None:
        self.known_missing_ids.discard(key)

    def register_missing_includes(
        self, results: Iterable[Document], includes: Sequence[str]
    ) -> None:
        """include 경로가 가리키지만 세션에 로드되지 않은 키를 없는 문서로 기록합니다."""
        for result in results:
            for path in includes:
                for key in include_ids(result, path):
                    if not self.is_loaded(key):
                        self.register_missing(key)

    # ---------------------------------------------------------------------
    # store / delete / evict

    def store(self, entity: Any, key: Optional[str] = None, etag: Optional[str] = None) -> None:
        """엔티티를 다음 저장 때 저장소에 기록되도록 세션에 등록합니다.

        `etag` 를 주거나, 키 없이 저장한 엔티티에 식별자도 없으면 동시성 검사를 강제합니다.
        이미 추적 중인 엔티티는 etag 와 동시성 검사 여부만 갱신합니다.
        """
        own_key = self.generate_entity_id.try_get_id_from_instance(entity)
        force_concurrency_check = etag is not None or (key is None and own_key is None)

        entry = self.entities.get(entity)
        if entry is not None:
            if etag is not None:
                entry.etag = etag
            entry.force_concurrency_check = force_concurrency_check
            return

        if key is None:
            if own_key is not None:
                key = own_key
            elif self.conventions.generate_document_keys_on_store:
                key = self.generate_entity_id.generate_document_key_for_storage(entity)
        else:
            self.generate_entity_id.try_set_identity(entity, key)

        if key is not None and any(
            _same_key(command.key, key) for command in self._deferred_commands
        ):
            raise InvalidOperationError(
                "Can't store document, there is a deferred command registered for "
                f"this document in the session. Document key: {key}"
            )

        if entity in self.deleted:
            raise InvalidOperationError(
                f"Can't store object, it was already deleted in this session. Document key: {key}"
            )

        # 키 생성 방식을 바꾼 경우 중복 키가 만들어질 수 있으므로 생성한 키도 검사합니다.
        self.assert_no_non_unique_instance(entity, key)

        metadata: Document = {}
        tag = self.conventions.get_dynamic_tag_name(entity)
        if tag is not None:
            metadata[COLLECTION] = tag

        if key is not None:
            self.known_missing_ids.discard(key)

        self._store_entity_in_unit_of_work(
            key, entity, etag, metadata, force_concurrency_check
        )

    def _store_entity_in_unit_of_work(
        self,
        key: Optional[str],
        entity: Any,
        etag: Optional[str],
        metadata: Document,
        force_concurrency_check: bool,
    ) -> None:
        self.deleted.discard(entity)
        if key is not None:
            self.known_missing_ids.discard(key)

        self.entities[entity] = DocumentMetadata(
            key=key,
            etag=etag,
            original_value={},
            original_metadata={},
            metadata=metadata,
            force_concurrency_check=force_concurrency_check,
        )
        if key is not None:
            self.entities_by_key[key] = entity

    def assert_no_non_unique_instance(self, entity: Any, key: Optional[str]) -> None:
        """`key` 가 이미 다른 객체와 연결되어 있으면 :class:`NonUniqueObjectError`.

        ``/`` 로 끝나는 키는 서버가 나머지를 채우는 접두어이므로 검사하지 않습니다.
        """
        if key is None or key.endswith("/"):
            return
        existing = self.entities_by_key.get(key)
        if existing is None or existing is entity:
            return
        raise NonUniqueObjectError(
            f"Attempted to associate a different object with key '{key}'."
        )

    def delete(self, entity_or_key: Any) -> None:
        """엔티티 또는 문서 키를 삭제 대상으로 등록합니다.

        키로 삭제할 때는 다음과 같이 동작합니다.

        - 추적 중이고 수정되지 않은 엔티티: 엔티티로 삭제하는 것과 같습니다.
        - 추적 중이고 수정된 엔티티: :class:`AmbiguousDeletionError`
        - 추적 중이 아닌 키: 삭제 명령을 바로 유예 명령 큐에 넣습니다.
        """
        if not isinstance(entity_or_key, str):
            self._delete_entity(entity_or_key)
            return

        key = entity_or_key
        entity = self.entities_by_key.get(key)
        if entity is not None:
            if self.entity_changed(entity, self.entities.get(entity)):
                raise AmbiguousDeletionError(
                    "Can't delete changed entity using identifier. "
                    "Use delete(entity) instead."
                )
            self._delete_entity(entity)
            return

        self.included_documents_by_key.pop(key, None)
        self.known_missing_ids.add(key)
        self.defer(DeleteCommandData(key=key))

    def _delete_entity(self, entity: Any) -> None:
        entry = self.entities.get(entity)
        if entry is None:
            raise InvalidOperationError(
                f"{entity!r} is not associated with the session, "
                "cannot delete unknown entity instance"
            )
        if _is_read_only(entry.original_metadata):
            raise ReadOnlyViolationError(
                f"{entity!r} is marked as read only and cannot be deleted"
            )

        self.deleted.add(entity)
        if entry.key is not None:
            self.known_missing_ids.add(entry.key)

    def evict(self, entity: Any) -> None:
        """엔티티에 대한 모든 추적 정보를 지웁니다. 삭제 예정 목록에서도 빠집니다."""
        entry = self.entities.pop(entity, None)
        if entry is not None and entry.key is not None:
            self.entities_by_key.pop(entry.key, None)
            logger.debug("evicted %s", entry.key)
        self.deleted.discard(entity)

    def clear(self) -> None:
        self.entities.clear()
        self.deleted.clear()
        self.entities_by_key.clear()
        self.known_missing_ids.clear()

    def mark_read_only(self, entity: Any) -> None:
        """엔티티를 읽기 전용으로 만듭니다. 다음 저장 이후로는 삭제나 수정이 반영되지 않습니다."""
        self.get_metadata_for(entity)[READ_ONLY] = True

    def ignore_changes_for(self, entity: Any) -> None:
        self._get_document_metadata(entity).ignore_changes = True

    def explicitly_version(self, entity: Any) -> None:
        self.get_metadata_for(entity)[CREATE_VERSION] = True

    def defer(self, *commands: CommandData) -> None:
        """엔티티 추적과 관계없이 다음 저장 때 함께 보낼 명령을 등록합니다."""
        self._deferred_commands.extend(commands)

    # ---------------------------------------------------------------------
    # 저장

    def prepare_for_save_changes(self) -> SaveChangesData:
        """저장소로 보낼 명령 리스트를 만듭니다.

        유예 명령, 삭제 명령, PUT 명령 순서입니다. 호출하면 유예 명령 큐와 삭제 예정
        목록이 비워지며, 저장에 실패해도 되돌리지 않습니다.
        """
        if self.entity_to_json.cached_json_docs is None:
            with self.entity_to_json.caching_scope():
                return self.prepare_for_save_changes()

        self.entity_to_json.clear_cache()

        data = SaveChangesData(
            commands=list(self._deferred_commands),
            deferred_commands_count=len(self._deferred_commands),
        )
        self._deferred_commands.clear()

        self._prepare_for_entities_deletion(data)
        self._prepare_for_entities_puts(data)

        return data

    def _prepare_for_entities_deletion(self, data: SaveChangesData) -> None:
        for entity in self.deleted:
            entry = self.entities.get(entity)
            if entry is None or _is_read_only(entry.original_metadata):
                continue

            del self.entities[entity]
            if entry.key is None:
                # 저장된 적 없는 엔티티는 추적만 멈춥니다.
                continue
            self.entities_by_key.pop(entry.key, None)

            etag = entry.etag if self.use_optimistic_concurrency else None
            data.entities.append(entity)
            for listener in self.listeners.delete_listeners:
                listener.before_delete(entry.key, entity, entry.metadata)
            data.commands.append(DeleteCommandData(key=entry.key, etag=etag))

        self.deleted.clear()

    def _prepare_for_entities_puts(self, data: SaveChangesData) -> None:
        for entity, entry in self.entities.items():
            if not self.entity_changed(entity, entry):
                continue

            for listener in self.listeners.store_listeners:
                if listener.before_store(entry.key, entity, entry.metadata, entry.original_value):
                    self.entity_to_json.discard_cached(entity)

            data.entities.append(entity)
            if entry.key is not None:
                self.entities_by_key.pop(entry.key, None)
            data.commands.append(self._create_put_entity_command(entity, entry))

    def _create_put_entity_command(
        self, entity: Any, entry: DocumentMetadata
    ) -> PutCommandData:
        key = self.generate_entity_id.try_get_id_from_instance(entity)
        if key is not None and entry.key is not None and not _same_key(key, entry.key):
            raise IdentityError(
                f"Entity {type(entity).__qualname__} had document key '{entry.key}' "
                f"but now has document key property '{key}'. "
                "You cannot change the document key property of an entity loaded into the session"
            )

        document = self.entity_to_json.convert_entity_to_json(
            entry.key, entity, entry.metadata
        )

        metadata = {
            k: copy.deepcopy(v)
            for k, v in entry.metadata.items()
            if k not in TRANSIENT_METADATA
        }
        if not isinstance(entity, dict):
            metadata[PYTHON_TYPE] = self.conventions.get_python_type_name(type(entity))

        etag = None
        if self.use_optimistic_concurrency or entry.force_concurrency_check:
            etag = entry.etag or EMPTY_ETAG

        return PutCommandData(key=entry.key, document=document, metadata=metadata, etag=etag)

    def update_batch_results(
        self, results: Sequence[BatchResult], data: SaveChangesData
    ) -> None:
        """배치 결과로 추적 정보를 갱신합니다.

        ``data`` 는 결과를 만든 :meth:`prepare_for_save_changes` 의 리턴값입니다.
        """
        offset = data.deferred_commands_count

        for i in range(offset, len(results)):
            result = results[i]
            if result.method.upper() != "PUT":
                continue

            entity = data.entities[i - offset]
            entry = self.entities.get(entity)
            if entry is None:
                continue

            metadata = copy.deepcopy(result.metadata)
            if result.etag is not None:
                metadata[ETAG] = result.etag
            self.entities_by_key[result.key] = entity

            entry.etag = result.etag
            entry.key = result.key
            entry.original_metadata = copy.deepcopy(metadata)
            entry.metadata = metadata
            entry.original_value = self.entity_to_json.convert_entity_to_json(
                entry.key, entity, entry.metadata
            )

            self.generate_entity_id.try_set_identity(entity, result.key)

            for listener in self.listeners.store_listeners:
                listener.after_store(result.key, entity, metadata)

        last_put = next((r for r in reversed(results) if r.method.upper() == "PUT"), None)
        if last_put is not None:
            self.last_written_etag = last_put.etag

    def log_batch(self, data: SaveChangesData) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        lines = [f"Saving {len(data.commands)} changes"]
        lines.extend(f"\t{command.method} {command.key}" for command in data.commands)
        logger.debug("\n".join(lines))
