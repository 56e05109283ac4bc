from __future__ import annotations

import abc
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Literal, Optional, Protocol, Sequence, Type, Union

Document = dict[str, Any]
"""JSON 호환 값(dict, list, str, int, float, bool, None)으로 이루어진 문서 트리."""

EMPTY_ETAG = "00000000-0000-0000-0000-000000000000"
"""아직 저장소에 존재하지 않아야 하는 문서를 나타내는 etag."""

# 메타데이터 키
METADATA = "@metadata"
ID = "@id"
ETAG = "@etag"
LAST_MODIFIED = "@last-modified"
COLLECTION = "@collection"
PYTHON_TYPE = "@python-type"
READ_ONLY = "@read-only"
CREATE_VERSION = "@create-version"
NON_AUTHORITATIVE = "@non-authoritative"
DOES_NOT_EXIST = "@does-not-exist"
READ_VETO = "@read-veto"

TRANSIENT_METADATA = frozenset([ID, ETAG, LAST_MODIFIED, NON_AUTHORITATIVE])
"""서버가 관리하므로 PUT 요청에 실어 보내지 않는 메타데이터 키."""


@dataclass
class JsonDocument:
    """저장소에서 읽어온 문서."""

    key: str
    data_as_json: Document
    metadata: Document = field(default_factory=dict)
    etag: Optional[str] = None
    last_modified: Optional[datetime] = None
    non_authoritative_information: Optional[bool] = None


@dataclass
class DocumentMetadata:
    """세션이 추적하는 엔티티 하나에 대한 Unit of Work 정보."""

    key: Optional[str]
    """문서 키. 서버가 키를 할당하는 경우 첫 저장 전까지 ``None`` 입니다."""

    etag: Optional[str] = None
    original_value: Document = field(default_factory=dict)
    """서버와 일치한다고 알려진 마지막 문서 스냅샷."""

    original_metadata: Document = field(default_factory=dict)
    metadata: Document = field(default_factory=dict)
    ignore_changes: bool = False
    force_concurrency_check: bool = False


@dataclass
class PutCommandData:
    key: Optional[str]
    document: Document
    metadata: Document = field(default_factory=dict)
    etag: Optional[str] = None
    method: Literal["PUT"] = "PUT"


@dataclass
class DeleteCommandData:
    key: str
    etag: Optional[str] = None
    method: Literal["DELETE"] = "DELETE"


CommandData = Union[PutCommandData, DeleteCommandData]


@dataclass
class BatchResult:
    """배치 명령 하나에 대한 서버 응답."""

    method: str
    key: str
    etag: Optional[str] = None
    metadata: Document = field(default_factory=dict)


@dataclass
class SaveChangesData:
    """`prepare_for_save_changes` 의 결과.

    ``entities`` 는 유예 명령을 제외한 명령과 같은 순서로 정렬되어 있으므로
    ``deferred_commands_count`` 만큼 건너뛰면 배치 결과와 짝을 맞출 수 있습니다.
    """

    commands: list[CommandData] = field(default_factory=list)
    entities: list[Any] = field(default_factory=list)
    deferred_commands_count: int = 0


class AbstractDocumentStore(abc.ABC):
    """세션이 사용하는 원격 저장소의 추상 인터페이스입니다."""

    @abc.abstractmethod
    def get(self, key: str) -> Optional[JsonDocument]:
        """키에 해당하는 문서를 조회합니다. 없으면 ``None`` 을 리턴합니다."""
        raise NotImplementedError

    @abc.abstractmethod
    def batch(self, commands: Sequence[CommandData]) -> list[BatchResult]:
        """명령 리스트를 한 번에 실행하고 명령마다 하나씩 결과를 리턴합니다.

        Raises:
            :class:`~fastdoc.core.errors.ConcurrencyError`: etag 가 맞지 않을 때.
        """
        raise NotImplementedError


MissingFieldCallback = Callable[[Any, str, Any], None]
"""``(entity, field_name, raw_value)`` 를 받는 콜백."""


class AbstractSerializer(Protocol):
    def serialize(self, entity: Any) -> Document:
        ...

    def deserialize(
        self,
        document: Document,
        entity_type: Type[Any],
        on_missing_field: Optional[MissingFieldCallback] = None,
    ) -> Any:
        ...


class DocumentConversionListener:
    """엔티티 <-> 문서 변환 전후에 호출되는 훅.

    훅은 전달받은 문서나 메타데이터를 직접 수정할 수 있습니다.
    """

    def before_conversion_to_document(
        self, key: Optional[str], entity: Any, metadata: Document
    ) -> None:
        ...

    def after_conversion_to_document(
        self, key: Optional[str], entity: Any, document: Document, metadata: Document
    ) -> None:
        ...

    def before_conversion_to_entity(
        self, key: Optional[str], document: Document, metadata: Document
    ) -> None:
        ...

    def after_conversion_to_entity(
        self, key: Optional[str], document: Document, metadata: Document, entity: Any
    ) -> None:
        ...


class DocumentStoreListener:
    def before_store(
        self, key: Optional[str], entity: Any, metadata: Document, original: Document
    ) -> bool:
        """엔티티가 저장되기 직전에 호출됩니다.

        엔티티를 수정했다면 ``True`` 를 리턴해서 캐시된 변환 결과를 버리게 합니다.
        """
        return False

    def after_store(self, key: str, entity: Any, metadata: Document) -> None:
        ...


class DocumentDeleteListener:
    def before_delete(
        self, key: str, entity: Any, metadata: Optional[Document]
    ) -> None:
        ...
