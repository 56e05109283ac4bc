"""엔티티 <-> 문서 트리 변환기.

pydantic 을 이용해 다음 타입을 JSON 호환 트리로 변환합니다.

- :class:`pydantic.BaseModel` 하위 클래스
- ``@dataclass`` 클래스
- 일반 클래스 (``__dict__`` 의 공개 속성)
- 원시 문서 (``dict``)
"""
from __future__ import annotations

import copy
import dataclasses
from functools import lru_cache
from typing import Any, Optional, Type

from pydantic import BaseModel, TypeAdapter
from pydantic_core import to_jsonable_python

from fastdoc.core.models import Document, MissingFieldCallback


@lru_cache(maxsize=None)
def _adapter(entity_type: Type[Any]) -> TypeAdapter:
    return TypeAdapter(entity_type)


def known_fields(entity_type: Type[Any]) -> Optional[set[str]]:
    """타입이 선언한 필드(별칭 포함) 이름. 선언이 없는 타입은 ``None``."""
    if issubclass(entity_type, BaseModel):
        names = set[str]()
        for name, info in entity_type.model_fields.items():
            names.add(name)
            if info.alias:
                names.add(info.alias)
        return names
    if dataclasses.is_dataclass(entity_type):
        return {f.name for f in dataclasses.fields(entity_type)}
    return None


class PydanticSerializer:
    """기본 직렬화기. :class:`~fastdoc.core.models.AbstractSerializer` 구현입니다."""

    def serialize(self, entity: Any) -> Document:
        if isinstance(entity, dict):
            return copy.deepcopy(entity)

        if isinstance(entity, BaseModel):
            return entity.model_dump(mode="json", by_alias=True)

        if dataclasses.is_dataclass(entity):
            return _adapter(type(entity)).dump_python(entity, mode="json")

        attrs = {k: v for k, v in vars(entity).items() if not k.startswith("_")}
        return to_jsonable_python(attrs)

    def deserialize(
        self,
        document: Document,
        entity_type: Type[Any],
        on_missing_field: Optional[MissingFieldCallback] = None,
    ) -> Any:
        """문서를 `entity_type` 객체로 만듭니다.

        타입에 없는 필드는 버려지며, `on_missing_field` 가 주어지면 버려진 필드마다
        ``(entity, name, value)`` 로 호출됩니다.
        """
        if entity_type is dict:
            return copy.deepcopy(document)

        fields = known_fields(entity_type)

        if fields is None:
            entity = entity_type.__new__(entity_type)
            entity.__dict__.update(copy.deepcopy(document))
            return entity

        missing = {k: v for k, v in document.items() if k not in fields}

        if issubclass(entity_type, BaseModel):
            entity = entity_type.model_validate(document)
            if entity.model_extra is not None:
                # extra="allow" 모델은 남는 필드를 스스로 보관합니다.
                missing = {}
        else:
            data = {k: v for k, v in document.items() if k in fields}
            entity = _adapter(entity_type).validate_python(data)

        if on_missing_field:
            for name, value in missing.items():
                on_missing_field(entity, name, copy.deepcopy(value))

        return entity
