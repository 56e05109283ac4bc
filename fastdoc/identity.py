"""엔티티의 식별자(문서 키) 속성을 읽고 쓰는 모듈."""
from __future__ import annotations

import dataclasses
from typing import Any, Optional, Type

from pydantic import BaseModel

from fastdoc.config import DocumentConventions


class EntityIdGenerator:
    """Conventions 의 ``identity_property`` 를 이용해 엔티티 키를 다룹니다."""

    def __init__(self, conventions: DocumentConventions):
        self.conventions = conventions

    @property
    def identity_property(self) -> str:
        return self.conventions.identity_property

    def has_identity_property(self, entity_type: Type[Any]) -> bool:
        """`entity_type` 이 식별자 필드를 선언했는지 여부.

        선언된 필드 목록이 없는 일반 클래스는 항상 ``True`` 입니다.
        """
        if entity_type is dict:
            return False
        if isinstance(entity_type, type) and issubclass(entity_type, BaseModel):
            return self.identity_property in entity_type.model_fields
        if dataclasses.is_dataclass(entity_type):
            return self.identity_property in {
                f.name for f in dataclasses.fields(entity_type)
            }
        return True

    def try_get_id_from_instance(self, entity: Any) -> Optional[str]:
        """엔티티에 할당된 키를 리턴합니다. 없으면 ``None``."""
        if entity is None or isinstance(entity, dict):
            return None
        value = getattr(entity, self.identity_property, None)
        return value if isinstance(value, str) and value else None

    def try_set_identity(self, entity: Any, key: Optional[str]) -> None:
        if key is None or isinstance(entity, dict):
            return
        if not self.has_identity_property(type(entity)):
            return
        if isinstance(entity, BaseModel):
            # validate_assignment 설정과 관계없이 값을 바로 넣습니다.
            entity.__dict__[self.identity_property] = key
        else:
            setattr(entity, self.identity_property, key)

    def generate_document_key_for_storage(self, entity: Any) -> str:
        """새 키를 만들어 엔티티에 기록하고 리턴합니다."""
        key = self.conventions.generate_document_key(entity)
        self.try_set_identity(entity, key)
        return key
