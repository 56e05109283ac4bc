"""세션 기본 설정(Conventions).

``setup.cfg`` 파일의 ``[fastdoc]`` 섹션에서 기본값을 바꿀 수 있습니다. ::

    [fastdoc]
    use_optimistic_concurrency = true
    max_number_of_requests_per_session = 50
    identity_property = id
"""
from __future__ import annotations

import dataclasses
import importlib
import uuid
from configparser import ConfigParser
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Type

from fastdoc.core.models import PYTHON_TYPE, Document


def default_type_tag_name(entity_type: Type[Any]) -> str:
    """클래스 이름을 소문자 복수형 컬렉션 이름으로 바꿉니다 (``User`` -> ``users``)."""
    name = entity_type.__name__.lower()
    if name.endswith("y") and name[-2:-1] not in "aeiou":
        return name[:-1] + "ies"
    if name.endswith(("s", "x", "z", "ch", "sh")):
        return name + "es"
    return name + "s"


def load_setupcfg(path: Path) -> dict[str, str]:
    """`path` 의 ``setup.cfg`` 에서 ``[fastdoc]`` 섹션 값을 읽습니다."""
    if (path / "setup.cfg").exists():
        config = ConfigParser()
        config.read(path / "setup.cfg", encoding="utf8")
        if "fastdoc" in config:
            return dict(config["fastdoc"])
    return {}


@dataclass
class DocumentConventions:
    """세션 동작 방식을 결정하는 설정.

    하나의 인스턴스를 여러 세션이 공유할 수 있습니다.
    """

    identity_property: str = "id"
    """문서 키를 담는 엔티티 속성 이름."""

    use_optimistic_concurrency: bool = False
    """``True`` 면 모든 쓰기 명령에 etag 를 실어 보내 동시 수정을 감지합니다."""

    allow_non_authoritative_information: bool = True
    """커밋되지 않은 트랜잭션이 수정 중인 문서를 받아들일지 여부."""

    max_number_of_requests_per_session: int = 30
    preserve_document_properties_not_found_on_model: bool = True
    """엔티티 타입에 없는 문서 필드를 기억했다가 저장할 때 되살릴지 여부."""

    generate_document_keys_on_store: bool = True
    """``False`` 면 키가 없는 엔티티의 키를 서버가 할당하도록 비워둡니다."""

    document_key_generator: Optional[Callable[[Any], str]] = None
    type_tag_name_finder: Optional[Callable[[Type[Any]], Optional[str]]] = None

    @staticmethod
    def load_from_config(path: Path = Path("."), **overrides: Any) -> DocumentConventions:
        """``setup.cfg`` 설정을 읽어서 :class:`DocumentConventions` 를 만듭니다."""
        values = load_setupcfg(path)
        kwargs = dict[str, Any]()

        for field in dataclasses.fields(DocumentConventions):
            if field.name not in values:
                continue
            raw = values[field.name]
            if field.type in ("bool", bool):
                kwargs[field.name] = ConfigParser.BOOLEAN_STATES[raw.strip().lower()]
            elif field.type in ("int", int):
                kwargs[field.name] = int(raw)
            elif field.type in ("str", str):
                kwargs[field.name] = raw.strip()

        kwargs.update(overrides)
        return DocumentConventions(**kwargs)

    def get_type_tag_name(self, entity_type: Type[Any]) -> Optional[str]:
        """엔티티 타입의 컬렉션 이름. 원시 문서(``dict``)는 컬렉션이 없습니다."""
        if entity_type is dict:
            return None
        if self.type_tag_name_finder:
            return self.type_tag_name_finder(entity_type)
        return default_type_tag_name(entity_type)

    def get_dynamic_tag_name(self, entity: Any) -> Optional[str]:
        return self.get_type_tag_name(type(entity))

    def get_python_type_name(self, entity_type: Type[Any]) -> str:
        return f"{entity_type.__module__}.{entity_type.__qualname__}"

    def find_python_type(self, metadata: Document) -> Optional[Type[Any]]:
        """메타데이터에 기록된 파이썬 타입을 찾습니다. 없으면 ``None``."""
        type_name = metadata.get(PYTHON_TYPE)
        if not isinstance(type_name, str) or "." not in type_name:
            return None

        module_name, _, qualname = type_name.rpartition(".")
        try:
            target: Any = importlib.import_module(module_name)
        except ImportError:
            return None

        for attr in qualname.split("."):
            target = getattr(target, attr, None)
            if target is None:
                return None

        return target if isinstance(target, type) else None

    def generate_document_key(self, entity: Any) -> str:
        if self.document_key_generator:
            return self.document_key_generator(entity)

        tag = self.get_dynamic_tag_name(entity)
        suffix = uuid.uuid4().hex
        return f"{tag}/{suffix}" if tag else suffix
