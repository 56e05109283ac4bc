"""문서 트리 구조 비교.

두 문서 트리를 재귀적으로 비교해서 필드 단위의 변경 내역(:class:`DocumentsChanges`)
을 만듭니다. 세션의 변경 감지와 ``fastdoc diff`` 명령어가 이 모듈을 사용합니다.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ChangeType(str, Enum):
    DOCUMENT_DELETED = "DOCUMENT_DELETED"
    DOCUMENT_ADDED = "DOCUMENT_ADDED"
    FIELD_CHANGED = "FIELD_CHANGED"
    NEW_FIELD = "NEW_FIELD"
    REMOVED_FIELD = "REMOVED_FIELD"
    ARRAY_VALUE_ADDED = "ARRAY_VALUE_ADDED"
    ARRAY_VALUE_REMOVED = "ARRAY_VALUE_REMOVED"


@dataclass(frozen=True)
class DocumentsChanges:
    """문서의 필드 하나에 대한 변경 내역."""

    change: ChangeType
    field_name: Optional[str] = None
    """변경된 필드 경로. 중첩 필드는 ``a.b``, 배열 원소는 ``a[0]`` 형식입니다."""

    field_old_value: Optional[str] = None
    field_new_value: Optional[str] = None
    field_old_type: Optional[str] = None
    field_new_type: Optional[str] = None


def token_type(value: Any) -> str:
    """JSON 값의 타입 이름을 리턴합니다."""
    # bool 은 int 의 하위 클래스이므로 먼저 검사해야 합니다.
    if value is None:
        return "Null"
    if isinstance(value, bool):
        return "Boolean"
    if isinstance(value, int):
        return "Integer"
    if isinstance(value, float):
        return "Float"
    if isinstance(value, str):
        return "String"
    if isinstance(value, dict):
        return "Object"
    if isinstance(value, (list, tuple)):
        return "Array"
    return type(value).__name__


def token_to_str(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), default=str)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def scalar_equals(new: Any, old: Any) -> bool:
    """정수와 실수는 크기가 같으면 같은 값으로 취급합니다."""
    if _is_number(new) and _is_number(old):
        return new == old
    return token_type(new) == token_type(old) and new == old


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def deep_equals(
    new: Any,
    old: Any,
    changes: Optional[list[DocumentsChanges]] = None,
    path: str = "",
) -> bool:
    """`new` 와 `old` 트리가 구조적으로 같은지 비교합니다.

    `changes` 가 주어지면 모든 차이를 끝까지 찾아 추가하고, 그렇지 않으면 첫
    차이에서 바로 ``False`` 를 리턴합니다.
    """
    if isinstance(new, dict) and isinstance(old, dict):
        return _objects_equal(new, old, changes, path)

    if isinstance(new, (list, tuple)) and isinstance(old, (list, tuple)):
        return _arrays_equal(new, old, changes, path)

    if scalar_equals(new, old):
        return True

    if changes is not None:
        changes.append(
            DocumentsChanges(
                change=ChangeType.FIELD_CHANGED,
                field_name=path,
                field_old_value=token_to_str(old),
                field_new_value=token_to_str(new),
                field_old_type=token_type(old),
                field_new_type=token_type(new),
            )
        )
    return False


def _objects_equal(
    new: dict[str, Any],
    old: dict[str, Any],
    changes: Optional[list[DocumentsChanges]],
    path: str,
) -> bool:
    equal = True

    for name, value in new.items():
        if name in old:
            continue
        if changes is None:
            return False
        equal = False
        changes.append(
            DocumentsChanges(
                change=ChangeType.NEW_FIELD,
                field_name=_join(path, name),
                field_new_value=token_to_str(value),
                field_new_type=token_type(value),
            )
        )

    for name, value in old.items():
        if name in new:
            continue
        if changes is None:
            return False
        equal = False
        changes.append(
            DocumentsChanges(
                change=ChangeType.REMOVED_FIELD,
                field_name=_join(path, name),
                field_old_value=token_to_str(value),
                field_old_type=token_type(value),
            )
        )

    for name, value in new.items():
        if name not in old:
            continue
        if not deep_equals(value, old[name], changes, _join(path, name)):
            if changes is None:
                return False
            equal = False

    return equal


def _same_container_kind(a: Any, b: Any) -> bool:
    if isinstance(a, dict) and isinstance(b, dict):
        return True
    return isinstance(a, (list, tuple)) and isinstance(b, (list, tuple))


def _arrays_equal(
    new: list[Any],
    old: list[Any],
    changes: Optional[list[DocumentsChanges]],
    path: str,
) -> bool:
    """배열 원소를 비교합니다.

    길이가 같으면 같은 위치의 컨테이너 원소끼리 재귀 비교합니다. 나머지 원소는
    위치와 관계없이 값으로 짝을 짓고, 새 배열에만 있는 값은 ``ARRAY_VALUE_ADDED``,
    이전 배열에만 있는 값은 ``ARRAY_VALUE_REMOVED`` 로 기록합니다.
    """
    equal = True
    new_rest, old_rest = list(new), list(old)

    if len(new) == len(old):
        new_rest, old_rest = [], []
        for i, (new_item, old_item) in enumerate(zip(new, old)):
            if not _same_container_kind(new_item, old_item):
                new_rest.append(new_item)
                old_rest.append(old_item)
            elif not deep_equals(new_item, old_item, changes, f"{path}[{i}]"):
                if changes is None:
                    return False
                equal = False

    # 같은 값이 여러 번 나오면 개수만큼만 짝을 짓습니다.
    added = list[Any]()
    removed = list(old_rest)
    for item in new_rest:
        for j, old_item in enumerate(removed):
            if deep_equals(item, old_item):
                del removed[j]
                break
        else:
            added.append(item)

    if not added and not removed:
        if all(deep_equals(a, b) for a, b in zip(new_rest, old_rest)):
            return equal
        # 값은 같고 순서만 바뀌면 배열 전체를 FIELD_CHANGED 로 기록합니다.
        if changes is not None:
            changes.append(
                DocumentsChanges(
                    change=ChangeType.FIELD_CHANGED,
                    field_name=path,
                    field_old_value=token_to_str(old),
                    field_new_value=token_to_str(new),
                    field_old_type=token_type(old),
                    field_new_type=token_type(new),
                )
            )
        return False

    if changes is None:
        return False

    for item in removed:
        changes.append(
            DocumentsChanges(
                change=ChangeType.ARRAY_VALUE_REMOVED,
                field_name=path,
                field_old_value=token_to_str(item),
                field_old_type=token_type(item),
            )
        )
    for item in added:
        changes.append(
            DocumentsChanges(
                change=ChangeType.ARRAY_VALUE_ADDED,
                field_name=path,
                field_new_value=token_to_str(item),
                field_new_type=token_type(item),
            )
        )
    return False
