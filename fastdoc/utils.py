"""컬렉션 및 콘솔 출력 유틸리티."""
from __future__ import annotations

from typing import Any, Iterable, Iterator, MutableMapping, MutableSet, Optional, TypeVar

from colorama import init as init_colors

init_colors()  # For Windows environment

from colorama import Fore, Style  # noqa: E402

K = TypeVar("K")
V = TypeVar("V")


def fg(text, color=Fore.WHITE):
    """텍스트를 지정된 ANSI 컬러로 출력합니다."""
    return f"{color}{text}{Fore.RESET}"


def bold(text, color=Fore.WHITE):
    """텍스트를 지정된 ANSI 컬러와 밝기 효과를 주어 출력합니다."""
    return f"{Style.BRIGHT}{color}{text}{Style.RESET_ALL}"


class IdentityDict(MutableMapping[K, V]):
    """값 동등성(``__eq__``)이 아닌 객체 동일성(``is``)으로 키를 비교하는 dict.

    내부적으로 ``id(key)`` 를 핸들로 사용하며, 키 객체에 대한 참조를 함께
    보관하므로 항목이 살아있는 동안 핸들이 재사용되지 않습니다.
    해시 불가능한 객체(예: ``@dataclass`` 인스턴스)도 키로 쓸 수 있습니다.
    """

    def __init__(self, items: Optional[Iterable[tuple[K, V]]] = None):
        self._data: dict[int, tuple[K, V]] = {}
        for key, value in items or ():
            self[key] = value

    def __getitem__(self, key: K) -> V:
        return self._data[id(key)][1]

    def __setitem__(self, key: K, value: V) -> None:
        self._data[id(key)] = (key, value)

    def __delitem__(self, key: K) -> None:
        del self._data[id(key)]

    def __contains__(self, key: object) -> bool:
        return id(key) in self._data

    def __iter__(self) -> Iterator[K]:
        return (key for key, _ in list(self._data.values()))

    def __len__(self) -> int:
        return len(self._data)

    def items(self):  # type: ignore[override]
        return list(self._data.values())

    def __repr__(self) -> str:
        return f"IdentityDict({self.items()!r})"


class IdentitySet(MutableSet[K]):
    """객체 동일성으로 원소를 비교하는 집합. 삽입 순서를 유지합니다."""

    def __init__(self, items: Optional[Iterable[K]] = None):
        self._data: dict[int, K] = {}
        for item in items or ():
            self.add(item)

    def add(self, item: K) -> None:
        self._data.setdefault(id(item), item)

    def discard(self, item: K) -> None:
        self._data.pop(id(item), None)

    def __contains__(self, item: object) -> bool:
        return id(item) in self._data

    def __iter__(self) -> Iterator[K]:
        return iter(list(self._data.values()))

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"IdentitySet({list(self._data.values())!r})"


class CaseInsensitiveDict(MutableMapping[str, V]):
    """대소문자 구분 없이 문자열 키를 비교하는 dict. 원래 키 표기는 보존합니다."""

    def __init__(self, items: Optional[Iterable[tuple[str, V]]] = None):
        self._data: dict[str, tuple[str, V]] = {}
        for key, value in items or ():
            self[key] = value

    def __getitem__(self, key: str) -> V:
        return self._data[key.lower()][1]

    def __setitem__(self, key: str, value: V) -> None:
        self._data[key.lower()] = (key, value)

    def __delitem__(self, key: str) -> None:
        del self._data[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._data

    def __iter__(self) -> Iterator[str]:
        return (key for key, _ in list(self._data.values()))

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"CaseInsensitiveDict({dict(self.items())!r})"


class CaseInsensitiveSet(MutableSet[str]):
    """대소문자 구분 없이 문자열을 비교하는 집합."""

    def __init__(self, items: Optional[Iterable[str]] = None):
        self._data: dict[str, str] = {}
        for item in items or ():
            self.add(item)

    def add(self, item: str) -> None:
        self._data.setdefault(item.lower(), item)

    def discard(self, item: str) -> None:
        self._data.pop(item.lower(), None)

    def __contains__(self, item: Any) -> bool:
        return isinstance(item, str) and item.lower() in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._data.values()))

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"CaseInsensitiveSet({list(self._data.values())!r})"
