"""세션 라이프사이클 훅(리스너) 레지스트리."""
from __future__ import annotations

from typing import Any, Union

from fastdoc.core.errors import FastDocError
from fastdoc.core.models import (
    DocumentConversionListener,
    DocumentDeleteListener,
    DocumentStoreListener,
)

AnyListener = Union[
    DocumentConversionListener, DocumentStoreListener, DocumentDeleteListener
]


class DocumentSessionListeners:
    """이벤트 종류별 리스너 리스트. 리스너는 등록된 순서대로 호출됩니다."""

    def __init__(self):
        self.conversion_listeners = list[DocumentConversionListener]()
        self.store_listeners = list[DocumentStoreListener]()
        self.delete_listeners = list[DocumentDeleteListener]()

    def __repr__(self):
        return (
            f"DocumentSessionListeners[conversion={len(self.conversion_listeners)}, "
            f"store={len(self.store_listeners)}, delete={len(self.delete_listeners)}]"
        )

    def register(self, listener: AnyListener) -> AnyListener:
        """리스너를 구현한 인터페이스에 해당하는 모든 리스트에 등록합니다."""
        registered = False

        if isinstance(listener, DocumentConversionListener):
            self.conversion_listeners.append(listener)
            registered = True
        if isinstance(listener, DocumentStoreListener):
            self.store_listeners.append(listener)
            registered = True
        if isinstance(listener, DocumentDeleteListener):
            self.delete_listeners.append(listener)
            registered = True

        if not registered:
            raise FastDocError(f"unknown listener type: {type(listener)!r}")

        return listener

    def listener(self, cls: type[Any]) -> type[Any]:
        """리스너 클래스 데코레이터. 클래스를 인스턴스화해서 등록합니다."""
        self.register(cls())
        return cls
