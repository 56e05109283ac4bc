"""FastDoc - 문서 데이터베이스 클라이언트를 위한 Unit of Work 엔진."""
from .config import DocumentConventions  # noqa
from .diff import ChangeType, DocumentsChanges, deep_equals  # noqa
from .listeners import DocumentSessionListeners  # noqa
from .serializer import PydanticSerializer  # noqa
from .session import DocumentSessionOperations  # noqa
from .uow import DocumentSession  # noqa
