class FastDocError(Exception):
    """``FastDoc`` 와 관련된 모든 에러의 기본 클래스."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    ...


class IdentityError(FastDocError):
    """엔티티의 문서 키를 결정할 수 없거나 키가 임의로 바뀐 경우."""

    ...


class NonUniqueObjectError(FastDocError):
    """서로 다른 두 객체가 같은 문서 키를 사용하려는 경우."""

    ...


class ReadOnlyViolationError(FastDocError):
    """읽기 전용으로 표시된 엔티티를 삭제하려는 경우."""

    ...


class AmbiguousDeletionError(FastDocError):
    """변경된 엔티티를 키만으로 삭제하려는 경우."""

    ...


class InvalidOperationError(FastDocError):
    """현재 세션 상태에서 허용되지 않는 작업."""

    ...


class ConcurrencyError(FastDocError):
    """서버의 etag 와 요청의 etag 가 일치하지 않을 때 저장소가 발생시킵니다."""

    ...


class NonAuthoritativeInformationError(FastDocError):
    """커밋되지 않은 트랜잭션에 의해 수정 중인 문서를 받은 경우."""

    ...


class ReadVetoError(FastDocError):
    """서버 트리거에 의해 문서 읽기가 거부된 경우."""

    ...


class DocumentNotFoundError(FastDocError):
    """저장소에 해당 키의 문서가 없는 경우."""

    ...


class MaxRequestsExceededError(FastDocError):
    """세션당 허용된 최대 요청 수를 넘은 경우."""

    ...
