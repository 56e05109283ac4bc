from .errors import (  # noqa
    AmbiguousDeletionError,
    ConcurrencyError,
    DocumentNotFoundError,
    FastDocError,
    IdentityError,
    InvalidOperationError,
    MaxRequestsExceededError,
    NonAuthoritativeInformationError,
    NonUniqueObjectError,
    ReadOnlyViolationError,
    ReadVetoError,
)
from .models import (  # noqa
    EMPTY_ETAG,
    AbstractDocumentStore,
    AbstractSerializer,
    BatchResult,
    CommandData,
    DeleteCommandData,
    Document,
    DocumentConversionListener,
    DocumentDeleteListener,
    DocumentMetadata,
    DocumentStoreListener,
    JsonDocument,
    PutCommandData,
    SaveChangesData,
)
