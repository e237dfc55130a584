# appointments/services/__init__.py

from .services import (
    SessionQueryService,
    SessionLifecycleService,
    SessionServiceError,
    SessionNotFoundError,
    SessionAccessDeniedError,
    SessionStateError,
    ReviewError,
)
