"""db: read-only SQLAlchemy adapters for ``spending_analysis``.

Public exports
--------------
- ``Base`` and the ORM tables in ``spending_analysis.db.models``
- Session helpers in ``spending_analysis.db.client``
- ``SqlTransactionSource`` / ``SqlCategoryDirectory`` collaborators
"""

from __future__ import annotations

from .client import create_session_factory, session_scope
from .models import Base, SaCategory, SaTransaction
from .sources import SqlCategoryDirectory, SqlTransactionSource

metadata = Base.metadata

__all__ = [
    "Base",
    "SaCategory",
    "SaTransaction",
    "SqlCategoryDirectory",
    "SqlTransactionSource",
    "create_session_factory",
    "metadata",
    "session_scope",
]
