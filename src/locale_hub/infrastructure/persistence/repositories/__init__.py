from ._cache_repo import SqlAlchemyCacheRepository
from ._history_repo import SqlAlchemyHistoryRepository
from ._key_repo import SqlAlchemyKeyRepository
from ._translation_repo import SqlAlchemyTranslationRepository
from ._usage_repo import SqlAlchemyUsageRepository

__all__ = [
    "SqlAlchemyCacheRepository",
    "SqlAlchemyHistoryRepository",
    "SqlAlchemyKeyRepository",
    "SqlAlchemyTranslationRepository",
    "SqlAlchemyUsageRepository",
]
