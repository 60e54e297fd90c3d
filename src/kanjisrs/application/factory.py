"""
Adapter Factory
Centralizes the logic for selecting the store, catalog and provider implementations.
"""

import logging

from kanjisrs.application.config import AppConfig
from kanjisrs.domain.ports import ProgressStore, SrsProvider, SubjectCatalog
from kanjisrs.infrastructure.adapters.json_catalog import JsonSubjectCatalog
from kanjisrs.infrastructure.adapters.memory_store import InMemoryProgressStore
from kanjisrs.infrastructure.adapters.sqlite_store import SqliteProgressStore
from kanjisrs.infrastructure.adapters.wanikani import WaniKaniAdapter

logger = logging.getLogger(__name__)


def get_progress_store(config: AppConfig) -> ProgressStore:
    """
    Returns the ProgressStore implementation selected by config.
    """
    if config.store_backend == "memory":
        return InMemoryProgressStore()
    return SqliteProgressStore(config.store_path)


def get_subject_catalog(config: AppConfig) -> SubjectCatalog:
    return JsonSubjectCatalog(config.data_dir)


def get_srs_provider(config: AppConfig) -> SrsProvider | None:
    """
    Returns the external SRS provider, or None when no API key is configured.
    """
    if not config.wanikani_api_key:
        logger.debug("No WaniKani API key configured; provider sync disabled")
        return None
    return WaniKaniAdapter(
        api_key=config.wanikani_api_key,
        url=config.wanikani_url,
        timeout=config.request_timeout,
    )
