"""Common FastAPI dependencies.

The data provider is built once per process from settings; tests swap it out through
``app.dependency_overrides[get_data_provider]``.
"""

from __future__ import annotations

from functools import lru_cache

from classhub.core.config import settings
from classhub.services.data_provider import DataProvider, build_data_provider


@lru_cache(maxsize=1)
def _provider() -> DataProvider:
    return build_data_provider(settings)


def get_data_provider() -> DataProvider:
    return _provider()
