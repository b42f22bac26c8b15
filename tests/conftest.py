"""
Pytest configuration for synthetic-export.

Provides fixtures for:
- Constant-value columns and the two-table layout used across tests
- A small-chunk ForkJoin so row generation always spans several tasks
- Settings isolated from the developer's environment
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from synthexport.config import Settings, get_settings
from synthexport.domain.models import Column, Table
from synthexport.parallel import ForkJoin

CONSTANT_VALUE = "ABC"


def constant_generator() -> str:
    return CONSTANT_VALUE


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """Ignore EXPORT_* and LOG_* variables from the outer environment."""
    for name in list(Settings.model_fields):
        alias = Settings.model_fields[name].alias
        if alias:
            monkeypatch.delenv(alias, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fork_join() -> ForkJoin:
    return ForkJoin(max_workers=4, chunk_rows=7)


@pytest.fixture
def column() -> Column:
    return Column(name="column", size=3, sql_type="CHAR[3]", generator=constant_generator)


@pytest.fixture
def table_a(column: Column) -> Table:
    return Table(id_value="A", columns=[column], delimiter="|", percent_size=Decimal("0.5"))


@pytest.fixture
def table_b(column: Column) -> Table:
    second = column.model_copy(update={"name": "column_2"})
    return Table(
        id_value="B", columns=[column, second], delimiter="|", percent_size=Decimal("0.5")
    )
