"""Shared fixtures for dumpcatalog tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
import structlog

from dumpcatalog.config import LoaderConfig
from dumpcatalog.storage import MemoryStorage

# mydumper-style dump used across the pipeline tests
SAMPLE_DUMP: dict[str, bytes] = {
    "db1-schema-create.sql": b"CREATE DATABASE `db1`;\n",
    "db1.t1-schema.sql": b"CREATE TABLE `t1` (\n  `id` int\n);\n",
    "db1.t1.1.sql": b"x" * 500,
    "db1.t1.2.sql": b"x" * 500,
    "db1.t2-schema.sql": b"CREATE TABLE `t2` (`id` int);\n",
    "db1.t2.1.sql": b"x" * 100,
}


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Undo any logging configuration a CLI test installed."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def sample_files() -> dict[str, bytes]:
    """Paths and contents of the sample dump."""
    return dict(SAMPLE_DUMP)


@pytest.fixture
def sample_storage() -> MemoryStorage:
    """In-memory copy of the sample dump."""
    return MemoryStorage(SAMPLE_DUMP, name="sample")


@pytest.fixture
def default_config() -> LoaderConfig:
    """Config with every option at its default."""
    return LoaderConfig(source="unused")
