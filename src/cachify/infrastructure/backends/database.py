"""Relational database cache backend implementation."""

import logging
import threading
import time
from collections.abc import Callable

from sqlalchemy import (
    Column,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    delete,
    insert,
    select,
)
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from cachify.core.entities.cache_config import CacheConfig
from cachify.core.entities.cache_entry import CacheEntry
from cachify.core.entities.cache_key import CacheKey
from cachify.core.services.signature import SignatureGenerator
from cachify.infrastructure.backends.base import BaseCacheBackend
from cachify.infrastructure.serializers.json import JsonSerializer, SerializationError

logger = logging.getLogger(__name__)

TRANSIENT_PREFIX = "_transient_"


def options_table(name: str, metadata: MetaData) -> Table:
    """Describe the key/value table entries are stored in.

    The table may be shared with other data; our rows are named
    ``_transient_<hash>`` where the hash ends with the cachify suffix.
    """
    return Table(
        name,
        metadata,
        Column("option_name", String(191), primary_key=True),
        Column("option_value", Text, nullable=False),
        Column("expires_at", Integer, nullable=True),
    )


def build_engine(url: str) -> Engine:
    """Create an engine for ``url``.

    An in-memory SQLite database only lives as long as its connection,
    so every thread shares a single connection to it.
    """
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:"):
        return create_engine(
            url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_engine(url)


class DatabaseCacheBackend(BaseCacheBackend):
    """Cache backend storing structured entries as database rows.

    Entries keep the counters of the rendering request so detailed
    signatures can compare them with the serving request. Expired rows
    are dropped when read.
    """

    method = "DB"

    def __init__(
        self,
        config: CacheConfig | None = None,
        engine: Engine | None = None,
        serializer: JsonSerializer | None = None,
        signature: SignatureGenerator | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the database backend.

        Args:
            config: Cache configuration, defaults otherwise.
            engine: Engine to use instead of one built from
                ``config.database_url``.
            serializer: Encodes entries for the value column.
            signature: Signature generator for printed entries.
            clock: Source of the current Unix time.
        """
        super().__init__(signature)
        self._config = config or CacheConfig()
        self._engine = engine
        self._serializer = serializer or JsonSerializer()
        self._clock = clock
        self._metadata = MetaData()
        self._table = options_table(self._config.database_table, self._metadata)
        self._lock = threading.Lock()
        self._ready = False

    @property
    def table(self) -> Table:
        return self._table

    def is_available(self) -> bool:
        return True

    def store_item(
        self,
        key: CacheKey,
        data: str,
        lifetime: int,
        sig_detail: bool = False,
    ) -> None:
        """Store the page with the counters of the rendering request."""
        if not self._accepts(data):
            return

        entry = CacheEntry(data=data, meta=self._signature.capture_meta())
        try:
            value = self._serializer.serialize(entry)
        except SerializationError as e:
            logger.warning("Cannot encode cache entry %s: %s", key.hash, e)
            return

        expires_at = int(self._clock()) + lifetime if lifetime > 0 else None
        name = self._option_name(key)
        try:
            engine = self._connect()
            with engine.begin() as conn:
                conn.execute(delete(self._table).where(self._table.c.option_name == name))
                conn.execute(
                    insert(self._table).values(
                        option_name=name,
                        option_value=value,
                        expires_at=expires_at,
                    )
                )
        except (SQLAlchemyError, UnicodeError) as e:
            logger.warning("Database store of %s failed: %s", name, e)

    def get_item(self, key: CacheKey) -> CacheEntry | None:
        name = self._option_name(key)
        try:
            engine = self._connect()
            with engine.begin() as conn:
                row = conn.execute(
                    select(self._table.c.option_value, self._table.c.expires_at).where(
                        self._table.c.option_name == name
                    )
                ).first()
                if row is None:
                    return None
                if row.expires_at is not None and row.expires_at <= self._clock():
                    conn.execute(delete(self._table).where(self._table.c.option_name == name))
                    return None
        except SQLAlchemyError as e:
            logger.warning("Database read of %s failed: %s", name, e)
            return None

        try:
            payload = self._serializer.deserialize(row.option_value)
        except SerializationError as e:
            logger.warning("Malformed cache entry %s: %s", name, e)
            return None
        return CacheEntry.from_dict(payload)

    def delete_item(self, key: CacheKey, url: str | None = None) -> None:
        name = self._option_name(key)
        try:
            engine = self._connect()
            with engine.begin() as conn:
                conn.execute(delete(self._table).where(self._table.c.option_name == name))
        except SQLAlchemyError as e:
            logger.warning("Database delete of %s failed: %s", name, e)

    def clear_cache(self) -> None:
        """Delete all cachify rows, leaving other rows untouched."""
        try:
            engine = self._connect()
            with engine.begin() as conn:
                conn.execute(delete(self._table).where(self._owned()))
        except SQLAlchemyError as e:
            logger.warning("Database flush failed: %s", e)

    def get_stats(self) -> int | None:
        """Return the summed UTF-8 size of all stored values."""
        try:
            engine = self._connect()
            with engine.connect() as conn:
                values = conn.execute(
                    select(self._table.c.option_value).where(self._owned())
                ).scalars().all()
        except SQLAlchemyError as e:
            logger.warning("Database stats failed: %s", e)
            return None

        if not values:
            return None
        return sum(len(value.encode("utf-8")) for value in values)

    def close(self) -> None:
        """Dispose of the engine's connection pool."""
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
            self._ready = False

    def _connect(self) -> Engine:
        """Create the engine and table on first use.

        Raises:
            SQLAlchemyError: If the database cannot be reached.
        """
        if self._ready and self._engine is not None:
            return self._engine

        with self._lock:
            if self._engine is None:
                self._engine = build_engine(self._config.database_url)
            if not self._ready:
                self._metadata.create_all(self._engine, checkfirst=True)
                self._ready = True
        return self._engine

    def _option_name(self, key: CacheKey) -> str:
        return TRANSIENT_PREFIX + key.hash

    def _owned(self):  # type: ignore[no-untyped-def]
        pattern = _escape_like(TRANSIENT_PREFIX) + "%" + _escape_like(self._config.hash_suffix)
        return self._table.c.option_name.like(pattern, escape="\\")


def _escape_like(value: str) -> str:
    for char in "\\%_":
        value = value.replace(char, "\\" + char)
    return value
