"""PostgreSQL-backed document store (one JSONB table, optimistic versions)."""

import logging
from typing import Any

import psycopg
from psycopg import sql
from psycopg.types.json import Jsonb

from tenancy_ledger.config import PostgresConfig
from tenancy_ledger.exceptions import ConcurrencyConflictError, StoreError, TransientStoreError
from tenancy_ledger.store.base import Delete, Document, LedgerStore, Put, Update, Write

logger = logging.getLogger(__name__)


class PostgresLedgerStore(LedgerStore):
    """Store documents in ``(collection, id, version, data JSONB)`` rows.

    ``commit`` runs every write inside one database transaction and guards
    updates with ``WHERE version = %s``, so a lost race rolls the whole batch
    back and surfaces as :class:`ConcurrencyConflictError`.
    """

    def __init__(self, config: PostgresConfig | str) -> None:
        if isinstance(config, str):
            self.conninfo = config
            self.table = "ledger_documents"
        else:
            self.conninfo = config.connection_string
            self.table = config.table
        self._table = sql.Identifier(self.table)

    def _connect(self) -> psycopg.Connection:
        try:
            return psycopg.connect(self.conninfo)
        except psycopg.OperationalError as e:
            raise TransientStoreError(f"Cannot connect to PostgreSQL: {e}") from e

    def create_schema(self) -> None:
        """Create the documents table if missing."""
        ddl = sql.SQL(
            """
            CREATE TABLE IF NOT EXISTS {table} (
                seq BIGSERIAL,
                collection TEXT NOT NULL,
                id TEXT NOT NULL,
                version INTEGER NOT NULL,
                data JSONB NOT NULL,
                PRIMARY KEY (collection, id)
            )
            """
        ).format(table=self._table)
        index = sql.SQL(
            "CREATE INDEX IF NOT EXISTS {name} ON {table} USING GIN (data jsonb_path_ops)"
        ).format(name=sql.Identifier(f"{self.table}_data_idx"), table=self._table)
        with self._connect() as conn:
            self._execute(conn, ddl)
            self._execute(conn, index)
        logger.info("Schema ready: %s", self.table)

    def get(self, collection: str, doc_id: str) -> Document | None:
        query = sql.SQL(
            "SELECT version, data FROM {table} WHERE collection = %s AND id = %s"
        ).format(table=self._table)
        with self._connect() as conn:
            cur = self._execute(conn, query, (collection, doc_id))
            row = cur.fetchone()
        if row is None:
            return None
        return Document(collection, doc_id, row[0], row[1])

    def find(self, collection: str, **equals: Any) -> list[Document]:
        query = sql.SQL(
            "SELECT id, version, data FROM {table} "
            "WHERE collection = %s AND data @> %s ORDER BY seq"
        ).format(table=self._table)
        with self._connect() as conn:
            cur = self._execute(conn, query, (collection, Jsonb(equals)))
            rows = cur.fetchall()
        return [Document(collection, row[0], row[1], row[2]) for row in rows]

    def commit(self, writes: list[Write]) -> None:
        if not writes:
            return
        with self._connect() as conn:
            try:
                with conn.transaction():
                    for write in writes:
                        self._apply(conn, write)
            except psycopg.OperationalError as e:
                raise TransientStoreError(f"Commit outcome unknown: {e}") from e

    def _apply(self, conn: psycopg.Connection, write: Write) -> None:
        if isinstance(write, Put):
            stmt = sql.SQL(
                "INSERT INTO {table} (collection, id, version, data) VALUES (%s, %s, 1, %s) "
                "ON CONFLICT (collection, id) DO NOTHING"
            ).format(table=self._table)
            cur = self._execute(conn, stmt, (write.collection, write.doc_id, Jsonb(write.data)))
            if cur.rowcount == 0:
                raise ConcurrencyConflictError(f"{write.collection}/{write.doc_id} already exists")
        elif isinstance(write, Update):
            stmt = sql.SQL(
                "UPDATE {table} SET data = %s, version = version + 1 "
                "WHERE collection = %s AND id = %s AND version = %s"
            ).format(table=self._table)
            cur = self._execute(
                conn, stmt, (Jsonb(write.data), write.collection, write.doc_id, write.expected_version)
            )
            if cur.rowcount == 0:
                raise ConcurrencyConflictError(
                    f"{write.collection}/{write.doc_id} changed since version {write.expected_version}"
                )
        elif isinstance(write, Delete):
            stmt = sql.SQL(
                "DELETE FROM {table} WHERE collection = %s AND id = %s AND version = %s"
            ).format(table=self._table)
            cur = self._execute(conn, stmt, (write.collection, write.doc_id, write.expected_version))
            if cur.rowcount == 0:
                raise ConcurrencyConflictError(
                    f"{write.collection}/{write.doc_id} changed since version {write.expected_version}"
                )

    @staticmethod
    def _execute(conn: psycopg.Connection, query: sql.Composable, params: tuple = ()) -> psycopg.Cursor:
        try:
            return conn.execute(query, params)
        except psycopg.OperationalError as e:
            raise TransientStoreError(str(e)) from e
        except psycopg.DatabaseError as e:
            raise StoreError(str(e)) from e
