"""
SQLite implementation of client storage.
"""

import aiosqlite

from facturacion.config import get_logger
from facturacion.core.entities import Client
from facturacion.core.exceptions import DatabaseError, DuplicateClientEmailError
from facturacion.core.interfaces import IClientStore
from facturacion.infrastructure.storage.sqlite.connection import ConnectionPool

logger = get_logger(__name__)

CLIENT_COLUMNS = "id, usuario_id, nombre, email, telefono, direccion_fiscal"


class SQLiteClientStore(IClientStore):
    """SQLite implementation of client storage."""

    def __init__(self, pool: ConnectionPool):
        self.pool = pool

    async def create_client(self, client: Client) -> Client:
        """Create a client; the email must not belong to any other client."""
        if client.email and await self._email_in_use(client.email):
            raise DuplicateClientEmailError(client.email)

        try:
            async with self.pool.transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO clientes (usuario_id, nombre, email, telefono, direccion_fiscal)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        client.usuario_id,
                        client.nombre,
                        client.email,
                        client.telefono,
                        client.direccion_fiscal,
                    ),
                )
                client_id = cursor.lastrowid
        except aiosqlite.IntegrityError as e:
            raise self._integrity_error(e, client, "create_client") from e

        logger.info("client_created", client_id=client_id, owner_id=client.usuario_id)
        return client.model_copy(update={"id": client_id})

    async def get_client(self, owner_id: int, client_id: int) -> Client | None:
        """Get an owned client."""
        async with self.pool.acquire() as conn:
            cursor = await conn.execute(
                f"SELECT {CLIENT_COLUMNS} FROM clientes WHERE id = ? AND usuario_id = ?",
                (client_id, owner_id),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_client(row)

    async def update_client(self, client: Client) -> Client | None:
        """Persist all mutable fields of an owned client."""
        try:
            async with self.pool.transaction() as conn:
                cursor = await conn.execute(
                    """
                    UPDATE clientes SET
                        nombre = ?, email = ?, telefono = ?, direccion_fiscal = ?
                    WHERE id = ? AND usuario_id = ?
                    """,
                    (
                        client.nombre,
                        client.email,
                        client.telefono,
                        client.direccion_fiscal,
                        client.id,
                        client.usuario_id,
                    ),
                )
                updated = cursor.rowcount > 0
        except aiosqlite.IntegrityError as e:
            raise self._integrity_error(e, client, "update_client") from e

        if not updated:
            return None
        logger.info("client_updated", client_id=client.id, owner_id=client.usuario_id)
        return client

    async def delete_client(self, owner_id: int, client_id: int) -> bool:
        """Delete an owned client; its invoices keep existing without a client."""
        async with self.pool.transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM clientes WHERE id = ? AND usuario_id = ?",
                (client_id, owner_id),
            )
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info("client_deleted", client_id=client_id, owner_id=owner_id)
        return deleted

    async def list_clients(
        self, owner_id: int, limit: int = 10, offset: int = 0
    ) -> list[Client]:
        """List an owner's clients ordered by name."""
        async with self.pool.acquire() as conn:
            cursor = await conn.execute(
                f"""
                SELECT {CLIENT_COLUMNS} FROM clientes
                WHERE usuario_id = ?
                ORDER BY nombre, id
                LIMIT ? OFFSET ?
                """,
                (owner_id, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_client(row) for row in rows]

    async def count_clients(self, owner_id: int) -> int:
        """Count an owner's clients."""
        async with self.pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT COUNT(*) FROM clientes WHERE usuario_id = ?",
                (owner_id,),
            )
            row = await cursor.fetchone()
            return row[0] if row else 0

    # Helper methods

    async def _email_in_use(self, email: str) -> bool:
        async with self.pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT 1 FROM clientes WHERE email = ? LIMIT 1",
                (email,),
            )
            return await cursor.fetchone() is not None

    def _integrity_error(
        self, error: aiosqlite.IntegrityError, client: Client, operation: str
    ) -> Exception:
        message = str(error)
        if "clientes.email" in message:
            return DuplicateClientEmailError(client.email or "")
        logger.error("client_integrity_error", operation=operation, error=message)
        return DatabaseError(operation, message)

    def _row_to_client(self, row: aiosqlite.Row) -> Client:
        """Convert database row to Client entity."""
        return Client(
            id=row["id"],
            usuario_id=row["usuario_id"],
            nombre=row["nombre"],
            email=row["email"],
            telefono=row["telefono"],
            direccion_fiscal=row["direccion_fiscal"],
        )
