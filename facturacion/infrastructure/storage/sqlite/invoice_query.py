"""
SQL builders for listing invoices.

Sort columns come from a fixed map; user input only ever reaches the
query as bound parameters.
"""

from typing import Any

from facturacion.core.entities.invoice import InvoiceListParams

SORT_COLUMNS: dict[str, str] = {
    "id": "f.id",
    "fecha_emision": "f.fecha_emision",
    "importe": "f.importe_centimos",
    "estado": "f.estado",
    "numero": "f.numero",
    "descripcion": "f.descripcion",
    "cliente_id": "f.cliente_id",
    "cliente_nombre": "c.nombre",
}

INVOICE_COLUMNS = """
    f.id, f.usuario_id, f.cliente_id, f.fecha_emision, f.importe_centimos,
    f.estado, f.numero, f.descripcion, f.archivo, c.nombre AS cliente_nombre
"""

# Number and description compare with whitespace removed; dates compare
# in their DD/MM/YYYY rendering.
SEARCH_CLAUSE = """
    AND (
        REPLACE(LOWER(COALESCE(f.numero, '')), ' ', '') LIKE ?
        OR REPLACE(LOWER(COALESCE(f.descripcion, '')), ' ', '') LIKE ?
        OR strftime('%d/%m/%Y', f.fecha_emision) LIKE ?
    )
"""


def build_list_query(owner_id: int, params: InvoiceListParams) -> tuple[str, list[Any]]:
    """
    Build the SELECT for one page of an owner's invoices.

    Rows are ordered by the requested column, then by id in the same
    direction so pages are stable when sort values tie.
    """
    column = SORT_COLUMNS[params.sort_field]
    direction = params.sort_order.value

    sql = f"""
        SELECT {INVOICE_COLUMNS}
        FROM facturas f
        LEFT JOIN clientes c ON c.id = f.cliente_id AND c.usuario_id = f.usuario_id
        WHERE f.usuario_id = ?
    """
    args: list[Any] = [owner_id]

    pattern = params.search_pattern
    if pattern is not None:
        sql += SEARCH_CLAUSE
        args.extend([pattern, pattern, pattern])

    sql += f" ORDER BY {column} {direction}, f.id {direction} LIMIT ? OFFSET ?"
    args.extend([params.limit, params.offset])
    return sql, args


def build_get_query(owner_id: int, invoice_id: int) -> tuple[str, list[Any]]:
    """Build the SELECT for one owned invoice."""
    sql = f"""
        SELECT {INVOICE_COLUMNS}
        FROM facturas f
        LEFT JOIN clientes c ON c.id = f.cliente_id AND c.usuario_id = f.usuario_id
        WHERE f.id = ? AND f.usuario_id = ?
    """
    return sql, [invoice_id, owner_id]


def build_count_query(owner_id: int) -> tuple[str, list[Any]]:
    """Count every invoice of an owner, ignoring any search text."""
    return "SELECT COUNT(*) FROM facturas WHERE usuario_id = ?", [owner_id]
