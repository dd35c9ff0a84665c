"""Row locks that serialize concurrent checkouts and status changes.

SQLite drops FOR UPDATE, so the queries are compiled for PostgreSQL.
"""

from sqlalchemy.dialects import postgresql

from mye_backend.services.checkout import product_lock_query
from mye_backend.services.orders import order_lock_query


def compile_pg(query) -> str:
    return str(query.compile(dialect=postgresql.dialect()))


class TestProductLock:
    def test_locks_products_in_id_order(self):
        sql = compile_pg(product_lock_query({3, 1, 2}))

        assert sql.rstrip().endswith("FOR UPDATE")
        assert "ORDER BY products.id" in sql


class TestOrderLock:
    def test_locks_order_row_by_id(self):
        sql = compile_pg(order_lock_query(42))

        assert "FOR UPDATE OF orders" in sql
        assert "orders.id = " in sql

    def test_locks_order_row_by_number(self):
        sql = compile_pg(order_lock_query("MYE-1-1"))

        assert "FOR UPDATE OF orders" in sql
        assert "orders.order_number = " in sql

    def test_joined_customer_row_is_not_locked(self):
        sql = compile_pg(order_lock_query(42))

        assert "FOR UPDATE OF users" not in sql
