"""
db/query_utility.py
-------------------
Debug-instrumented query helpers shared by every database service.

These functions take the debug sink and connection explicitly, so they can
be called from scripts as well as through ``DatabaseService``, which
delegates to them.
"""

from typing import Any, Optional, Sequence

from db.connection import DBConnection, ResultType, Row
from utils.debug import Debug


# ── Read ──────────────────────────────────────────────────

def execute_select_query_with_debug(
    debug: Debug,
    db: DBConnection,
    sql: str,
    params: Optional[Sequence[Any]] = None,
    types: str = "",
    result_type: ResultType = ResultType.ASSOC,
) -> list[Row]:
    """Trace and run a SELECT, returning its rows."""
    debug.debug(f"SQL: {sql}")
    debug.debug_variable(list(params or []), "Params")
    results = db.execute_query(sql, params, types, result_type)
    debug.debug_variable(results, "Query [SELECT] Results")
    return results


def ensure_query_results_not_empty(debug: Debug, data: Sequence[Any], error_message: str) -> None:
    """Raise DatabaseException(error_message) when ``data`` is empty."""
    if not data:
        debug.fail_database(error_message)


# ── Write ─────────────────────────────────────────────────

def execute_update_query_with_debug(
    debug: Debug,
    db: DBConnection,
    sql: str,
    params: Optional[Sequence[Any]] = None,
    types: str = "",
) -> int:
    """Trace and run an INSERT/UPDATE/DELETE through the bound path."""
    debug.debug(f"SQL: {sql}")
    debug.debug_variable(list(params or []), "Params")
    rows = db.execute_query(sql, params, types)
    debug.debug_variable(rows, "Query [INSERT|UPDATE|DELETE] Rows Affected")
    return rows


def execute_query_with_debug(
    debug: Debug,
    db: DBConnection,
    sql: str,
    params: Optional[Sequence[Any]] = None,
    types: str = "",
) -> int:
    """
    Run a mutating statement, bound when parameters are given.

    Without parameters the statement goes through the raw path, which also
    accepts statements that cannot be prepared (e.g. LOAD DATA, DDL).
    """
    if params:
        debug.debug("Executing Param Bound SQL")
        return execute_update_query_with_debug(debug, db, sql, params, types)
    return execute_raw_query_with_debug(debug, db, sql)


def execute_raw_query_with_debug(debug: Debug, db: DBConnection, sql: str) -> int:
    """Run raw SQL and return rows returned (SELECT) or rows affected."""
    debug.debug(f"Raw SQL: {sql}")
    result = db.execute_raw_query(sql)
    affected_rows = len(result) if isinstance(result, list) else int(result)
    debug.debug_variable(affected_rows, "Query [RAW SQL] Rows Affected")
    return affected_rows


def ensure_row_update_result(debug: Debug, result: int, expected: int, error_message: str) -> None:
    """Raise DatabaseException when ``result`` is zero or differs from ``expected``."""
    if result == 0:
        debug.fail_database(f"{error_message} No rows were affected.")
    if result != expected:
        debug.fail_database(f"{error_message} Unexpected number of affected rows.")


# ── Helpers ───────────────────────────────────────────────

def get_sort_string(sort_asc: bool = True) -> str:
    return "ASC" if sort_asc else "DESC"
