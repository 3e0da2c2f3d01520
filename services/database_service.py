"""
services/database_service.py
----------------------------
Base class for every database-backed domain service.

Subclasses bind a logical database name and build their queries on top of
the validated read/write helpers below. Each helper adds one line of
context to a failure before re-raising it as a DatabaseException.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Optional, Sequence

from db import query_utility
from db.connection import ConnectionRegistry, ResultType, Row, get_registry
from exceptions import DatabaseException
from utils.debug import Debug
from utils.logger import get_logger

logger = get_logger(__name__)


class DatabaseService:
    """
    Validated query vocabulary over one ``DBConnection``.

    Args:
        db_name: Key into the ``db_config`` configuration set.
        debug_mode: Trace SQL, parameters and results.
        registry: Connection registry to draw from (defaults to the
            process-wide registry).
        debug: Debug sink to use instead of a fresh one.
    """

    def __init__(
        self,
        db_name: str,
        debug_mode: bool = False,
        registry: Optional[ConnectionRegistry] = None,
        debug: Optional[Debug] = None,
    ):
        self.debug = debug or Debug("database", debug_mode)
        self.registry = registry or get_registry()
        self.db = self.registry.get_instance(db_name, debug_mode)

    # ── Transactions ──────────────────────────────────────

    def start_transaction(self) -> None:
        self.db.begin_transaction()

    def commit_transaction(self) -> None:
        self.db.commit()

    def rollback_transaction(self) -> None:
        self.db.rollback()

    @contextmanager
    def transaction(self) -> Iterator["DatabaseService"]:
        """Unit of work: commits on success, rolls back and re-raises on failure."""
        self.start_transaction()
        try:
            yield self
            self.commit_transaction()
        except Exception:
            logger.warning("Rolling back transaction after failure.")
            self.rollback_transaction()
            raise

    # ── Read ──────────────────────────────────────────────

    def fetch_data_with_query(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        types: str = "",
        error_message: str = "No data found",
    ) -> list[Row]:
        """Run a SELECT that must return at least one row."""
        results = self.execute_select_query(sql, params, types)
        self.ensure_not_empty(results, error_message)
        return results

    def execute_select_query(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        types: str = "",
        result_type: ResultType = ResultType.ASSOC,
    ) -> list[Row]:
        try:
            return query_utility.execute_select_query_with_debug(
                self.debug, self.db, sql, params, types, result_type
            )
        except DatabaseException as e:
            self.debug.fail_database(f"Error executing SELECT query: {e.message}", cause=e)

    def ensure_not_empty(self, data: Sequence[Any], error_message: str) -> None:
        try:
            query_utility.ensure_query_results_not_empty(self.debug, data, error_message)
        except DatabaseException as e:
            self.debug.fail_database(f"Empty result error: {e.message}", cause=e)

    # ── Write ─────────────────────────────────────────────

    def modify_data_with_query(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        types: str = "",
        rows_expected: int = 1,
        error_message: str = "No rows were affected",
    ) -> int:
        """
        Run a mutation and check how many rows it touched.

        A row-count failure is raised after the statement has run; callers
        that need it undone must wrap the call in a transaction.
        """
        rows_affected = self.execute_update_query(sql, params, types)
        self.ensure_valid_row_count(rows_affected, rows_expected, error_message)
        return rows_affected

    def execute_update_query(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        types: str = "",
    ) -> int:
        try:
            return query_utility.execute_query_with_debug(self.debug, self.db, sql, params, types)
        except DatabaseException as e:
            self.debug.fail_database(f"Error executing INSERT/UPDATE/DELETE query: {e.message}", cause=e)

    def ensure_valid_row_count(self, rows_affected: int, rows_expected: int, error_message: str) -> None:
        try:
            query_utility.ensure_row_update_result(self.debug, rows_affected, rows_expected, error_message)
        except DatabaseException as e:
            self.debug.fail_database(f"Unexpected row-count error: {e.message}", cause=e)

    # ── Helpers ───────────────────────────────────────────

    def get_sort_string(self, sort_asc: bool = True) -> str:
        return query_utility.get_sort_string(sort_asc)
