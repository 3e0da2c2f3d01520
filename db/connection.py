"""
db/connection.py
----------------
Connection lifecycle for the PostgreSQL databases used by the application.

A ``ConnectionRegistry`` hands out exactly one ``DBConnection`` per logical
database name. ``DBConnection`` is the only path through which SQL reaches
psycopg2: prepared (parameter-bound) execution, raw execution and
transaction demarcation.
"""

import re
import threading
from enum import Enum
from typing import Any, Callable, Optional, Sequence, Union

import psycopg2

import config
from exceptions import ConfigError
from utils.debug import Debug
from utils.logger import get_logger

logger = get_logger(__name__)

Row = Union[dict, list]


class ResultType(Enum):
    """Shape of fetched rows."""
    ASSOC = "assoc"  # {column: value}
    NUM = "num"      # [value, ...]
    BOTH = "both"    # {0: value, column: value, ...}


# Bind type codes: one character per parameter.
_TYPE_CASTS: dict[str, Callable[[Any], Any]] = {
    "s": str,
    "i": int,
    "d": float,
    "b": psycopg2.Binary,
}

# psycopg2 raises IndexError/TypeError when placeholders and values disagree.
_STATEMENT_ERRORS = (psycopg2.Error, IndexError, TypeError)

# Quoted literals/identifiers, a '?' placeholder, or a literal '%'.
_PLACEHOLDER_RE = re.compile(r"""('(?:[^']|'')*'|"(?:[^"]|"")*")|(\?)|(%)""")


def to_driver_sql(sql: str) -> str:
    """
    Rewrite '?' placeholders into psycopg2's '%s' form.

    Literal '%' signs, quoted or not, are doubled so the driver does not
    read them as placeholders; a '?' inside quotes is left alone. SQL
    without any '?' is assumed to already use the '%s' style.
    """
    if "?" not in sql:
        return sql

    placeholders = 0

    def _sub(match: re.Match) -> str:
        nonlocal placeholders
        if match.group(1):
            return match.group(1).replace("%", "%%")
        if match.group(2):
            placeholders += 1
            return "%s"
        return "%%"

    rewritten = _PLACEHOLDER_RE.sub(_sub, sql)
    return rewritten if placeholders else sql


def _shape_row(columns: Sequence[str], row: Sequence[Any], result_type: ResultType) -> Row:
    if result_type is ResultType.NUM:
        return list(row)
    if result_type is ResultType.BOTH:
        shaped: dict = dict(enumerate(row))
        shaped.update(zip(columns, row))
        return shaped
    return dict(zip(columns, row))


class DBConnection:
    """
    Wraps one live psycopg2 connection.

    Instances are created by ``ConnectionRegistry``; do not construct them
    directly outside of tests. All statement and transaction calls are
    serialized on a per-connection lock.
    """

    def __init__(self, name: str, connection: Any, debug: Optional[Debug] = None):
        self.name = name
        self.connection = connection
        self.debug = debug or Debug("db")
        self._lock = threading.RLock()
        self._affected_rows = 0
        self._restore_autocommit = False

    def is_connected(self) -> bool:
        return self.connection is not None

    # ── Transactions ──────────────────────────────────────

    def begin_transaction(self) -> None:
        with self._lock:
            self._ensure_connection()
            self.debug.debug("Starting transaction.")
            # A repeated begin must not forget the mode to restore.
            if self.connection.autocommit:
                self._restore_autocommit = True
            self.connection.autocommit = False

    def commit(self) -> None:
        with self._lock:
            self._ensure_connection()
            self.debug.debug("Committing transaction.")
            self.connection.commit()
            self._end_transaction()

    def rollback(self) -> None:
        with self._lock:
            self._ensure_connection()
            self.debug.debug("Rolling back transaction.")
            self.connection.rollback()
            self._end_transaction()

    def close_connection(self) -> None:
        """Close the driver connection. Safe to call more than once."""
        with self._lock:
            if self.connection is None:
                return
            try:
                self.connection.close()
            finally:
                self.connection = None
                self.debug.debug("Database connection closed.")

    # ── Statements ────────────────────────────────────────

    def execute_query(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        types: str = "",
        result_type: ResultType = ResultType.ASSOC,
    ) -> Union[list[Row], int]:
        """
        Execute a parameter-bound statement.

        Args:
            sql: SQL text using '?' (or '%s') placeholders.
            params: Values for the placeholders.
            types: Optional bind codes, one per parameter
                ('s' string, 'i' integer, 'd' double, 'b' blob).
            result_type: Row shape for statements that return rows.

        Returns:
            A list of rows when the statement produced a result set,
            otherwise the number of affected rows.

        Raises:
            DatabaseException: On a closed connection, a bind failure or
                a driver error.
        """
        with self._lock:
            self._ensure_connection()
            self.debug.debug(f"Preparing SQL: {sql}")
            bound = self._bind_params(sql, params, types)
            driver_sql = to_driver_sql(sql) if bound else sql

            try:
                with self.connection.cursor() as cur:
                    cur.execute(driver_sql, bound or None)
                    self.debug.debug("Executed query successfully.")
                    if cur.description is not None:
                        columns = [col[0] for col in cur.description]
                        rows = [_shape_row(columns, r, result_type) for r in cur.fetchall()]
                    else:
                        rows = None
                    self._affected_rows = cur.rowcount
            except _STATEMENT_ERRORS as e:
                logger.error(f"Statement failed on '{self.name}': {e}")
                self.debug.fail_database(f"Execute failed for query: {sql}", cause=e)

            if rows is not None:
                self.debug.debug(f"Query returned {len(rows)} rows.")
                return rows
            self.debug.debug(f"Query affected {self._affected_rows} rows.")
            return self._affected_rows

    def execute_raw_query(self, sql: str) -> Union[list[dict], int]:
        """
        Execute SQL with no parameter binding (DDL, bulk loads, etc.).

        Returns:
            A list of column->value dicts when the statement produced a
            result set, otherwise the number of affected rows.
        """
        with self._lock:
            self._ensure_connection()
            self.debug.debug(f"Executing Raw SQL: {sql}")

            try:
                with self.connection.cursor() as cur:
                    cur.execute(sql)
                    if cur.description is not None:
                        columns = [col[0] for col in cur.description]
                        rows = [dict(zip(columns, r)) for r in cur.fetchall()]
                    else:
                        rows = None
                    self._affected_rows = cur.rowcount
            except _STATEMENT_ERRORS as e:
                logger.error(f"Raw statement failed on '{self.name}': {e}")
                self.debug.fail_database(f"Query failed: {sql}", cause=e)

            if rows is not None:
                self.debug.debug(f"Query returned {len(rows)} rows.")
                return rows
            self.debug.debug(f"Query affected {self._affected_rows} rows.")
            return self._affected_rows

    def get_affected_rows(self) -> int:
        """Row count reported for the most recent statement."""
        with self._lock:
            self._ensure_connection()
            return self._affected_rows

    def get_last_insert_id(self) -> int:
        """Value most recently produced by a sequence in this session."""
        with self._lock:
            self._ensure_connection()
            try:
                with self.connection.cursor() as cur:
                    cur.execute("SELECT LASTVAL()")
                    row = cur.fetchone()
            except _STATEMENT_ERRORS as e:
                self.debug.fail_database("Failed to fetch last insert id.", cause=e)
            return int(row[0])

    # ── Helpers ───────────────────────────────────────────

    def _end_transaction(self) -> None:
        if self._restore_autocommit:
            self.connection.autocommit = True
            self._restore_autocommit = False

    def _ensure_connection(self) -> None:
        if self.connection is None:
            self.debug.fail_database("Database connection is not established.")

    def _bind_params(self, sql: str, params: Optional[Sequence[Any]], types: str) -> tuple:
        values = list(params or [])
        if not values:
            return ()
        if not types:
            return tuple(values)
        if len(types) != len(values):
            self.debug.fail_database(f"Failed to bind parameters for query: {sql}")
        try:
            return tuple(
                None if value is None else _TYPE_CASTS[code](value)
                for code, value in zip(types, values)
            )
        except (KeyError, TypeError, ValueError) as e:
            self.debug.fail_database(f"Failed to bind parameters for query: {sql}", cause=e)


class ConnectionRegistry:
    """
    Map of logical database name -> ``DBConnection``.

    At most one connection exists per name; creation is guarded by a
    registry-wide lock so concurrent first lookups agree on one instance.

    Args:
        config_source: Callable returning a named configuration set;
            called as ``config_source("db_config")``.
        connect: Driver connect function (``psycopg2.connect``).
    """

    def __init__(
        self,
        config_source: Callable[[str], Any] = config.get,
        connect: Callable[..., Any] = psycopg2.connect,
    ):
        self._config_source = config_source
        self._connect = connect
        self._instances: dict[str, DBConnection] = {}
        self._lock = threading.Lock()

    def get_instance(
        self,
        name: str,
        debug_mode: bool = False,
        handle: Any = None,
        debug: Optional[Debug] = None,
    ) -> DBConnection:
        """
        Return the connection for ``name``, creating it on first use.

        Later calls return the same instance and ignore every argument
        but ``name``.

        Args:
            name: Key into the ``db_config`` configuration set.
            debug_mode: Trace SQL for this connection.
            handle: Pre-built driver connection used instead of connecting
                (tests inject doubles here).
            debug: Debug sink to use instead of a fresh one.

        Raises:
            DatabaseException: If ``name`` is not configured or the driver
                cannot connect.
        """
        with self._lock:
            instance = self._instances.get(name)
            if instance is None:
                instance = self._create(name, debug_mode, handle, debug)
                self._instances[name] = instance
            return instance

    def clear_instance(self, name: str) -> None:
        """Close and forget the connection for ``name`` (no-op if absent)."""
        with self._lock:
            instance = self._instances.pop(name, None)
        if instance is not None:
            instance.close_connection()
            instance.debug.log(f"Connection to database {name} has been closed.")

    def clear_all(self) -> None:
        for name in list(self._instances):
            self.clear_instance(name)

    def has_instance(self, name: str) -> bool:
        return name in self._instances

    def __contains__(self, name: str) -> bool:
        return self.has_instance(name)

    def __len__(self) -> int:
        return len(self._instances)

    def _create(self, name: str, debug_mode: bool, handle: Any, debug: Optional[Debug]) -> DBConnection:
        debug = debug or Debug("db", debug_mode)
        not_found = f"Database configuration for '{name}' not found."

        try:
            db_config = self._config_source("db_config")
        except ConfigError as e:
            debug.fail_database(not_found, cause=e)
        if not isinstance(db_config, dict) or name not in db_config:
            debug.fail_database(not_found)

        params = db_config[name]
        if handle is None:
            handle = self._open(name, params, debug)

        debug.debug(f"Connected to database: {params.get('dbname')} at {params.get('host')}")
        logger.info(f"Database connection '{name}' established.")
        return DBConnection(name, handle, debug)

    def _open(self, name: str, params: dict, debug: Debug) -> Any:
        try:
            handle = self._connect(
                host=params["host"],
                user=params["username"],
                password=params["password"],
                dbname=params["dbname"],
                port=params.get("port", config.DB_DEFAULT_PORT),
            )
        except KeyError as e:
            debug.fail_database(f"Database configuration for '{name}' is incomplete.", cause=e)
        except psycopg2.Error as e:
            logger.error(f"Failed to connect to database '{name}': {e}")
            debug.fail_database("Database connection failed.", cause=e)
        handle.autocommit = True
        return handle


# ── Default registry ──────────────────────────────────────

_registry = ConnectionRegistry()


def get_registry() -> ConnectionRegistry:
    """Return the process-wide default registry."""
    return _registry


def get_instance(
    name: str,
    debug_mode: bool = False,
    handle: Any = None,
    debug: Optional[Debug] = None,
) -> DBConnection:
    """Shortcut for ``get_registry().get_instance(...)``."""
    return _registry.get_instance(name, debug_mode, handle, debug)


def clear_instance(name: str) -> None:
    _registry.clear_instance(name)
