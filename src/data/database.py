import logging
import random
import threading
import time
import uuid
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

import duckdb
import pandas as pd

logger = logging.getLogger(__name__)

IN_MEMORY = ":memory:"
RESULTS_TABLE = "benchmark_results"

# CSV column -> table column
COLUMN_MAP = {
    "InputSize": "input_size",
    "InputType": "input_type",
    "AvgTimeMs": "avg_time_ms",
    "StdDevMs": "std_dev_ms",
    "Comparisons": "comparisons",
    "Assignments": "assignments",
    "ArrayAccesses": "array_accesses",
    "MemoryBytes": "memory_bytes",
    "Result": "result",
}

CREATE_RESULTS_TABLE = f"""
    CREATE TABLE IF NOT EXISTS {RESULTS_TABLE} (
        run_id VARCHAR,
        algorithm VARCHAR,
        recorded_at TIMESTAMP,
        input_size BIGINT,
        input_type VARCHAR,
        avg_time_ms DOUBLE,
        std_dev_ms DOUBLE,
        comparisons BIGINT,
        assignments BIGINT,
        array_accesses BIGINT,
        memory_bytes BIGINT,
        result VARCHAR
    )
"""


class DatabaseConnectionManager:
    """
    Opens DuckDB connections with retry on lock conflicts.
    Read-only connections never create a database file.
    """

    def __init__(self):
        self.lock = threading.Lock()

    def get_connection(
        self, db_path: str, read_only: bool = True, max_retries: int = 3
    ) -> duckdb.DuckDBPyConnection:
        """
        Get a database connection with retry logic.

        Args:
            db_path: Path to DuckDB file, or ":memory:"
            read_only: Whether to open in read-only mode (avoids locks)
            max_retries: Maximum number of connection attempts

        Returns:
            DuckDB connection

        Raises:
            FileNotFoundError: if a read-only connection is requested for a
                file that does not exist
        """
        for attempt in range(max_retries):
            try:
                with self.lock:
                    if read_only and db_path != IN_MEMORY:
                        if not Path(db_path).exists():
                            raise FileNotFoundError(
                                f"Database file not found: {db_path}"
                            )
                        conn = duckdb.connect(db_path, read_only=True)
                        logger.debug(f"Opened read-only connection to {db_path}")
                    else:
                        conn = duckdb.connect(db_path)
                        logger.debug(f"Opened read-write connection to {db_path}")
                return conn

            except duckdb.IOException as e:
                if "Conflicting lock" in str(e) and attempt < max_retries - 1:
                    # Exponential backoff with jitter
                    wait_time = (2**attempt) + random.uniform(0, 1)  # nosec B311
                    logger.warning(
                        f"Database locked, retrying in {wait_time:.2f}s (attempt {attempt + 1}/{max_retries})"
                    )
                    time.sleep(wait_time)
                    continue
                logger.error(
                    f"Failed to connect to database after {attempt + 1} attempts: {e}"
                )
                raise

        raise ConnectionError(
            f"Could not establish database connection after {max_retries} attempts"
        )

    @contextmanager
    def get_temporary_connection(self, db_path: str, read_only: bool = True):
        """
        Context manager for a connection that is closed on exit.

        Yields:
            DuckDB connection
        """
        conn = None
        try:
            conn = self.get_connection(db_path, read_only)
            yield conn
        finally:
            if conn:
                try:
                    conn.close()
                    logger.debug(f"Closed temporary connection to {db_path}")
                except duckdb.Error as e:
                    logger.warning(f"Error closing connection: {e}")


_connection_manager = DatabaseConnectionManager()


class BenchmarkDatabase:
    """
    DuckDB store for benchmark results.
    The connection is opened on first use and closed by close() or on context exit.
    """

    def __init__(self, db_path: Optional[str] = None, read_only: bool = False):
        """
        Initialize database.

        Args:
            db_path: Path to DuckDB file. If None, uses in-memory database.
            read_only: Open existing files read-only (for readers such as the web API)
        """
        self.db_path = db_path or IN_MEMORY
        self.read_only = read_only
        self._conn = None

    @property
    def conn(self) -> duckdb.DuckDBPyConnection:
        """Get or create a database connection on-demand."""
        if self._conn is None:
            self._conn = _connection_manager.get_connection(
                self.db_path, self.read_only
            )
        return self._conn

    def query(self, sql: str, params: Optional[List[Any]] = None) -> pd.DataFrame:
        """Execute a SQL query and return results as DataFrame."""
        return self.conn.execute(sql, params or []).fetchdf()

    def query_with_retry(
        self, sql: str, params: Optional[List[Any]] = None, max_retries: int = 3
    ) -> pd.DataFrame:
        """
        Execute a read query on a short-lived connection, retrying on failure.
        Intended for file databases shared with other processes; an instance
        that already holds a connection reuses it.
        """
        if self.db_path == IN_MEMORY or self._conn is not None:
            return self.query(sql, params)

        for attempt in range(max_retries):
            try:
                with _connection_manager.get_temporary_connection(
                    self.db_path, read_only=True
                ) as temp_conn:
                    return temp_conn.execute(sql, params or []).fetchdf()
            except duckdb.Error as e:
                if attempt < max_retries - 1:
                    wait_time = (2**attempt) + random.uniform(0, 0.5)  # nosec B311
                    logger.warning(f"Query failed, retrying in {wait_time:.2f}s: {e}")
                    time.sleep(wait_time)
                    continue
                logger.error(f"Query failed after {max_retries} attempts: {e}")
                raise

    def table_exists(self, table_name: str) -> bool:
        """Check if a table exists in the database."""
        sql = "SELECT COUNT(*) FROM information_schema.tables WHERE table_name = ?"
        result = self.conn.execute(sql, [table_name]).fetchone()
        return result[0] > 0

    def get_table_info(self, table_name: str) -> pd.DataFrame:
        """Get column information for a table."""
        return self.conn.execute(f"DESCRIBE {table_name}").fetchdf()

    def create_schema(self):
        """Create the results table if it does not exist."""
        self.conn.execute(CREATE_RESULTS_TABLE)

    def save_results(self, results: pd.DataFrame, algorithm: str) -> str:
        """
        Append benchmark rows as a new run.

        Args:
            results: Frame with the benchmark CSV columns
            algorithm: Algorithm label stored with every row

        Returns:
            The generated run id
        """
        missing = [column for column in COLUMN_MAP if column not in results.columns]
        if missing:
            raise ValueError(f"Results are missing columns: {missing}")

        self.create_schema()

        run_id = uuid.uuid4().hex
        rows = results[list(COLUMN_MAP)].rename(columns=COLUMN_MAP)
        rows.insert(0, "recorded_at", datetime.now())
        rows.insert(0, "algorithm", algorithm)
        rows.insert(0, "run_id", run_id)
        rows["result"] = rows["result"].astype(str)

        self.conn.register("incoming_results", rows)
        try:
            columns = ", ".join(rows.columns)
            self.conn.execute(
                f"INSERT INTO {RESULTS_TABLE} ({columns}) "
                f"SELECT {columns} FROM incoming_results"
            )
        finally:
            self.conn.unregister("incoming_results")

        logger.info(f"Saved {len(rows)} benchmark rows as run {run_id}")
        return run_id

    def load_results(
        self, input_type: Optional[str] = None, run_id: Optional[str] = None
    ) -> pd.DataFrame:
        """
        Load stored benchmark rows, optionally filtered.

        Returns:
            DataFrame ordered by recording time and input size
        """
        sql = f"SELECT * FROM {RESULTS_TABLE}"
        conditions = []
        params: List[Any] = []
        if input_type:
            conditions.append("input_type = ?")
            params.append(input_type)
        if run_id:
            conditions.append("run_id = ?")
            params.append(run_id)
        if conditions:
            sql += " WHERE " + " AND ".join(conditions)
        sql += " ORDER BY recorded_at, input_type, input_size"
        return self.query_with_retry(sql, params)

    def list_runs(self) -> pd.DataFrame:
        """One row per stored run with its row count."""
        return self.query_with_retry(
            f"""
            SELECT run_id, algorithm, MIN(recorded_at) AS recorded_at,
                   COUNT(*) AS row_count
            FROM {RESULTS_TABLE}
            GROUP BY run_id, algorithm
            ORDER BY recorded_at
            """
        )

    def close(self):
        """Close database connection."""
        if self._conn:
            try:
                self._conn.close()
                logger.debug(f"Closed database connection to {self.db_path}")
            except duckdb.Error as e:
                logger.warning(f"Error closing database connection: {e}")
            finally:
                self._conn = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
