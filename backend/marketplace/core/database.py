"""
PostgreSQL connection helpers

All repositories obtain their connections here. Connections return
dictionaries (RealDictCursor) so rows map directly onto domain models.
"""
import time
import logging

import psycopg2
from psycopg2.extras import RealDictCursor

from .config import settings


logger = logging.getLogger(__name__)


def _database_url() -> str:
    database_url = settings.DATABASE_URL
    if not database_url:
        raise RuntimeError("DATABASE_URL not configured")
    return database_url


def get_db_connection_dict():
    """
    Get a database connection with RealDictCursor (returns dictionaries)

    Example:
        conn = get_db_connection_dict()
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM products")
        results = cursor.fetchall()  # Returns list of dicts
        cursor.close()
        conn.close()
    """
    return psycopg2.connect(_database_url(), cursor_factory=RealDictCursor)


def get_db_connection_dict_with_retry(max_retries=3, retry_delay=1.0):
    """
    Get a psycopg2 connection with RealDictCursor and automatic retry

    Retries only on connection failures (OperationalError) with exponential
    backoff between attempts. Any other error fails immediately.

    Args:
        max_retries: Maximum number of connection attempts (default: 3)
        retry_delay: Initial delay between retries in seconds (default: 1.0)

    Returns:
        psycopg2 connection with RealDictCursor

    Raises:
        psycopg2.OperationalError: If all retry attempts fail
    """
    database_url = _database_url()
    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"Database connection attempt {attempt}/{max_retries}")
            conn = psycopg2.connect(database_url, cursor_factory=RealDictCursor)

            # Test connection with a simple query
            cursor = conn.cursor()
            cursor.execute("SELECT 1")
            cursor.close()

            return conn

        except psycopg2.OperationalError as e:
            last_error = e
            logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {e}")

            if attempt < max_retries:
                delay = retry_delay * (2 ** (attempt - 1))
                logger.info(f"Retrying in {delay:.2f} seconds...")
                time.sleep(delay)
            else:
                logger.error(f"All {max_retries} connection attempts failed")
                raise

    raise last_error if last_error else RuntimeError("Connection failed after all retries")


def check_database(max_retries=1, retry_delay=0.5) -> float:
    """
    Run a trivial query and return its latency in milliseconds.

    Used by the health endpoint; raises on failure.
    """
    conn = get_db_connection_dict_with_retry(max_retries=max_retries, retry_delay=retry_delay)
    try:
        cursor = conn.cursor()
        start = time.time()
        cursor.execute("SELECT 1")
        cursor.fetchone()
        cursor.close()
        return round((time.time() - start) * 1000, 2)
    finally:
        conn.close()
