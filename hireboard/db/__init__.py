"""
Database module - PostgreSQL and MongoDB connections.
"""
from hireboard.db.postgres import get_db_session, execute_raw_sql, test_postgres_connection
from hireboard.db.mongodb import get_mongo_db, test_mongo_connection, init_mongo_indexes

__all__ = [
    "get_db_session",
    "execute_raw_sql",
    "test_postgres_connection",
    "get_mongo_db",
    "test_mongo_connection",
    "init_mongo_indexes",
]
