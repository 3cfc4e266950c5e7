"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Houses: dwellings in the neighborhood
CREATE TABLE IF NOT EXISTS house (
    id              BIGSERIAL PRIMARY KEY,
    address_one     VARCHAR(50) NOT NULL,
    address_two     VARCHAR(50),
    city            VARCHAR(50),
    state           VARCHAR(50),
    zip             VARCHAR(10),
    last_updated    TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    datetime_added  TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

-- Trees: one row per tree, placed on a house's yard grid
CREATE TABLE IF NOT EXISTS tree (
    id                  BIGSERIAL PRIMARY KEY,
    house_id            BIGINT NOT NULL REFERENCES house(id) ON DELETE CASCADE,
    species             VARCHAR(50) NOT NULL,
    x_coord             SMALLINT NOT NULL CHECK (x_coord BETWEEN 0 AND 255),
    y_coord             SMALLINT NOT NULL CHECK (y_coord BETWEEN 0 AND 255),
    relative_location   VARCHAR(250),
    fallen              BOOLEAN NOT NULL DEFAULT FALSE,
    last_updated        TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    datetime_added      TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

-- At most one tree per absolute location at a house
CREATE UNIQUE INDEX IF NOT EXISTS absolute_location ON tree(house_id, x_coord, y_coord);

-- Keep last_updated current on every UPDATE
CREATE OR REPLACE FUNCTION touch_last_updated() RETURNS TRIGGER AS $$
BEGIN
    NEW.last_updated = NOW();
    RETURN NEW;
END;
$$ LANGUAGE plpgsql;

DROP TRIGGER IF EXISTS house_touch_last_updated ON house;
CREATE TRIGGER house_touch_last_updated
    BEFORE UPDATE ON house
    FOR EACH ROW EXECUTE FUNCTION touch_last_updated();

DROP TRIGGER IF EXISTS tree_touch_last_updated ON tree;
CREATE TRIGGER tree_touch_last_updated
    BEFORE UPDATE ON tree
    FOR EACH ROW EXECUTE FUNCTION touch_last_updated();
"""


def create_tables(db_pool) -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).

    Args:
        db_pool: A psycopg2 connection pool.
    """
    conn = db_pool.getconn()
    try:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise
    finally:
        db_pool.putconn(conn)


if __name__ == "__main__":
    from config import load_config
    from db.connection import wait_for_database

    _pool = wait_for_database(load_config())
    try:
        create_tables(_pool)
    finally:
        _pool.closeall()
    print("Database schema created successfully.")
