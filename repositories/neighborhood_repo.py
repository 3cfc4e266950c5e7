"""
repositories/neighborhood_repo.py
---------------------------------
Data access layer for houses and trees.
All SQL against the `house` and `tree` tables lives here, including the
storm transaction that fells a random tree at a house.

The repository does not log (except while closing); it raises
NeighborhoodError and leaves reporting to the handler layer.
"""

import random
from contextlib import contextmanager, suppress
from typing import Sequence

import psycopg2
from psycopg2 import errors

from models.house import House
from models.tree import Tree
from utils.errors import ErrorKind, NeighborhoodError, persistence_error
from utils.logger import get_logger

logger = get_logger(__name__)

# ── Statements ────────────────────────────────────────────

SELECT_HOUSES = """
    SELECT h.id, h.address_one, h.address_two, h.city, h.state, h.zip
    FROM house h
    ORDER BY h.id ASC;
"""

SELECT_HOUSE_EXISTS = """
    SELECT EXISTS (SELECT 1 FROM house h WHERE h.id = %s);
"""

SELECT_TREES_BY_HOUSE = """
    SELECT t.id, t.species, t.x_coord, t.y_coord, t.relative_location, t.fallen
    FROM tree t
    WHERE t.house_id = %s
    ORDER BY t.id ASC;
"""

INSERT_HOUSE = """
    INSERT INTO house (address_one, address_two, city, state, zip)
    VALUES (%s, %s, %s, %s, %s)
    RETURNING id;
"""

INSERT_TREE = """
    INSERT INTO tree (house_id, species, x_coord, y_coord, relative_location)
    VALUES (%s, %s, %s, %s, %s)
    RETURNING id;
"""

# Row locks keep concurrent storms and deletes off the candidate set
# until the transaction ends.
LOCK_TREE_IDS_BY_HOUSE = """
    SELECT t.id
    FROM tree t
    WHERE t.house_id = %s
    ORDER BY t.id ASC
    FOR UPDATE;
"""

UPDATE_TREE_FALLEN = """
    UPDATE tree SET fallen = TRUE WHERE id = %s;
"""

SELECT_TREE_FALLEN = """
    SELECT t.fallen FROM tree t WHERE t.id = %s;
"""

DELETE_FALLEN_TREE = """
    DELETE FROM tree WHERE id = %s AND fallen = TRUE;
"""


def choose_tree_id(tree_ids: Sequence[int], rng=random) -> int:
    """
    Pick one id uniformly at random from the whole candidate set.

    Args:
        tree_ids: Non-empty sequence of candidate tree ids.
        rng: Anything with a `randrange` method (module `random` by default).

    Raises:
        ValueError: If `tree_ids` is empty.
    """
    if not tree_ids:
        raise ValueError("cannot choose from an empty candidate set")
    return tree_ids[rng.randrange(len(tree_ids))]


class NeighborhoodRepository:
    """
    Persistence gateway for houses and trees.

    Args:
        db_pool: A psycopg2 connection pool (ThreadedConnectionPool in
            production). The repository owns it and closes it in `close()`.
        rng: Random source for storm selection.
    """

    def __init__(self, db_pool, rng=None):
        self._pool = db_pool
        self._rng = rng if rng is not None else random.Random()
        self._closed = False

    @contextmanager
    def _connection(self):
        if self._closed:
            raise persistence_error("repository is closed")
        try:
            conn = self._pool.getconn()
        except psycopg2.Error as e:
            raise persistence_error(f"error acquiring DB connection: {e}") from e
        try:
            yield conn
        finally:
            self._pool.putconn(conn)

    @staticmethod
    def _rollback(conn) -> None:
        # Called while another error is propagating.
        with suppress(psycopg2.Error):
            conn.rollback()

    # ── READ ──────────────────────────────────────────────

    def list_houses(self) -> list[House]:
        """List every house, ordered by id. Empty list when there are none."""
        with self._connection() as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(SELECT_HOUSES)
                    rows = cur.fetchall()
                conn.rollback()
            except psycopg2.Error as e:
                self._rollback(conn)
                raise persistence_error(f"SELECT Houses failed: {e}") from e
        return [self._row_to_house(r) for r in rows]

    def house_exists(self, house_id: int) -> bool:
        """Report whether a house with this id exists."""
        with self._connection() as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(SELECT_HOUSE_EXISTS, (house_id,))
                    row = cur.fetchone()
                conn.rollback()
            except psycopg2.Error as e:
                self._rollback(conn)
                raise persistence_error(f"error reading whether House exists: {e}") from e
        return bool(row[0])

    def list_trees(self, house_id: int) -> list[Tree]:
        """List the trees at a house, ordered by id. Empty list when there are none."""
        with self._connection() as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(SELECT_TREES_BY_HOUSE, (house_id,))
                    rows = cur.fetchall()
                conn.rollback()
            except psycopg2.Error as e:
                self._rollback(conn)
                raise persistence_error(f"SELECT Trees failed: {e}") from e
        return [self._row_to_tree(r) for r in rows]

    def is_tree_fallen(self, tree_id: int) -> bool:
        """
        Report whether a tree has fallen.

        Raises:
            NeighborhoodError: NO_SUCH_RECORD if the tree does not exist.
        """
        with self._connection() as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(SELECT_TREE_FALLEN, (tree_id,))
                    row = cur.fetchone()
                conn.rollback()
            except psycopg2.Error as e:
                self._rollback(conn)
                raise persistence_error(f"error reading Tree fallen state: {e}") from e
        if row is None:
            raise NeighborhoodError(ErrorKind.NO_SUCH_RECORD, f"no Tree found with ID {tree_id}")
        return bool(row[0])

    # ── CREATE ────────────────────────────────────────────

    def add_house(self, house: House) -> int:
        """
        Insert a house.

        Returns:
            The generated id, also stored on `house.id`.
        """
        with self._connection() as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(INSERT_HOUSE, (
                        house.address_one, house.address_two or None,
                        house.city, house.state, house.zip,
                    ))
                    house.id = cur.fetchone()[0]
                conn.commit()
            except psycopg2.Error as e:
                self._rollback(conn)
                raise persistence_error(f"INSERT House failed: {e}") from e
        return house.id

    def add_tree(self, tree: Tree, house_id: int) -> int:
        """
        Plant a tree at a house.

        Returns:
            The generated id, also stored on `tree.id`.

        Raises:
            NeighborhoodError: DUPLICATE_TREE if a tree already grows at the
                same (house, x, y); PERSISTENCE on any other failure.
        """
        with self._connection() as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(INSERT_TREE, (
                        house_id, tree.species, tree.x, tree.y,
                        tree.relative_location or None,
                    ))
                    tree.id = cur.fetchone()[0]
                conn.commit()
            except errors.UniqueViolation as e:
                self._rollback(conn)
                raise NeighborhoodError(
                    ErrorKind.DUPLICATE_TREE,
                    "tree already growing at given house and absolute location",
                ) from e
            except psycopg2.Error as e:
                self._rollback(conn)
                raise persistence_error(f"INSERT Tree failed: {e}") from e
        tree.fallen = False
        return tree.id

    # ── UPDATE ────────────────────────────────────────────

    def fell_random_tree(self, house_id: int) -> int:
        """
        Fell one randomly chosen tree at a house in a single transaction.

        Returns:
            The id of the felled tree.

        Raises:
            NeighborhoodError: NO_TREES_AT_HOUSE if the house has no trees;
                PERSISTENCE if any statement fails or the update touches no
                row. Nothing is committed in either case.
        """
        with self._connection() as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(LOCK_TREE_IDS_BY_HOUSE, (house_id,))
                    tree_ids = [r[0] for r in cur.fetchall()]

                    if not tree_ids:
                        raise NeighborhoodError(
                            ErrorKind.NO_TREES_AT_HOUSE, f"no trees at house {house_id}"
                        )

                    tree_id = choose_tree_id(tree_ids, self._rng)
                    cur.execute(UPDATE_TREE_FALLEN, (tree_id,))
                    if cur.rowcount != 1:
                        raise persistence_error(
                            f"UPDATE Tree {tree_id} affected {cur.rowcount} rows, expected 1"
                        )
                conn.commit()
            except NeighborhoodError:
                self._rollback(conn)
                raise
            except psycopg2.Error as e:
                self._rollback(conn)
                raise persistence_error(f"storm transaction at house {house_id} failed: {e}") from e
        return tree_id

    # ── DELETE ────────────────────────────────────────────

    def remove_tree(self, tree_id: int) -> None:
        """
        Delete a fallen tree.

        Raises:
            NeighborhoodError: PERSISTENCE if no fallen tree with this id was
                deleted, or on any driver failure.
        """
        with self._connection() as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(DELETE_FALLEN_TREE, (tree_id,))
                    deleted = cur.rowcount
                if deleted == 0:
                    conn.rollback()
                    raise persistence_error(f"no rows affected by DELETE Tree {tree_id}")
                conn.commit()
            except psycopg2.Error as e:
                self._rollback(conn)
                raise persistence_error(f"error running DELETE Tree: {e}") from e

    # ── LIFECYCLE ─────────────────────────────────────────

    def close(self) -> None:
        """Close every pooled connection. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        logger.info("repository: closing connection pool")
        try:
            self._pool.closeall()
        except psycopg2.Error as e:
            logger.error(f"repository: failed to close connection pool: {e}")

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_house(row: tuple) -> House:
        """Convert a database row tuple to a House domain object."""
        return House(
            id=row[0],
            address_one=row[1],
            address_two=row[2] or "",
            city=row[3] or "",
            state=row[4] or "",
            zip=row[5] or "",
        )

    @staticmethod
    def _row_to_tree(row: tuple) -> Tree:
        """Convert a database row tuple to a Tree domain object."""
        return Tree(
            id=row[0],
            species=row[1],
            x=row[2],
            y=row[3],
            relative_location=row[4] or "",
            fallen=bool(row[5]),
        )
