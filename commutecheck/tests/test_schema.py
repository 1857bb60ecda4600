"""Tests for database schema creation and migrations."""

import tempfile
import unittest
from pathlib import Path

from commutecheck.models.schema import (
    get_connection,
    ensure_database,
    get_schema_version,
    drop_all_tables,
    CURRENT_SCHEMA_VERSION,
)


class TestSchemaCreation(unittest.TestCase):
    """Test database schema creation."""

    def setUp(self):
        """Create a temporary database for each test."""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.db_path = Path(self.temp_dir.name) / "test.db"
        self.conn = get_connection(self.db_path)

    def tearDown(self):
        """Clean up temporary database."""
        self.conn.close()
        self.temp_dir.cleanup()

    def test_database_created(self):
        self.assertTrue(self.db_path.exists())

    def test_wal_mode_enabled(self):
        cursor = self.conn.execute("PRAGMA journal_mode")
        self.assertEqual(cursor.fetchone()[0].lower(), "wal")

    def test_readings_table_created(self):
        ensure_database(self.conn)

        cursor = self.conn.execute("PRAGMA table_info(readings)")
        columns = [row["name"] for row in cursor.fetchall()]
        self.assertEqual(columns, ["id", "crossing_id", "wait_time", "recorded_at"])

    def test_indexes_created(self):
        ensure_database(self.conn)

        cursor = self.conn.execute("""
            SELECT name FROM sqlite_master
            WHERE type='index' AND name LIKE 'idx_%'
        """)
        indexes = {row[0] for row in cursor.fetchall()}
        self.assertIn("idx_readings_crossing", indexes)
        self.assertIn("idx_readings_time", indexes)

    def test_schema_version_tracking(self):
        self.assertEqual(get_schema_version(self.conn), 0)
        ensure_database(self.conn)
        self.assertEqual(get_schema_version(self.conn), CURRENT_SCHEMA_VERSION)

    def test_migration_is_idempotent(self):
        ensure_database(self.conn)
        self.conn.execute(
            "INSERT INTO readings (crossing_id, wait_time, recorded_at) VALUES (?, ?, ?)",
            ("gwb-into", 20, "2026-02-02 08:00:00"),
        )
        self.conn.commit()

        ensure_database(self.conn)

        count = self.conn.execute("SELECT COUNT(*) FROM readings").fetchone()[0]
        self.assertEqual(count, 1)

    def test_ids_autoincrement(self):
        ensure_database(self.conn)
        for wait in (5, 6):
            self.conn.execute(
                "INSERT INTO readings (crossing_id, wait_time, recorded_at) VALUES (?, ?, ?)",
                ("gwb-out", wait, "2026-02-02 08:00:00"),
            )
        ids = [row[0] for row in self.conn.execute("SELECT id FROM readings ORDER BY id")]
        self.assertEqual(ids, [1, 2])

    def test_drop_all_tables_resets_version(self):
        ensure_database(self.conn)
        drop_all_tables(self.conn)
        self.assertEqual(get_schema_version(self.conn), 0)


if __name__ == '__main__':
    unittest.main()
