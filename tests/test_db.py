import unittest

from nightlife_api.app.core.db import MIGRATIONS, get_cursor, init_db, transaction
from nightlife_api.app.core.errors import StorageError

from tests.testing_utils import TempDatabaseMixin


class DatabaseTests(TempDatabaseMixin, unittest.TestCase):
    def test_init_db_is_idempotent(self):
        init_db()
        with get_cursor() as cursor:
            row = cursor.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
        self.assertEqual(row["version"], MIGRATIONS[-1][0])
        self.assertEqual(self.count_rows("migrations"), len(MIGRATIONS))

    def test_transaction_commits(self):
        with transaction() as cursor:
            cursor.execute("INSERT INTO venues (venue_yelp_id) VALUES (?)", ("biz-1",))
        self.assertEqual(self.count_rows("venues"), 1)

    def test_transaction_rolls_back_on_error(self):
        with self.assertRaises(RuntimeError):
            with transaction() as cursor:
                cursor.execute("INSERT INTO venues (venue_yelp_id) VALUES (?)", ("biz-1",))
                raise RuntimeError("boom")
        self.assertEqual(self.count_rows("venues"), 0)

    def test_sqlite_errors_become_storage_errors(self):
        with self.assertRaises(StorageError):
            with transaction() as cursor:
                cursor.execute("INSERT INTO venues (venue_yelp_id) VALUES (?)", ("biz-1",))
                cursor.execute("INSERT INTO venues (venue_yelp_id) VALUES (?)", ("biz-1",))
        self.assertEqual(self.count_rows("venues"), 0)

    def test_foreign_keys_are_enforced(self):
        with self.assertRaises(StorageError):
            with transaction() as cursor:
                cursor.execute(
                    "INSERT INTO users_venues (user_id, venue_id) VALUES (?, ?)", (42, 42)
                )


if __name__ == "__main__":
    unittest.main()
