import unittest
from unittest.mock import MagicMock

from pydantic import BaseModel

from src.core.database.interface import IDatabaseSession
from src.core.database.supabase_repository import SupabaseRepository


class SampleRecord(BaseModel):
    id: str
    name: str


class TestSupabaseRepository(unittest.TestCase):

    def setUp(self):
        self.mock_session = MagicMock(spec=IDatabaseSession)
        self.mock_table = MagicMock()
        self.mock_session.table.return_value = self.mock_table

        self.repo = SupabaseRepository(
            client=self.mock_session,
            table_name="test_table",
            model_class=SampleRecord,
        )

    def test_init(self):
        self.assertEqual(self.repo.table_name, "test_table")
        self.assertEqual(self.repo.model_class, SampleRecord)

    def test_find_by_id_success(self):
        mock_response = MagicMock()
        mock_response.data = [{"id": "user-1", "name": "test"}]
        self.mock_table.select.return_value.eq.return_value.limit.return_value.execute.return_value = (
            mock_response
        )

        result = self.repo.find_by_id("user-1")

        self.assertIsInstance(result, SampleRecord)
        self.assertEqual(result.id, "user-1")
        self.mock_session.table.assert_called_with("test_table")
        self.mock_table.select.return_value.eq.assert_called_with("id", "user-1")

    def test_find_by_id_custom_column(self):
        mock_response = MagicMock()
        mock_response.data = []
        self.mock_table.select.return_value.eq.return_value.limit.return_value.execute.return_value = (
            mock_response
        )

        result = self.repo.find_by_id("a@b.c", id_column="email")

        self.assertIsNone(result)
        self.mock_table.select.return_value.eq.assert_called_with("email", "a@b.c")

    def test_find_by_id_error_propagates(self):
        self.mock_table.select.side_effect = ConnectionError("offline")

        with self.assertRaises(ConnectionError):
            self.repo.find_by_id("user-1")
