"""Tests for the troublelog domain services built on DatabaseService."""

from __future__ import annotations

import pytest

from exceptions import DatabaseException
from services.troublelog.daily_operator_service import DailyOperatorService
from services.troublelog.operator_service import OperatorService
from tests.helpers import set_affected, set_result


@pytest.fixture
def troublelog(registry, fake_handle):
    return registry.get_instance("troublelog", handle=fake_handle)


class TestOperatorService:
    def test_full_roster(self, registry, troublelog, fake_cursor):
        set_result(fake_cursor, ["lastName", "nightAttend"], [("Akana", -1), ("Kealoha", 0)])
        rows = OperatorService(registry=registry).fetch_full_operator_data()
        assert [r["lastName"] for r in rows] == ["Akana", "Kealoha"]
        fake_cursor.execute.assert_called_once_with(
            "SELECT * FROM Operator ORDER BY lastName ASC;", None
        )

    def test_active_operators_descending(self, registry, troublelog, fake_cursor):
        set_result(fake_cursor, ["lastName"], [("Kealoha",)])
        OperatorService(registry=registry).fetch_operator_data(sort_asc=False)
        fake_cursor.execute.assert_called_once_with(
            "SELECT * FROM Operator WHERE nightAttend = '0' ORDER BY lastName DESC;", None
        )

    def test_no_assistants(self, registry, troublelog, fake_cursor):
        set_result(fake_cursor, ["lastName"], [])
        with pytest.raises(DatabaseException, match="^Empty result error: No active assistants found.$"):
            OperatorService(registry=registry).fetch_assistant_data()


class TestDailyOperatorService:
    def test_delete_and_reload(self, registry, troublelog, fake_cursor):
        service = DailyOperatorService(registry=registry)
        set_affected(fake_cursor, 14)
        assert service.delete_operators("DELETE FROM Operator") == 14
        set_affected(fake_cursor, 15)
        assert service.copy_operators("COPY Operator FROM '/tmp/operators.csv' CSV") == 15
