"""
services/troublelog/operator_service.py
---------------------------------------
Read access to the telescope operator roster.
"""

from typing import Optional

from services.troublelog.troublelog_service import TroublelogService


class OperatorService(TroublelogService):
    """
    Operator lists, sorted by last name.

    ``nightAttend`` encodes the role: -1 inactive, 0 telescope operator,
    1 observatory assistant.
    """

    def fetch_full_operator_data(self, sort_asc: bool = True) -> list[dict]:
        return self.fetch_data_with_query(
            self._operators_query(None, sort_asc),
            error_message="No operators found.",
        )

    def fetch_operator_data(self, sort_asc: bool = True) -> list[dict]:
        return self.fetch_data_with_query(
            self._operators_query(0, sort_asc),
            error_message="No active operators found.",
        )

    def fetch_assistant_data(self, sort_asc: bool = True) -> list[dict]:
        return self.fetch_data_with_query(
            self._operators_query(1, sort_asc),
            error_message="No active assistants found.",
        )

    def _operators_query(self, night_attend: Optional[int], sort_asc: bool) -> str:
        where = f"WHERE nightAttend = '{int(night_attend)}' " if night_attend is not None else ""
        return f"SELECT * FROM Operator {where}ORDER BY lastName {self.get_sort_string(sort_asc)};"
