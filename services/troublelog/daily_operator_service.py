"""
services/troublelog/daily_operator_service.py
---------------------------------------------
Write access used by the nightly operator roster refresh.

Statements arrive fully built (a bulk DELETE and a COPY ... FROM load), so
they run through the raw path.
"""

from services.troublelog.troublelog_service import TroublelogService


class DailyOperatorService(TroublelogService):

    def delete_operators(self, delete_sql: str) -> int:
        return self.execute_update_query(delete_sql)

    def copy_operators(self, copy_sql: str) -> int:
        return self.execute_update_query(copy_sql)
