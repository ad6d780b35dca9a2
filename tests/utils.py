from datetime import date, timedelta
from typing import Optional

def next_weekday(isoweekday: int, after: Optional[date] = None) -> date:
    """First date strictly after ``after`` (default today) falling on ``isoweekday``."""
    after = after or date.today()
    days_ahead = (isoweekday - after.isoweekday()) % 7 or 7
    return after + timedelta(days=days_ahead)
