"""
Response shaping for user surgery listings.
"""
from typing import Any, Dict, List

from schemas import HospitalizationSummary, SurgerySummary, UserSurgeryListItem


class UserSurgeryView:
    """Turns joined user surgery rows into the payload shown in the user's history."""

    def render(self, row: Dict[str, Any]) -> UserSurgeryListItem:
        return UserSurgeryListItem(
            id=row["id"],
            after_effects=row["after_effects"],
            surgery=SurgerySummary(**row["surgery"]),
            hospitalization=HospitalizationSummary(**row["hospitalization"]),
        )

    def list(self, rows: List[Dict[str, Any]]) -> List[UserSurgeryListItem]:
        return [self.render(row) for row in rows]
