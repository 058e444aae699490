"""
WeatherNotes — Session Identity Schema
=======================================

What:  The typed payload stored in the signed session cookie.
Why:   Downstream code needs the user's id (note ownership) and city (weather)
       on every request without re-querying the users table. Storing a narrow,
       validated model instead of the whole ORM row keeps the password digest
       out of the cookie.
"""

from typing import Any, Dict

from pydantic import BaseModel, Field

# Key under which the identity lives in request.session
SESSION_KEY = "user"


class SessionIdentity(BaseModel):
    """
    Who the current request belongs to.

    Created at login or right after registration; rebuilt from the cookie
    on every request; dropped on logout.
    """
    id: int = Field(description="users.id of the authenticated user")
    email: str = Field(description="Login email, shown in the page header")
    city: str = Field(default="", description="City used for the weather lookup")

    model_config = {"from_attributes": True, "frozen": True}

    def to_session(self) -> Dict[str, Any]:
        return self.model_dump()
