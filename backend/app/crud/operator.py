"""
VideoAPI - Filter Operators
"""
import enum

from app.crud.errors import InvalidOperatorError


class Operator(str, enum.Enum):
    """Comparison operators accepted in q:<field>:<operator> filters."""
    EQ = "eq"
    NE = "ne"
    GT = "gt"
    LT = "lt"
    GE = "ge"
    LE = "le"
    LIKE = "like"

    @classmethod
    def parse(cls, token: str) -> "Operator":
        try:
            return cls(token.strip())
        except ValueError:
            raise InvalidOperatorError(f"unknown operator '{token}'") from None
