"""
Currency Data Model
===================

Represents a currency as known to Firefly III.
"""

from dataclasses import dataclass
from typing import Optional


DEFAULT_DECIMAL_PLACES = 2


@dataclass(frozen=True)
class Currency:
    """
    A currency from the Firefly III catalog.

    The engine only reads currencies; they are owned by the ledger.
    """

    code: str
    symbol: str
    id: Optional[str] = None
    name: Optional[str] = None
    decimal_places: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Currency":
        """
        Create Currency from a Firefly API resource.

        Accepts both the JSON:API envelope ({"id", "attributes": {...}})
        and a flat dictionary.
        """
        attributes = data.get("attributes", data)
        decimal_places = attributes.get("decimal_places")
        return cls(
            code=attributes.get("code", ""),
            symbol=attributes.get("symbol", ""),
            id=str(data["id"]) if data.get("id") is not None else None,
            name=attributes.get("name"),
            decimal_places=int(decimal_places) if decimal_places is not None else None,
        )

    def matches_token(self, token: str) -> bool:
        """Case-insensitive comparison against the code or the symbol."""
        wanted = token.strip().upper()
        if not wanted:
            return False
        return wanted == self.code.upper() or wanted == self.symbol.upper()
