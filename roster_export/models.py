"""Roster records and the fixed-width sheet row."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from roster_export.errors import FetchError

UNKNOWN_STATUS = "Unknown"

# Column order is a contract with the destination sheet; do not reorder.
HEADER = [
    "ID", "First Name", "Last Name", "Gender", "Address",
    "City", "Phone", "Email", "Status",
]

StatusMap = dict[Any, str]


@dataclass(frozen=True)
class ClientRecord:
    id: Any
    first_name: str = ""
    last_name: str = ""
    gender: str = ""
    address: str = ""
    city: str = ""
    phone: str = ""
    email: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "ClientRecord":
        """Build a record from one element of the ``GET clients`` response."""
        if not isinstance(item, dict) or item.get("id") is None:
            raise FetchError(f"Client record without an id: {item!r}")
        return cls(
            id=item["id"],
            first_name=item.get("firstName") or "",
            last_name=item.get("lastName") or "",
            gender=item.get("gender") or "",
            address=item.get("address") or "",
            city=item.get("city") or "",
            phone=item.get("phone") or "",
            email=item.get("email") or "",
        )


@dataclass(frozen=True)
class ExportRow:
    record: ClientRecord
    status: str = UNKNOWN_STATUS

    @classmethod
    def merge(cls, record: ClientRecord, statuses: StatusMap) -> "ExportRow":
        return cls(record=record, status=statuses.get(record.id) or UNKNOWN_STATUS)

    def to_values(self) -> list[Any]:
        r = self.record
        return [
            r.id, r.first_name, r.last_name, r.gender, r.address,
            r.city, r.phone, r.email, self.status,
        ]
