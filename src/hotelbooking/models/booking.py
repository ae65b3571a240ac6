from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Dict, Any, ClassVar


def _to_date(value: Any) -> Optional[date]:
    if value is None or (isinstance(value, date) and not isinstance(value, datetime)):
        return value
    if isinstance(value, datetime):
        return value.date()
    return date.fromisoformat(str(value))


def _to_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@dataclass
class Booking:
    """A stay of one customer in one room over the half-open range [check_in, check_out)."""

    room_id: int
    customer_id: str        # opaque, never verified against a customer record
    check_in: date
    check_out: date

    id: Optional[int] = field(default=None)

    STATUS_ACTIVE: ClassVar[str] = "active"
    STATUS_CANCELLED: ClassVar[str] = "cancelled"

    status: str = field(default=STATUS_ACTIVE)
    created_at: Optional[datetime] = field(default=None)
    updated_at: Optional[datetime] = field(default=None)
    cancelled_at: Optional[datetime] = field(default=None)

    # ------------------------------------
    # Methods
    # ------------------------------------

    def get_reference_code(self) -> str:
        """Human friendly code in 'BKG-000123' format."""
        if self.id is None:
            raise ValueError("Booking has no id yet")
        return f"BKG-{self.id:06d}"

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    def is_active(self) -> bool:
        return self.status == self.STATUS_ACTIVE

    def is_cancelled(self) -> bool:
        return self.status == self.STATUS_CANCELLED

    def overlaps(self, check_in: date, check_out: date) -> bool:
        # Half-open: a checkout on day D does not block a check-in on day D.
        return self.check_in < check_out and check_in < self.check_out

    def to_dict(self) -> Dict[str, Any]:
        data = self.__dict__.copy()
        for key in ("check_in", "check_out", "created_at", "updated_at", "cancelled_at"):
            if data.get(key) is not None:
                data[key] = data[key].isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Booking:
        data = data.copy()
        data["check_in"] = _to_date(data.get("check_in"))
        data["check_out"] = _to_date(data.get("check_out"))
        if data.get("customer_id") is not None:
            data["customer_id"] = str(data["customer_id"])
        for key in ("created_at", "updated_at", "cancelled_at"):
            data[key] = _to_datetime(data.get(key))

        field_names = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_data = {k: v for k, v in data.items() if k in field_names}

        return cls(**filtered_data)
