from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, ClassVar


@dataclass
class Room:
    """Static room record owned by the room catalog."""

    room_number: int
    room_type: str          # e.g. "Single", "Double", "Suite"
    price: float            # nightly price, never negative

    id: Optional[int] = field(default=None)

    STATUS_AVAILABLE: ClassVar[str] = "Available"
    STATUS_MAINTENANCE: ClassVar[str] = "Maintenance"

    # Free-text operational flag; does not take part in overlap checks.
    status: str = field(default=STATUS_AVAILABLE)

    def __post_init__(self) -> None:
        if self.price is not None and self.price < 0:
            raise ValueError(f"Room price cannot be negative: {self.price}")

    def to_dict(self) -> Dict[str, Any]:
        return self.__dict__.copy()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Room:
        field_names = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_data = {k: v for k, v in data.items() if k in field_names}
        return cls(**filtered_data)
