"""Party directory record."""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class PartyRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    kind: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    registration_number: Optional[str] = None

    @property
    def formatted_address(self) -> str:
        parts = [self.address_line1, self.address_line2, self.city, self.state, self.pincode]
        return ", ".join(part for part in parts if part)
