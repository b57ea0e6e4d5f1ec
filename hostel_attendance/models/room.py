from typing import Optional

from sqlmodel import SQLModel, Field


class Room(SQLModel, table=True):
    __tablename__ = "rooms"

    id: Optional[int] = Field(default=None, primary_key=True)
    room_number: str = Field(unique=True, index=True)
    block: Optional[str] = None
    capacity: int = Field(default=1)
