from datetime import date
from typing import List, Optional, Union
from pydantic import BaseModel, Field, field_validator

class SnackOptionResponse(BaseModel):
    id: str
    name: str
    price: int

class BookingOptionsResponse(BaseModel):
    show_times: List[str]
    snacks: List[SnackOptionResponse]
    ticket_price: int
    cab_fee: int
    max_seats: int

class BookingRequest(BaseModel):
    """A full booking draft as submitted by the booking dialog"""
    show_date: Optional[date] = None
    show_time: str = ""
    seats: Union[int, str] = ""
    snacks: List[str] = Field(default_factory=list)
    cab_requested: bool = False
    pickup_address: str = ""
    drop_address: str = ""

    @field_validator("seats", mode="after")
    @classmethod
    def seats_as_text(cls, value):
        return str(value)

class PriceBreakdownResponse(BaseModel):
    seat_count: int
    tickets: int
    snacks: int
    cab: int
    total: int

class BookingConfirmationResponse(BaseModel):
    movie_id: int
    movie_title: str
    show_date: date
    show_time: str
    seat_count: int
    snacks: List[str]
    cab_requested: bool
    pickup_address: str = ""
    drop_address: str = ""
    total: int
    message: str
