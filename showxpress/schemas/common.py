from typing import List, Optional
from pydantic import BaseModel


# Error responses: body of every domain failure
class ErrorResponse(BaseModel):
    error: str
    message: str


class ValidationErrorResponse(ErrorResponse):
    field: Optional[str] = None


class SeatConflictResponse(ErrorResponse):
    conflicting_seats: List[str]


class MessageResponse(BaseModel):
    success: bool = True
    message: str
