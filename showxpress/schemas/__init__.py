from showxpress.schemas.common import ErrorResponse, ValidationErrorResponse, SeatConflictResponse, MessageResponse
from showxpress.schemas.movie import Movie, MovieSummary
from showxpress.schemas.show import Show, ShowCreate, ShowUpdate, ShowSummary
from showxpress.schemas.booking import (
    Booking, BookingCreate, BookingCancelResponse, AdminBooking,
    BookingSeatResponse, SeatSelection, UserInfo,
)
from showxpress.schemas.user import User, UserUpsert, AdminLogin, Token
from showxpress.schemas.payment import (
    PaymentIntentCreate, PaymentIntentResponse, PaymentVerifyRequest, PaymentVerifyResponse,
)
