from showxpress.db.session import Base
from showxpress.models.user import User
from showxpress.models.movie import Movie
from showxpress.models.show import Show, ShowSeat
from showxpress.models.booking import Booking, BookingSeat
