from decimal import Decimal

from showxpress.schemas.booking import SeatSelection


def seat(row, number, price=200):
    # Unvalidated, so service-level checks see what a direct caller could pass
    return SeatSelection.model_construct(row=row, number=number, price=Decimal(str(price)))


def seat_json(row, number, price=200):
    return {"row": row, "number": number, "price": price}
