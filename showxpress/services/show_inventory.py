"""Seat inventory of each show.

The occupied-seat set of a show is the rows of ``show_seats`` for that show.
Changes made here join the caller's transaction; the booking ledger commits
them together with the booking they belong to.
"""

import logging
import uuid
from typing import Iterable, List, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from showxpress.core.exceptions import NotFoundError, SeatConflictError
from showxpress.models.show import Show, ShowSeat
from showxpress.utils.ids import parse_id
from showxpress.utils.seating import sort_labels

logger = logging.getLogger(__name__)


class ShowInventory:
    def __init__(self, db: Session):
        self.db = db

    def get_show(self, show_id: Union[str, uuid.UUID]) -> Show:
        show = self.db.get(Show, parse_id(show_id, "Show"))
        if show is None:
            raise NotFoundError("Show", str(show_id))
        return show

    def show_for_update(self, show_id: uuid.UUID):
        return self.db.query(Show).filter(Show.id == show_id).with_for_update()

    def lock_show(self, show_id: Union[str, uuid.UUID]) -> Show:
        """
        Load the show and lock its row until the transaction ends. Seat sales
        and show deletion both take this lock, so they run one after the other.
        """
        show = self.show_for_update(parse_id(show_id, "Show")).one_or_none()
        if show is None:
            raise NotFoundError("Show", str(show_id))
        return show

    def occupied_seats(self, show_id: Union[str, uuid.UUID]) -> List[str]:
        show = self.get_show(show_id)
        rows = self.db.query(ShowSeat.seat_label).filter(ShowSeat.show_id == show.id).all()
        return sort_labels(label for (label,) in rows)

    def find_conflicts(self, show_id: uuid.UUID, seat_labels: Iterable[str]) -> List[str]:
        """Return the labels from `seat_labels` that are already sold."""
        labels = list(seat_labels)
        if not labels:
            return []
        rows = (
            self.db.query(ShowSeat.seat_label)
            .filter(ShowSeat.show_id == show_id, ShowSeat.seat_label.in_(labels))
            .all()
        )
        return sort_labels(label for (label,) in rows)

    def reserve_seats(
        self,
        show_id: Union[str, uuid.UUID],
        seat_labels: List[str],
        booking_id: uuid.UUID,
    ) -> Show:
        """
        Mark `seat_labels` as sold to `booking_id`.

        Raises SeatConflictError listing the labels that are already taken.
        The pre-check gives a precise answer without writing; the unique
        (show_id, seat_label) constraint catches a seat sold by a concurrent
        request between the check and the insert. In that case the whole
        transaction is rolled back, so the caller's pending booking goes too.
        """
        show = self.lock_show(show_id)
        show_id = show.id

        conflicts = self.find_conflicts(show_id, seat_labels)
        if conflicts:
            logger.info("Seat conflict on show %s: %s", show_id, ", ".join(conflicts))
            raise SeatConflictError(conflicts)

        self.db.add_all([
            ShowSeat(show_id=show_id, seat_label=label, booking_id=booking_id)
            for label in seat_labels
        ])
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            conflicts = self.find_conflicts(show_id, seat_labels)
            logger.info(
                "Seat conflict on show %s detected at write time: %s",
                show_id, ", ".join(conflicts or seat_labels),
            )
            raise SeatConflictError(conflicts or seat_labels)

        self.db.expire(show, ["seats"])
        return show

    def release_seats(self, show_id: Union[str, uuid.UUID], seat_labels: Iterable[str]) -> int:
        """Free `seat_labels`. Labels that are not occupied are ignored."""
        show_id = parse_id(show_id, "Show")
        labels = list(seat_labels)
        if not labels:
            return 0

        released = (
            self.db.query(ShowSeat)
            .filter(ShowSeat.show_id == show_id, ShowSeat.seat_label.in_(labels))
            .delete(synchronize_session="fetch")
        )

        show = self.db.get(Show, show_id)
        if show is not None:
            self.db.expire(show, ["seats"])
        return released
