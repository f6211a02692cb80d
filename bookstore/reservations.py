from typing import Iterable, Optional

from fastapi import Request

from .models import Reservation

SEED_RESERVATIONS = (
    Reservation(
        id="1",
        name="John Doe",
        room_id="101",
        date="2025-09-10",
        time_start="13:00",
        time_end="15:00",
        purpose="Math tutoring",
    ),
    Reservation(
        id="2",
        name="Jane Smith",
        room_id="103",
        date="2025-09-12",
        time_start="10:00",
        time_end="12:00",
        purpose="Group project meeting",
    ),
)


class ReservationStore:
    """Read-only, in-memory meeting-room reservations."""

    def __init__(self, reservations: Iterable[Reservation] = SEED_RESERVATIONS):
        self._reservations = list(reservations)

    def list(self, date: Optional[str] = None) -> list[Reservation]:
        if not date:
            return list(self._reservations)
        return [reservation for reservation in self._reservations if reservation.date == date]


def get_reservation_store(request: Request) -> ReservationStore:
    return request.app.state.reservations
