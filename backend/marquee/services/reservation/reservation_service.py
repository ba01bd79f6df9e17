import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

class ReservationService(ABC):
    """Collaborator that performs the real reservation for a confirmed booking"""

    @abstractmethod
    def reserve(self, confirmation) -> None:
        """Accept a ``BookingConfirmation``"""
        pass

class LoggingReservationService(ReservationService):
    """Development reservation service: records the hand-off in the log only"""

    def reserve(self, confirmation) -> None:
        snacks = ", ".join(confirmation.snacks) or "none"
        cab = f"{confirmation.pickup_address} -> {confirmation.drop_address}" if confirmation.cab_requested else "no"
        logger.info(
            f"Reservation requested: movie={confirmation.movie_id} user={confirmation.user_id} "
            f"date={confirmation.show_date.isoformat()} time={confirmation.show_time} "
            f"seats={confirmation.seat_count} snacks={snacks} cab={cab} total=${confirmation.total}"
        )
