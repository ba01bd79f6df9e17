from .reservation_service import ReservationService, LoggingReservationService

__all__ = [
    "ReservationService",
    "LoggingReservationService"
]
