import logging
from dataclasses import dataclass, field
from datetime import date
from enum import IntEnum
from typing import Callable, Dict, Iterable, Optional, Set, Tuple

from marquee.core.exceptions import BookingValidationException
from marquee.services.reservation import ReservationService

logger = logging.getLogger(__name__)

TICKET_PRICE = 12
CAB_FEE = 15
MAX_SEATS = 10
SHOW_TIMES: Tuple[str, ...] = ("10:00", "13:00", "16:00", "19:00", "22:00")


class BookingStep(IntEnum):
    DATE_TIME = 1
    SEATS = 2
    SNACKS = 3
    CAB = 4


@dataclass(frozen=True)
class SnackOption:
    id: str
    name: str
    price: int


SNACK_OPTIONS: Tuple[SnackOption, ...] = (
    SnackOption("popcorn", "Popcorn", 5),
    SnackOption("soda", "Soda", 3),
    SnackOption("nachos", "Nachos", 7),
    SnackOption("candy", "Candy", 4),
)
SNACKS_BY_ID: Dict[str, SnackOption] = {snack.id: snack for snack in SNACK_OPTIONS}


@dataclass
class BookingDraft:
    """In-progress booking form state; lives only as long as its wizard"""
    step: BookingStep = BookingStep.DATE_TIME
    show_date: Optional[date] = None
    show_time: str = ""
    seats: str = ""
    snacks: Set[str] = field(default_factory=set)
    cab_requested: bool = False
    pickup_address: str = ""
    drop_address: str = ""


@dataclass(frozen=True)
class PriceBreakdown:
    seat_count: int
    tickets: int
    snacks: int
    cab: int

    @property
    def total(self) -> int:
        return self.tickets + self.snacks + self.cab


@dataclass(frozen=True)
class BookingConfirmation:
    """Validated booking handed to the reservation service"""
    movie_id: int
    movie_title: str
    show_date: date
    show_time: str
    seat_count: int
    snacks: Tuple[str, ...]
    cab_requested: bool
    pickup_address: str
    drop_address: str
    total: int
    user_id: Optional[int] = None


def parse_seat_count(raw) -> Optional[int]:
    """Seat input as an int, or None when it is not a whole number"""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


def price_breakdown(draft: BookingDraft, ticket_price: int = TICKET_PRICE, cab_fee: int = CAB_FEE) -> PriceBreakdown:
    """Itemized price of a draft. Unparseable seat input counts as zero seats."""
    seat_count = max(parse_seat_count(draft.seats) or 0, 0)
    snack_total = sum(SNACKS_BY_ID[snack_id].price for snack_id in draft.snacks if snack_id in SNACKS_BY_ID)
    return PriceBreakdown(
        seat_count=seat_count,
        tickets=seat_count * ticket_price,
        snacks=snack_total,
        cab=cab_fee if draft.cab_requested else 0,
    )


def calculate_total(draft: BookingDraft, ticket_price: int = TICKET_PRICE, cab_fee: int = CAB_FEE) -> int:
    return price_breakdown(draft, ticket_price, cab_fee).total


class BookingWizard:
    """Four-step booking flow for one movie: date/time, seats, snacks, cab.

    ``next`` only moves forward when the current step is valid, ``back`` never
    clears entered data, and ``confirm`` is only possible from the cab step.
    The total is derived from the draft on every read.
    """

    def __init__(
        self,
        movie_id: int,
        movie_title: str = "",
        reservation_service: Optional[ReservationService] = None,
        user_id: Optional[int] = None,
        today: Callable[[], date] = date.today,
        ticket_price: int = TICKET_PRICE,
        cab_fee: int = CAB_FEE,
        max_seats: int = MAX_SEATS,
    ):
        self.movie_id = movie_id
        self.movie_title = movie_title
        self.reservation_service = reservation_service
        self.user_id = user_id
        self.today = today
        self.ticket_price = ticket_price
        self.cab_fee = cab_fee
        self.max_seats = max_seats
        self.draft = BookingDraft()

    @property
    def step(self) -> BookingStep:
        return self.draft.step

    @property
    def total(self) -> int:
        return calculate_total(self.draft, self.ticket_price, self.cab_fee)

    def breakdown(self) -> PriceBreakdown:
        return price_breakdown(self.draft, self.ticket_price, self.cab_fee)

    # Form input

    def select_date(self, show_date: Optional[date]) -> None:
        self.draft.show_date = show_date

    def select_time(self, show_time: str) -> None:
        self.draft.show_time = show_time or ""

    def set_seats(self, seats) -> None:
        self.draft.seats = "" if seats is None else str(seats)

    def toggle_snack(self, snack_id: str) -> bool:
        """Flip a snack on or off; returns whether it is now selected"""
        if snack_id not in SNACKS_BY_ID:
            raise BookingValidationException(f"Unknown snack: {snack_id}")
        if snack_id in self.draft.snacks:
            self.draft.snacks.discard(snack_id)
            return False
        self.draft.snacks.add(snack_id)
        return True

    def select_snacks(self, snack_ids: Iterable[str]) -> None:
        selected = set(snack_ids)
        unknown = selected - set(SNACKS_BY_ID)
        if unknown:
            raise BookingValidationException(f"Unknown snack: {', '.join(sorted(unknown))}")
        self.draft.snacks = selected

    def set_cab(self, requested: bool, pickup_address: str = "", drop_address: str = "") -> None:
        self.draft.cab_requested = bool(requested)
        self.draft.pickup_address = pickup_address or ""
        self.draft.drop_address = drop_address or ""

    # Validation

    def seat_count(self) -> Optional[int]:
        count = parse_seat_count(self.draft.seats)
        if count is None or not 1 <= count <= self.max_seats:
            return None
        return count

    def is_step_valid(self, step: Optional[BookingStep] = None) -> bool:
        step = self.draft.step if step is None else step
        draft = self.draft
        if step == BookingStep.DATE_TIME:
            return (
                draft.show_date is not None
                and draft.show_date >= self.today()
                and draft.show_time in SHOW_TIMES
            )
        if step == BookingStep.SEATS:
            return self.seat_count() is not None
        if step == BookingStep.SNACKS:
            return True
        return not draft.cab_requested or bool(draft.pickup_address.strip() and draft.drop_address.strip())

    @property
    def can_proceed(self) -> bool:
        return self.is_step_valid()

    # Transitions

    def next(self) -> BookingStep:
        if self.draft.step == BookingStep.CAB:
            return self.draft.step
        if not self.can_proceed:
            raise BookingValidationException(self._step_error(self.draft.step))
        self.draft.step = BookingStep(self.draft.step + 1)
        return self.draft.step

    def back(self) -> BookingStep:
        if self.draft.step > BookingStep.DATE_TIME:
            self.draft.step = BookingStep(self.draft.step - 1)
        return self.draft.step

    def reset(self) -> None:
        self.draft = BookingDraft()

    def confirm(self) -> BookingConfirmation:
        """Hand the finished booking to the reservation service and start over"""
        if self.draft.step != BookingStep.CAB:
            raise BookingValidationException("Booking can only be confirmed from the last step")
        for step in BookingStep:
            if not self.is_step_valid(step):
                raise BookingValidationException(self._step_error(step))

        draft = self.draft
        confirmation = BookingConfirmation(
            movie_id=self.movie_id,
            movie_title=self.movie_title,
            show_date=draft.show_date,
            show_time=draft.show_time,
            seat_count=self.seat_count(),
            snacks=tuple(snack.id for snack in SNACK_OPTIONS if snack.id in draft.snacks),
            cab_requested=draft.cab_requested,
            pickup_address=draft.pickup_address if draft.cab_requested else "",
            drop_address=draft.drop_address if draft.cab_requested else "",
            total=self.total,
            user_id=self.user_id,
        )
        if self.reservation_service is not None:
            self.reservation_service.reserve(confirmation)
        logger.info(f"Booking confirmed for movie {self.movie_id}: total ${confirmation.total}")
        self.reset()
        return confirmation

    def _step_error(self, step: BookingStep) -> str:
        if step == BookingStep.DATE_TIME:
            return "Choose a show date from today onwards and one of the listed show times"
        if step == BookingStep.SEATS:
            return f"Number of seats must be between 1 and {self.max_seats}"
        return "Pickup and drop addresses are required for a cab"
