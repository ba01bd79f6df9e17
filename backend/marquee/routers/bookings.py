import logging
from fastapi import APIRouter, Depends

from marquee.core.container import ServiceContainer
from marquee.core.session import SessionUser
from marquee.routers.common import handle_exception
from marquee.routers.dependencies import get_catalog, get_container, get_session_user
from marquee.schemas.booking import (
    BookingConfirmationResponse, BookingOptionsResponse, BookingRequest, PriceBreakdownResponse, SnackOptionResponse
)
from marquee.services.booking_wizard import SHOW_TIMES, SNACK_OPTIONS, BookingWizard
from marquee.services.catalog_service import MovieCatalogService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["bookings"], dependencies=[Depends(get_session_user)])

def fill_wizard(wizard: BookingWizard, booking: BookingRequest) -> BookingWizard:
    """Walk a fresh wizard through every step with the submitted draft.

    Each ``next`` call enforces the step it leaves, so an invalid draft stops
    at the first failing step with a BookingValidationException.
    """
    wizard.select_date(booking.show_date)
    wizard.select_time(booking.show_time)
    wizard.next()
    wizard.set_seats(booking.seats)
    wizard.next()
    wizard.select_snacks(booking.snacks)
    wizard.next()
    wizard.set_cab(booking.cab_requested, booking.pickup_address, booking.drop_address)
    return wizard

@router.get("/options", response_model=BookingOptionsResponse)
def get_booking_options(container: ServiceContainer = Depends(get_container)):
    settings = container.settings
    return BookingOptionsResponse(
        show_times=list(SHOW_TIMES),
        snacks=[SnackOptionResponse(id=s.id, name=s.name, price=s.price) for s in SNACK_OPTIONS],
        ticket_price=settings.TICKET_PRICE,
        cab_fee=settings.CAB_FEE,
        max_seats=settings.MAX_SEATS,
    )

@router.post("/quote", response_model=PriceBreakdownResponse)
def quote_booking(booking: BookingRequest, container: ServiceContainer = Depends(get_container)):
    """Price of a draft at any step; no validation beyond known snacks"""
    try:
        wizard = container.new_booking(movie_id=0, movie_title="")
        wizard.set_seats(booking.seats)
        wizard.select_snacks(booking.snacks)
        wizard.set_cab(booking.cab_requested, booking.pickup_address, booking.drop_address)
        breakdown = wizard.breakdown()
        return PriceBreakdownResponse(
            seat_count=breakdown.seat_count,
            tickets=breakdown.tickets,
            snacks=breakdown.snacks,
            cab=breakdown.cab,
            total=breakdown.total,
        )
    except Exception as e:
        raise handle_exception(e)

@router.post("/{movie_id}/confirm", response_model=BookingConfirmationResponse)
def confirm_booking(
    movie_id: int,
    booking: BookingRequest,
    user: SessionUser = Depends(get_session_user),
    catalog: MovieCatalogService = Depends(get_catalog),
    container: ServiceContainer = Depends(get_container),
):
    """Validate a complete draft and hand it to the reservation service"""
    try:
        movie = catalog.get_movie_details(movie_id)
        wizard = fill_wizard(container.new_booking(movie.id, movie.title, user_id=user.id), booking)
        confirmation = wizard.confirm()
        return BookingConfirmationResponse(
            movie_id=confirmation.movie_id,
            movie_title=confirmation.movie_title,
            show_date=confirmation.show_date,
            show_time=confirmation.show_time,
            seat_count=confirmation.seat_count,
            snacks=list(confirmation.snacks),
            cab_requested=confirmation.cab_requested,
            pickup_address=confirmation.pickup_address,
            drop_address=confirmation.drop_address,
            total=confirmation.total,
            message=f"Your tickets for {confirmation.movie_title} have been booked successfully.",
        )
    except Exception as e:
        raise handle_exception(e)
