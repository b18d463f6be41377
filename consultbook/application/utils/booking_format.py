from __future__ import annotations

from consultbook.application.utils.clock import format_long_date, format_short_date, format_time_12h
from consultbook.domain.entities.booking import BookingAggregate, ConfirmedBooking

NOT_SPECIFIED = "Not specified"
NO_MESSAGE = "No additional message"


def format_price(price: int, currency_symbol: str) -> str:
    return f"{currency_symbol}{price}"


def build_record_fields(booking: ConfirmedBooking, currency_symbol: str) -> dict[str, str]:
    """Flat named fields sent to the booking record sink."""
    customer = booking.customer
    return {
        "service": booking.service_name,
        "date": format_short_date(booking.date),
        "time": format_time_12h(booking.start_time),
        "duration": f"{booking.duration_minutes} minutes",
        "price": format_price(booking.price, currency_symbol),
        "client_name": customer.full_name,
        "email": customer.email,
        "phone": customer.phone,
        "project_type": customer.project_type or NOT_SPECIFIED,
        "budget": customer.budget or NOT_SPECIFIED,
        "timeline": customer.timeline or NOT_SPECIFIED,
        "message": customer.details or NO_MESSAGE,
        "timestamp": booking.submitted_at.isoformat(),
    }


def format_operator_message(booking: ConfirmedBooking, currency_symbol: str) -> str:
    customer = booking.customer
    booked_at = booking.submitted_at.strftime("%d/%m/%Y, %I:%M:%S %p")
    lines = [
        "*NEW APPOINTMENT BOOKING*",
        f"Ref: {booking.reference}",
        "",
        f"*Service:* {booking.service_name}",
        f"*Date:* {format_long_date(booking.date)}",
        f"*Time:* {format_time_12h(booking.start_time)}",
        f"*Duration:* {booking.duration_minutes} minutes",
        f"*Consultation Fee:* {format_price(booking.price, currency_symbol)}",
        "",
        "*Client Details:*",
        f"*Name:* {customer.full_name}",
        f"*Phone:* {customer.phone}",
        f"*Email:* {customer.email}",
    ]
    if customer.company:
        lines.append(f"*Company:* {customer.company}")
    lines += [
        "",
        "*Project Details:*",
        f"*Type:* {customer.project_type or NOT_SPECIFIED}",
        f"*Budget:* {customer.budget or NOT_SPECIFIED}",
        f"*Timeline:* {customer.timeline or NOT_SPECIFIED}",
        "",
        f"*Message:* {customer.details or NO_MESSAGE}",
    ]
    if customer.special_requests:
        lines.append(f"*Special Requests:* {customer.special_requests}")
    lines += [
        "",
        f"*Booked at:* {booked_at}",
        "",
        "_Please confirm this appointment with the client._",
    ]
    return "\n".join(lines)


def build_summary(aggregate: BookingAggregate, currency_symbol: str) -> dict[str, str]:
    """Read-only confirmation summary for display."""
    if not (aggregate.service_name and aggregate.date and aggregate.start_time and aggregate.customer):
        raise ValueError("Booking summary needs service, date, time and customer details")
    return {
        "service": aggregate.service_name,
        "duration": f"{aggregate.duration_minutes} minutes",
        "price": format_price(aggregate.price or 0, currency_symbol),
        "date": format_long_date(aggregate.date),
        "time": format_time_12h(aggregate.start_time),
        "name": aggregate.customer.full_name,
        "email": aggregate.customer.email,
        "phone": aggregate.customer.phone,
    }
