"""Notification helpers for booking workflows.

Each helper builds the title, body and deep link for one marketplace event
and hands it to the notification service. Helpers never raise: a failure
to notify must not fail the booking, payment or review that triggered it.

Usage:
    from modules.bookings import notifications

    await notifications.notify_booking_confirmed(
        customer_id,
        chef_id,
        booking_id="b-1",
        chef_name="Marie",
        event_date=date(2026, 6, 3),
        event_time="7:00 PM",
    )
"""

from datetime import date, datetime
from typing import Any, Dict, Literal, Optional, Union

from infrastructure.logging import get_module_logger
from infrastructure.notifications import (
    NotificationPayload,
    NotificationService,
    NotificationType,
)
from infrastructure.services import get_notification_service

logger = get_module_logger()

BOOKINGS_URL = "/dashboard?tab=bookings"
MESSAGES_URL = "/dashboard?tab=messages"
REVIEWS_URL = "/dashboard?tab=reviews"
CHEF_DASHBOARD_URL = "/chef/dashboard"

MESSAGE_PREVIEW_LENGTH = 100


def format_event_date(event_date: Union[date, datetime]) -> str:
    """Long US date, e.g. "June 3, 2026"."""
    return f"{event_date.strftime('%B')} {event_date.day}, {event_date.year}"


def format_amount(amount: float) -> str:
    return f"${amount:,.2f}"


def preview_message(text: str, limit: int = MESSAGE_PREVIEW_LENGTH) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


async def _send(
    user_id: str,
    notification_type: NotificationType,
    title: str,
    body: str,
    data: Dict[str, Any],
    service: Optional[NotificationService] = None,
) -> Optional[str]:
    service = service or get_notification_service()
    try:
        notification_id = await service.send_notification(
            user_id,
            notification_type,
            NotificationPayload(title=title, body=body, data=data),
        )
    except Exception as e:
        logger.error(
            "workflow_notification_failed",
            user_id=user_id,
            notification_type=notification_type.value,
            error=str(e),
            exc_info=True,
        )
        return None

    logger.info(
        "workflow_notification_sent",
        user_id=user_id,
        notification_type=notification_type.value,
        notification_id=notification_id,
    )
    return notification_id


async def notify_booking_requested(
    customer_id: str,
    chef_id: str,
    booking_id: str,
    chef_name: str,
    event_date: Union[date, datetime],
    event_time: str,
    guest_count: int,
    service: Optional[NotificationService] = None,
) -> None:
    """Confirm the request to the customer and alert the chef."""
    when = format_event_date(event_date)
    await _send(
        customer_id,
        NotificationType.BOOKING_REQUESTED,
        "Booking Request Sent",
        f"Your booking request with {chef_name} for {when} has been sent.",
        {"bookingId": booking_id, "chefName": chef_name, "url": BOOKINGS_URL},
        service,
    )
    await _send(
        chef_id,
        NotificationType.BOOKING_REQUESTED,
        "New Booking Request!",
        f"New booking request for {when} at {event_time} for {guest_count} guests.",
        {"bookingId": booking_id, "url": BOOKINGS_URL},
        service,
    )


async def notify_booking_confirmed(
    customer_id: str,
    booking_id: str,
    chef_name: str,
    event_date: Union[date, datetime],
    event_time: str,
    service: Optional[NotificationService] = None,
) -> Optional[str]:
    return await _send(
        customer_id,
        NotificationType.BOOKING_CONFIRMED,
        "Booking Confirmed!",
        f"{chef_name} has confirmed your booking for "
        f"{format_event_date(event_date)} at {event_time}.",
        {
            "bookingId": booking_id,
            "chefName": chef_name,
            "eventDate": event_date.isoformat(),
            "url": BOOKINGS_URL,
        },
        service,
    )


async def notify_booking_cancelled(
    user_id: str,
    booking_id: str,
    chef_name: str,
    event_date: Union[date, datetime],
    cancelled_by: Literal["customer", "chef"],
    service: Optional[NotificationService] = None,
) -> Optional[str]:
    """Wording depends on who cancelled."""
    when = format_event_date(event_date)
    if cancelled_by == "customer":
        body = f"Your booking with {chef_name} for {when} has been cancelled."
    else:
        body = f"{chef_name} has cancelled your booking for {when}."
    return await _send(
        user_id,
        NotificationType.BOOKING_CANCELLED,
        "Booking Cancelled",
        body,
        {"bookingId": booking_id, "cancelledBy": cancelled_by, "url": BOOKINGS_URL},
        service,
    )


async def notify_booking_rejected(
    customer_id: str,
    booking_id: str,
    chef_name: str,
    event_date: Union[date, datetime],
    service: Optional[NotificationService] = None,
) -> Optional[str]:
    return await _send(
        customer_id,
        NotificationType.BOOKING_REJECTED,
        "Booking Request Declined",
        f"Unfortunately, {chef_name} is unable to accommodate your booking "
        f"request for {format_event_date(event_date)}.",
        {"bookingId": booking_id, "url": BOOKINGS_URL},
        service,
    )


async def notify_booking_reminder(
    customer_id: str,
    booking_id: str,
    chef_name: str,
    event_time: str,
    event_address: str,
    service: Optional[NotificationService] = None,
) -> Optional[str]:
    """Sent the day before the event."""
    return await _send(
        customer_id,
        NotificationType.BOOKING_REMINDER,
        "Booking Reminder",
        f"Your experience with {chef_name} is tomorrow at {event_time}. "
        f"Location: {event_address}",
        {"bookingId": booking_id, "url": BOOKINGS_URL},
        service,
    )


async def notify_booking_completed(
    customer_id: str,
    booking_id: str,
    chef_name: str,
    service: Optional[NotificationService] = None,
) -> Optional[str]:
    """Ask the customer for a review."""
    return await _send(
        customer_id,
        NotificationType.BOOKING_COMPLETED,
        "How was your experience?",
        f"We hope you enjoyed your experience with {chef_name}! "
        "Please take a moment to leave a review.",
        {"bookingId": booking_id, "url": f"{BOOKINGS_URL}&review={booking_id}"},
        service,
    )


async def notify_payment_success(
    user_id: str,
    booking_id: str,
    amount: float,
    chef_name: str,
    service: Optional[NotificationService] = None,
) -> Optional[str]:
    return await _send(
        user_id,
        NotificationType.PAYMENT_SUCCESS,
        "Payment Successful",
        f"Your payment of {format_amount(amount)} for your booking with "
        f"{chef_name} was successful.",
        {"bookingId": booking_id, "amount": amount, "url": BOOKINGS_URL},
        service,
    )


async def notify_payment_failed(
    user_id: str,
    booking_id: str,
    amount: float,
    reason: Optional[str] = None,
    service: Optional[NotificationService] = None,
) -> Optional[str]:
    return await _send(
        user_id,
        NotificationType.PAYMENT_FAILED,
        "Payment Failed",
        f"Your payment of {format_amount(amount)} could not be processed. "
        f"{reason or 'Please update your payment method.'}",
        {"bookingId": booking_id, "url": f"{BOOKINGS_URL}&payment={booking_id}"},
        service,
    )


async def notify_payment_refunded(
    user_id: str,
    booking_id: str,
    amount: float,
    service: Optional[NotificationService] = None,
) -> Optional[str]:
    return await _send(
        user_id,
        NotificationType.PAYMENT_REFUNDED,
        "Refund Processed",
        f"A refund of {format_amount(amount)} has been issued to your original "
        "payment method.",
        {"bookingId": booking_id, "amount": amount, "url": BOOKINGS_URL},
        service,
    )


async def notify_message_received(
    recipient_id: str,
    conversation_id: str,
    sender_name: str,
    message_text: str,
    service: Optional[NotificationService] = None,
) -> Optional[str]:
    return await _send(
        recipient_id,
        NotificationType.MESSAGE_RECEIVED,
        f"New message from {sender_name}",
        preview_message(message_text),
        {"conversationId": conversation_id, "url": MESSAGES_URL},
        service,
    )


async def notify_review_received(
    chef_id: str,
    review_id: str,
    customer_name: str,
    rating: int,
    service: Optional[NotificationService] = None,
) -> Optional[str]:
    return await _send(
        chef_id,
        NotificationType.REVIEW_RECEIVED,
        "New Review Received",
        f"{customer_name} left you a {rating}-star review!",
        {"reviewId": review_id, "rating": rating, "url": REVIEWS_URL},
        service,
    )


async def notify_chef_application_approved(
    chef_user_id: str,
    service: Optional[NotificationService] = None,
) -> Optional[str]:
    return await _send(
        chef_user_id,
        NotificationType.CHEF_APPLICATION_APPROVED,
        "Welcome to Dine Maison!",
        "Your chef application has been approved. Complete your profile to "
        "start receiving bookings.",
        {"url": CHEF_DASHBOARD_URL},
        service,
    )


async def notify_chef_application_rejected(
    chef_user_id: str,
    reason: Optional[str] = None,
    service: Optional[NotificationService] = None,
) -> Optional[str]:
    body = "Unfortunately, your chef application was not approved at this time."
    if reason:
        body = f"{body} Reason: {reason}"
    return await _send(
        chef_user_id,
        NotificationType.CHEF_APPLICATION_REJECTED,
        "Chef Application Update",
        body,
        {"url": CHEF_DASHBOARD_URL},
        service,
    )
