"""Donation request endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from asoniped_backend.api.dependencies import (
    AdminUser,
    OptionalUser,
    get_donation_service,
)
from asoniped_backend.api.errors import http_error
from asoniped_backend.api.models import (
    DonationCreatedResponse,
    DonationCreateRequest,
    DonationResponse,
    MessageResponse,
)
from asoniped_backend.api.services import DonationService, ServiceError

router = APIRouter(prefix="/donations", tags=["donations"])

DonationServiceDep = Annotated[DonationService, Depends(get_donation_service)]


@router.get("", response_model=list[DonationResponse])
def list_donations(service: DonationServiceDep) -> list[DonationResponse]:
    return [
        DonationResponse.model_validate(donation, from_attributes=True)
        for donation in service.list_donations()
    ]


@router.get("/{donation_id}", response_model=DonationResponse)
def get_donation(donation_id: int, service: DonationServiceDep) -> DonationResponse:
    try:
        donation = service.get(donation_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return DonationResponse.model_validate(donation, from_attributes=True)


@router.post(
    "",
    response_model=DonationCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_donation(
    payload: DonationCreateRequest,
    user: OptionalUser,
    service: DonationServiceDep,
) -> DonationCreatedResponse:
    """Store a help request and open a ticket for it.

    Signed-in callers get a regular ticket; everyone else gets a public
    ticket code to follow the conversation.
    """

    receipt = service.create(
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        subject=payload.subject,
        message=payload.message,
        privacy_accepted=payload.privacy_accepted,
        communication_accepted=payload.communication_accepted,
        is_anonymous=payload.is_anonymous,
        user=user,
    )
    if receipt.ticket is not None:
        return DonationCreatedResponse(
            message="Donation created and ticket opened",
            donation_id=receipt.donation.id,
            ticket_id=receipt.ticket.id,
        )
    return DonationCreatedResponse(
        message="Anonymous donation created and ticket opened",
        donation_id=receipt.donation.id,
        anonymous_ticket_id=receipt.anonymous_ticket.ticket_id,
        session_id=receipt.anonymous_ticket.session_id,
    )


@router.delete("/{donation_id}", response_model=MessageResponse)
def delete_donation(
    donation_id: int, _: AdminUser, service: DonationServiceDep
) -> MessageResponse:
    service.delete(donation_id)
    return MessageResponse(message="Donation deleted")
