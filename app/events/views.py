"""
Views for event endpoints.

Endpoints:
    POST /api/v1/events/{id}/payout-account/ - Register the host payout account
    GET  /api/v1/events/{id}/donations/      - Completed chip-in totals
"""

from __future__ import annotations

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from events.models import Event
from events.serializers import (
    DonationTotalsSerializer,
    PayoutAccountRequestSerializer,
    PayoutAccountSerializer,
)
from events.services import EventService


class PayoutAccountView(APIView):
    """Register the bank account chip-in funds are paid out to."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="register_payout_account",
        summary="Register payout account",
        request=PayoutAccountRequestSerializer,
        responses={
            200: PayoutAccountSerializer,
            400: OpenApiResponse(description="Account could not be resolved"),
            404: OpenApiResponse(description="Event not found"),
        },
        tags=["Events"],
    )
    def post(self, request, pk):
        # Only the creator may change where money goes
        event = get_object_or_404(Event, pk=pk, creator=request.user)

        serializer = PayoutAccountRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = EventService.register_payout_account(event, **serializer.validated_data)
        if not result.success:
            return Response(result.to_response(), status=status.HTTP_400_BAD_REQUEST)

        return Response(PayoutAccountSerializer(result.data).data)


class DonationTotalsView(APIView):
    """Completed chip-in totals, visible to the event's creator."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_donation_totals",
        summary="Get chip-in totals",
        responses={
            200: DonationTotalsSerializer,
            404: OpenApiResponse(description="Event not found"),
        },
        tags=["Events"],
    )
    def get(self, request, pk):
        event = get_object_or_404(Event, pk=pk, creator=request.user)
        totals = EventService.get_donation_totals(event)
        return Response(DonationTotalsSerializer(totals).data)
