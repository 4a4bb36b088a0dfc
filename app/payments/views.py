"""
Views for payments endpoints.

Endpoints:
    POST /api/v1/payments/chip-in/ - Start a chip-in and get the checkout link
    GET  /api/v1/payments/verify-payment/?reference= - Confirm after checkout
    POST /api/v1/payments/verify-account/ - Resolve a bank account holder name

The Paystack webhook lives in payments.webhooks.views.

Domain errors raised by services (PaymentNotFoundError, AmountMismatchError,
PaystackError, ...) are rendered by core.exception_handlers.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from events.services import EventService
from payments.exceptions import PaymentValidationError
from payments.serializers import (
    BankAccountSerializer,
    ChipInRequestSerializer,
    ChipInResponseSerializer,
    ConfirmedDonationSerializer,
    VerifyBankAccountRequestSerializer,
    VerifyPaymentResponseSerializer,
)
from payments.services import DonationLifecycleService, PaymentConfirmationService
from payments.state_machines import PaymentType


class ChipInView(APIView):
    """Start a chip-in towards a private event."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="create_chip_in",
        summary="Start a chip-in",
        request=ChipInRequestSerializer,
        responses={
            201: ChipInResponseSerializer,
            400: OpenApiResponse(description="Event does not accept this chip-in"),
            404: OpenApiResponse(description="Event not found"),
            500: OpenApiResponse(description="Paystack could not start the payment"),
        },
        tags=["Payments"],
    )
    def post(self, request):
        serializer = ChipInRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = DonationLifecycleService.initiate_chip_in(
            user=request.user,
            event_id=serializer.validated_data["event_id"],
            amount=serializer.validated_data["amount"],
        )
        if not result.success:
            return Response(result.to_response(), status=status.HTTP_400_BAD_REQUEST)

        data = ChipInResponseSerializer(
            {
                "payment_link": result.data.payment_link,
                "reference": result.data.donation.payment_reference,
            }
        ).data
        return Response(
            {
                "status": "success",
                "data": data,
                "message": "Payment link created successfully",
            },
            status=status.HTTP_201_CREATED,
        )


class VerifyPaymentView(APIView):
    """
    Confirm a payment after the Paystack checkout redirect.

    Safe to call any number of times, before or after the webhook: an
    already-completed donation is returned as is.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="verify_payment",
        summary="Verify a payment",
        parameters=[
            OpenApiParameter("reference", str, OpenApiParameter.QUERY, required=True),
        ],
        responses={
            200: VerifyPaymentResponseSerializer,
            400: OpenApiResponse(description="Missing reference, unsuccessful payment or amount mismatch"),
            404: OpenApiResponse(description="No donation for this reference"),
            500: OpenApiResponse(description="Paystack verification failed"),
        },
        tags=["Payments"],
    )
    def get(self, request):
        reference = request.query_params.get("reference", "").strip()
        if not reference:
            raise PaymentValidationError(
                "Payment reference is required",
                error_code="REFERENCE_REQUIRED",
            )

        outcome = PaymentConfirmationService.confirm(reference)

        data = None
        if outcome.payment_type == PaymentType.CHIPIN and outcome.record is not None:
            data = ConfirmedDonationSerializer(outcome.record).data

        return Response(
            {
                "status": "success",
                "data": data,
                "payment_type": outcome.payment_type,
                "message": "Payment verified successfully",
            }
        )


class VerifyBankAccountView(APIView):
    """Resolve the holder name of a bank account."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="verify_bank_account",
        summary="Verify a bank account",
        request=VerifyBankAccountRequestSerializer,
        responses={
            200: BankAccountSerializer,
            400: OpenApiResponse(description="Account could not be resolved"),
        },
        tags=["Payments"],
    )
    def post(self, request):
        serializer = VerifyBankAccountRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = EventService.resolve_bank_account(**serializer.validated_data)
        if not result.success:
            return Response(result.to_response(), status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {
                "status": "success",
                "data": BankAccountSerializer(result.data).data,
                "message": "Bank account verified successfully",
            }
        )
