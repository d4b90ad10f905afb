# bakery/api/views_cash.py
from django.utils import timezone
from rest_framework.response import Response
from rest_framework.views import APIView

from bakery.api.serializers_cash import CashClosureActionSerializer, CashRegisterSerializer, PaymentEntrySerializer
from bakery.permissions import IsAdminOrManager, IsAdminRole
from bakery.services import cash_register_service as cash


def summary_payload(totals, difference=None):
    return {
        "openingCash": totals.opening_cash,
        "totalSales": totals.total_sales,
        "cashSales": totals.cash_sales,
        "cardSales": totals.card_sales,
        "transferSales": totals.transfer_sales,
        "salesByPayment": totals.sales_by_payment,
        "totalExpenses": totals.total_expenses,
        "expectedCash": totals.expected_cash,
        "difference": difference,
        "transactionCount": len(totals.entries),
        "expenses": [
            {"id": e.id, "description": e.description, "category": e.category,
             "amount": e.amount, "created_at": e.created_at}
            for e in totals.expenses
        ],
        "recentTransactions": PaymentEntrySerializer(cash.recent_transactions(totals.entries), many=True).data,
    }


class CashClosureView(APIView):
    permission_classes = [IsAdminOrManager]

    def get(self, request):
        register, totals = cash.register_snapshot()
        if register is None:
            stale = cash.stale_open_register()
            return Response({
                "hasOpenRegister": False,
                "date": timezone.localdate().isoformat(),
                "register": None,
                "summary": None,
                # still open from an earlier day: must be closed before a new one opens
                "staleRegister": CashRegisterSerializer(stale).data if stale else None,
            }, status=200)

        return Response({
            "hasOpenRegister": True,
            "date": timezone.localdate(register.date).isoformat(),
            "register": CashRegisterSerializer(register).data,
            "summary": summary_payload(totals),
            "staleRegister": None,
        }, status=200)

    def post(self, request):
        s = CashClosureActionSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        if data["action"] == "open":
            register = cash.open_register(request.user, data["openingCash"], notes=data["notes"])
            return Response(
                {"message": "Cash register opened", "register": CashRegisterSerializer(register).data},
                status=201,
            )

        register, totals, difference = cash.close_register(request.user, data["actualCash"], notes=data["notes"])
        return Response({
            "message": "Cash register closed",
            "register": CashRegisterSerializer(register).data,
            "summary": summary_payload(totals, difference),
        }, status=200)


class CleanPaymentTypesView(APIView):
    permission_classes = [IsAdminRole]

    def post(self, request):
        result = cash.clean_payment_types()
        return Response({"message": "Payment types normalized", "results": result}, status=200)
