"""
Output serializers for report figures. Amounts render as 2-decimal strings.
"""

from rest_framework import serializers

from apps.sales.serializers import MoneyField


class VatBucketSerializer(serializers.Serializer):
    base = MoneyField()
    vat = MoneyField()
    total = MoneyField()


class VatBreakdownSerializer(serializers.Serializer):
    vat21 = VatBucketSerializer()
    vat10 = VatBucketSerializer()
    vat4 = VatBucketSerializer()


class PaymentMethodBreakdownSerializer(serializers.Serializer):
    cash = MoneyField()
    card = MoneyField()
    transfer = MoneyField()


class PeriodSummarySerializer(serializers.Serializer):
    grossSales = MoneyField(source="gross_sales")
    netSales = MoneyField(source="net_sales")
    totalVat = MoneyField(source="total_vat")
    transactionCount = serializers.IntegerField(source="transaction_count")
    averageTicket = MoneyField(source="average_ticket")


class DashboardStatsSerializer(serializers.Serializer):
    todaySales = MoneyField(source="today_sales")
    todayTransactions = serializers.IntegerField(source="today_transactions")
    vatCollected = MoneyField(source="vat_collected")
    activeClients = serializers.IntegerField(source="active_clients")
