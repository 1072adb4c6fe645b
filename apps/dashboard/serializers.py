from rest_framework import serializers


class PendingResidentSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    cedula = serializers.CharField()
    registration_number = serializers.CharField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    due_date = serializers.DateField(allow_null=True)
    status = serializers.CharField()


class DashboardStatsSerializer(serializers.Serializer):
    total_residents = serializers.IntegerField()
    new_residents_this_month = serializers.IntegerField()
    active_tokens = serializers.IntegerField()
    new_tokens_this_month = serializers.IntegerField()
    current_month_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    previous_month_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    percentage_change = serializers.DecimalField(max_digits=12, decimal_places=2)
    pending_payments_count = serializers.IntegerField()
    pending_payments_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    pending_residents = PendingResidentSerializer(many=True)


class ActivitySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    resident_id = serializers.IntegerField()
    resident_name = serializers.CharField()
    registration_number = serializers.CharField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    payment_date = serializers.DateTimeField(allow_null=True)


class DashboardResponseSerializer(serializers.Serializer):
    stats = DashboardStatsSerializer()
    activities = ActivitySerializer(many=True)
