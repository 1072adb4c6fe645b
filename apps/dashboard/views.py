from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .stats import DashboardQueries
from .serializers import DashboardResponseSerializer


@extend_schema(
    responses={200: DashboardResponseSerializer},
    description="Resident, token and collection statistics for the current month.",
    tags=['dashboard'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_stats(request):
    """Dashboard statistics - thin HTTP handler."""
    data = DashboardQueries.dashboard()
    return Response(DashboardResponseSerializer(data).data)
