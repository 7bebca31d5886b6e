from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import JSONParser
from rest_framework.response import Response
from rest_framework.views import APIView

from revcast_core.domain.errors import InvalidParameters, SimulationCancelled

from .models import SimulationRun
from .runner import execute_scenario, execute_simulation
from .serializers import (
    ScenarioRequestSerializer,
    SimulationRequestSerializer,
    SimulationRunSerializer,
)
from .tasks import run_simulation


def _cancelled_response(exc: SimulationCancelled) -> Response:
    return Response({"detail": str(exc)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)


class SimulationView(APIView):
    parser_classes = [JSONParser]

    def post(self, request):
        serializer = SimulationRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            payload = execute_simulation(data)
        except InvalidParameters as exc:
            raise ValidationError({"detail": str(exc)}) from exc
        except SimulationCancelled as exc:
            return _cancelled_response(exc)

        run = SimulationRun.objects.create(
            name=data.get("simulationName", ""),
            simulation_type=data.get("simulationType", "monte_carlo"),
            status="completed",
            config=request.data,
            result=payload,
        )
        payload["runId"] = run.id
        return Response(payload, status=status.HTTP_200_OK)


class ScenarioView(APIView):
    parser_classes = [JSONParser]

    def post(self, request):
        serializer = ScenarioRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            payload = execute_scenario(serializer.validated_data)
        except InvalidParameters as exc:
            raise ValidationError({"detail": str(exc)}) from exc
        except SimulationCancelled as exc:
            return _cancelled_response(exc)
        return Response(payload, status=status.HTTP_200_OK)


class RunCreateView(APIView):
    parser_classes = [JSONParser]

    def post(self, request):
        serializer = SimulationRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        run = SimulationRun.objects.create(
            name=data.get("simulationName", ""),
            simulation_type=data.get("simulationType", "monte_carlo"),
            status="pending",
            config=request.data,
        )

        run_simulation.delay(run.id)
        return Response(SimulationRunSerializer(run).data, status=status.HTTP_202_ACCEPTED)


class RunDetailView(APIView):
    def get(self, request, pk: int):
        try:
            run = SimulationRun.objects.get(pk=pk)
        except SimulationRun.DoesNotExist as exc:
            raise Http404 from exc

        payload = SimulationRunSerializer(run).data
        payload["result"] = run.result
        return Response(payload)
