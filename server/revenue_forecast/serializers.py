from __future__ import annotations

from django.conf import settings
from rest_framework import serializers

from revcast_core.services.scenario import PRESETS

from .models import SimulationRun


class SimulationParametersSerializer(serializers.Serializer):
    avgGrowthRate = serializers.FloatField(default=0.0)
    growthVolatility = serializers.FloatField(default=0.0)
    avgChurnRate = serializers.FloatField(default=0.0)
    churnVolatility = serializers.FloatField(default=0.0)
    avgExpansionRate = serializers.FloatField(default=0.0)
    expansionVolatility = serializers.FloatField(default=0.0)
    seasonalityFactor = serializers.FloatField(default=0.0)


class SimulationRequestSerializer(serializers.Serializer):
    simulationName = serializers.CharField(required=False, allow_blank=True, max_length=120, default="")
    simulationType = serializers.CharField(required=False, max_length=64, default="monte_carlo")
    numIterations = serializers.IntegerField(min_value=1, default=10000)
    timeHorizonMonths = serializers.IntegerField(min_value=1, default=12)
    baseMRR = serializers.FloatField(min_value=0.0)
    baseARR = serializers.FloatField(required=False, allow_null=True)
    targetValue = serializers.FloatField(required=False, allow_null=True)
    parameters = SimulationParametersSerializer(required=False)
    seed = serializers.IntegerField(required=False, allow_null=True)
    previousSnapshot = serializers.DictField(required=False)

    def validate_numIterations(self, value: int) -> int:
        limit = settings.REVCAST_MAX_ITERATIONS
        if value > limit:
            raise serializers.ValidationError(f"Ensure this value is less than or equal to {limit}.")
        return value


class ScenarioRequestSerializer(SimulationRequestSerializer):
    preset = serializers.ChoiceField(choices=sorted(PRESETS), required=False)
    delta = serializers.JSONField(required=False)

    def validate(self, attrs):
        if ("preset" in attrs) == ("delta" in attrs):
            raise serializers.ValidationError("Provide exactly one of 'preset' or 'delta'.")
        if "delta" in attrs and not isinstance(attrs["delta"], dict):
            raise serializers.ValidationError({"delta": "Must be an object."})
        return attrs


class SimulationRunSerializer(serializers.ModelSerializer):
    class Meta:
        model = SimulationRun
        fields = [
            "id",
            "created_at",
            "name",
            "simulation_type",
            "status",
            "config",
            "error",
        ]
