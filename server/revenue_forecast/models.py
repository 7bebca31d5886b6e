from django.db import models


class SimulationRun(models.Model):
    STATUS_CHOICES = [
        ("pending", "Pending"),
        ("running", "Running"),
        ("completed", "Completed"),
        ("failed", "Failed"),
        ("cancelled", "Cancelled"),
    ]

    created_at = models.DateTimeField(auto_now_add=True)
    name = models.CharField(max_length=120, blank=True, default="")
    simulation_type = models.CharField(max_length=64, default="monte_carlo")
    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default="pending")
    config = models.JSONField(default=dict)
    result = models.JSONField(null=True, blank=True)
    error = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["-created_at"]
