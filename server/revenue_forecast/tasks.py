from __future__ import annotations

import logging

from celery import shared_task
from django.db import transaction

from revcast_core.domain.errors import SimulationCancelled

from .models import SimulationRun
from .runner import execute_simulation

logger = logging.getLogger(__name__)


@shared_task
def run_simulation(run_id: int):
    try:
        run = SimulationRun.objects.get(id=run_id)
    except SimulationRun.DoesNotExist:
        logger.warning("Simulation run %s no longer exists", run_id)
        return

    with transaction.atomic():
        run.status = "running"
        run.error = ""
        run.save(update_fields=["status", "error"])

    try:
        payload = execute_simulation(run.config or {})
    except SimulationCancelled as exc:
        with transaction.atomic():
            run.status = "cancelled"
            run.error = str(exc)
            run.save(update_fields=["status", "error"])
        return
    except Exception as exc:  # noqa: BLE001
        logger.exception("Simulation run %s failed", run_id)
        with transaction.atomic():
            run.status = "failed"
            run.error = str(exc)
            run.save(update_fields=["status", "error"])
        return

    with transaction.atomic():
        run.result = payload
        run.status = "completed"
        run.save(update_fields=["result", "status"])
