"""
Sync helpers for common cross-role writes.

Each helper maps one domain write onto the owner-scoped syncs it implies.
Multi-step helpers run their steps in order and stop at the first failure;
steps that already succeeded are not rolled back.
"""

from __future__ import annotations

from typing import Any

from mockdb.sync.service import DataSyncService


class SyncOperations:
    def __init__(self, service: DataSyncService) -> None:
        self.service = service

    async def sync_health_metric(self, patient_id: str, metric: Any) -> None:
        await self.service.sync_patient_data(patient_id, "health_metrics", metric)

    async def sync_report(self, patient_id: str, report: Any) -> None:
        await self.service.sync_patient_data(patient_id, "reports", report)

    async def sync_prescription(self, doctor_id: str, prescription: Any) -> None:
        await self.service.sync_doctor_data(doctor_id, "prescriptions", prescription)

    async def sync_appointment(self, patient_id: str, doctor_id: str, appointment: Any) -> None:
        """Reflect an appointment to both participants, patient first."""
        await self.service.sync_patient_data(patient_id, "appointments", appointment)
        await self.service.sync_doctor_data(doctor_id, "appointments", appointment)

    async def sync_lab_result(self, lab_id: str, patient_id: str, result: Any) -> None:
        del patient_id
        await self.service.sync_lab_data(lab_id, "results", result)


__all__ = ["SyncOperations"]
