"""Booking workflow around the admission policy.

The policy in ``clinic.scheduling.admission`` is side-effect free, so the
read-check-write sequence lives here. ``SchedulingService.book`` holds the
per-resource locks from the moment it reads the existing appointments until the
admitted booking is saved. Those locks only cover threads of one process: when
several processes write to the same database, the store must also run the
sequence inside a serializable transaction or behind row locks.
"""

import logging

from clinic.repositories.appointment_repository import AppointmentStore
from clinic.scheduling.admission import AdmissionDecision, Booking, evaluate
from clinic.scheduling.intervals import require_well_formed
from clinic.scheduling.locks import ResourceLocks, resource_keys

logger = logging.getLogger(__name__)


class SchedulingService:
    def __init__(
        self,
        store: AppointmentStore,
        locks: ResourceLocks | None = None,
        check_patient_overlap: bool = False,
    ) -> None:
        self.store = store
        self.locks = locks or ResourceLocks()
        self.check_patient_overlap = check_patient_overlap

    def book(self, candidate: Booking) -> AdmissionDecision:
        require_well_formed(candidate.interval)

        with self.locks.hold(resource_keys(candidate, include_patient=self.check_patient_overlap)):
            existing_for_doctor = self.store.find_by_doctor(candidate.doctor_id)
            existing_for_room = self.store.find_by_room(candidate.room_name)
            existing_for_patient = (
                self.store.find_by_patient(candidate.patient_id) if self.check_patient_overlap else []
            )

            decision = evaluate(candidate, existing_for_doctor, existing_for_room, existing_for_patient)
            if not decision.admitted:
                logger.info(
                    'Rejected booking for doctor %s in room %s at %s: %d conflicting appointment(s).',
                    candidate.doctor_id,
                    candidate.room_name,
                    candidate.interval.start,
                    len(decision.conflicts),
                )
                return decision

            saved = self.store.save(candidate)

        logger.info('Booked appointment %s for doctor %s in room %s.', saved.id, saved.doctor_id, saved.room_name)
        return AdmissionDecision(admitted=True, booking=saved)

    def cancel(self, appointment_id: int) -> bool:
        deleted = self.store.delete(appointment_id)
        if deleted:
            logger.info('Cancelled appointment %s.', appointment_id)
        return deleted
