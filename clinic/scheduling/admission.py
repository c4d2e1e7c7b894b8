"""Admission policy for new appointments.

A candidate booking is rejected when any existing booking that shares its
doctor or its room has an overlapping interval. Patient overlap is an opt-in
third dimension. The functions here are pure: callers read the existing
bookings, pass them in, and persist the candidate only when it is admitted.
"""

from dataclasses import dataclass
from typing import Callable, Iterable

from clinic.scheduling.intervals import TimeInterval, overlaps


@dataclass(frozen=True)
class Booking:
    """An appointment detached from any persistence session."""

    patient_id: int
    doctor_id: int
    room_name: str
    interval: TimeInterval
    id: int | None = None


@dataclass(frozen=True)
class AdmissionDecision:
    admitted: bool
    conflicts: tuple[Booking, ...] = ()
    booking: Booking | None = None


def _same_doctor(candidate: Booking, existing: Booking) -> bool:
    return candidate.doctor_id == existing.doctor_id


def _same_room(candidate: Booking, existing: Booking) -> bool:
    return candidate.room_name == existing.room_name


def _same_patient(candidate: Booking, existing: Booking) -> bool:
    return candidate.patient_id == existing.patient_id


def find_conflicts(
    candidate: Booking,
    existing_for_doctor: Iterable[Booking],
    existing_for_room: Iterable[Booking],
    existing_for_patient: Iterable[Booking] = (),
) -> list[Booking]:
    """Return the existing bookings that block ``candidate``.

    Each sequence is only trusted for the resource it was looked up by, so an
    entry in ``existing_for_room`` that is in a different room is ignored.
    A booking listed under more than one resource is reported once.
    """
    checks: list[tuple[Iterable[Booking], Callable[[Booking, Booking], bool]]] = [
        (existing_for_doctor, _same_doctor),
        (existing_for_room, _same_room),
        (existing_for_patient, _same_patient),
    ]

    conflicts: list[Booking] = []
    seen: set = set()
    for existing_bookings, shares_resource in checks:
        for existing in existing_bookings:
            if candidate.id is not None and existing.id == candidate.id:
                continue

            key = existing.id if existing.id is not None else existing
            if key in seen:
                continue

            if shares_resource(candidate, existing) and overlaps(candidate.interval, existing.interval):
                seen.add(key)
                conflicts.append(existing)

    return conflicts


def can_admit(
    candidate: Booking,
    existing_for_doctor: Iterable[Booking],
    existing_for_room: Iterable[Booking],
    existing_for_patient: Iterable[Booking] = (),
) -> bool:
    return not find_conflicts(candidate, existing_for_doctor, existing_for_room, existing_for_patient)


def evaluate(
    candidate: Booking,
    existing_for_doctor: Iterable[Booking],
    existing_for_room: Iterable[Booking],
    existing_for_patient: Iterable[Booking] = (),
) -> AdmissionDecision:
    conflicts = find_conflicts(candidate, existing_for_doctor, existing_for_room, existing_for_patient)
    if conflicts:
        return AdmissionDecision(admitted=False, conflicts=tuple(conflicts))
    return AdmissionDecision(admitted=True, booking=candidate)
