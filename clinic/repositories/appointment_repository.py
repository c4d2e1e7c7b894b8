"""Record stores for appointments.

``SchedulingService`` only depends on the ``AppointmentStore`` protocol, so it
can run against the SQLAlchemy repository in the API or the in-memory one in
tests.
"""

from itertools import count
from threading import Lock
from typing import Protocol

from sqlalchemy.orm import Session

from clinic.models.appointment import Appointment
from clinic.scheduling.admission import Booking
from clinic.scheduling.intervals import TimeInterval


class AppointmentStore(Protocol):
    def find_by_id(self, appointment_id: int) -> Booking | None: ...

    def find_all(self) -> list[Booking]: ...

    def find_by_doctor(self, doctor_id: int) -> list[Booking]: ...

    def find_by_room(self, room_name: str) -> list[Booking]: ...

    def find_by_patient(self, patient_id: int) -> list[Booking]: ...

    def save(self, booking: Booking) -> Booking: ...

    def delete(self, appointment_id: int) -> bool: ...

    def delete_all(self) -> None: ...


def to_booking(appointment: Appointment) -> Booking:
    return Booking(
        id=appointment.id,
        patient_id=appointment.patient_id,
        doctor_id=appointment.doctor_id,
        room_name=appointment.room_name,
        interval=TimeInterval(start=appointment.starts_at, end=appointment.finishes_at),
    )


class SqlAppointmentRepository:
    """Stores bookings as ``Appointment`` rows through a SQLAlchemy session.

    ``save`` and the deletes commit; a failed commit is rolled back before the
    error propagates.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_id(self, appointment_id: int) -> Booking | None:
        appointment = self.db.get(Appointment, appointment_id)
        return to_booking(appointment) if appointment else None

    def find_all(self) -> list[Booking]:
        appointments = self.db.query(Appointment).order_by(Appointment.starts_at.asc(), Appointment.id.asc()).all()
        return [to_booking(appointment) for appointment in appointments]

    def find_by_doctor(self, doctor_id: int) -> list[Booking]:
        appointments = self.db.query(Appointment).filter(
            Appointment.doctor_id == doctor_id,
        ).order_by(Appointment.starts_at.asc()).all()
        return [to_booking(appointment) for appointment in appointments]

    def find_by_room(self, room_name: str) -> list[Booking]:
        appointments = self.db.query(Appointment).filter(
            Appointment.room_name == room_name,
        ).order_by(Appointment.starts_at.asc()).all()
        return [to_booking(appointment) for appointment in appointments]

    def find_by_patient(self, patient_id: int) -> list[Booking]:
        appointments = self.db.query(Appointment).filter(
            Appointment.patient_id == patient_id,
        ).order_by(Appointment.starts_at.asc()).all()
        return [to_booking(appointment) for appointment in appointments]

    def save(self, booking: Booking) -> Booking:
        appointment = Appointment(
            patient_id=booking.patient_id,
            doctor_id=booking.doctor_id,
            room_name=booking.room_name,
            starts_at=booking.interval.start,
            finishes_at=booking.interval.end,
        )
        try:
            self.db.add(appointment)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(appointment)
        return to_booking(appointment)

    def delete(self, appointment_id: int) -> bool:
        appointment = self.db.get(Appointment, appointment_id)
        if appointment is None:
            return False
        try:
            self.db.delete(appointment)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return True

    def delete_all(self) -> None:
        try:
            self.db.query(Appointment).delete()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise


class InMemoryAppointmentRepository:
    """Dict-backed store with sequential ids. Safe to share between threads."""

    def __init__(self, bookings: list[Booking] | None = None) -> None:
        self._lock = Lock()
        self._ids = count(1)
        self._bookings: dict[int, Booking] = {}
        for booking in bookings or []:
            self.save(booking)

    def _select(self, predicate) -> list[Booking]:
        with self._lock:
            selected = [booking for booking in self._bookings.values() if predicate(booking)]
        return sorted(selected, key=lambda booking: (booking.interval.start, booking.id))

    def find_by_id(self, appointment_id: int) -> Booking | None:
        with self._lock:
            return self._bookings.get(appointment_id)

    def find_all(self) -> list[Booking]:
        return self._select(lambda booking: True)

    def find_by_doctor(self, doctor_id: int) -> list[Booking]:
        return self._select(lambda booking: booking.doctor_id == doctor_id)

    def find_by_room(self, room_name: str) -> list[Booking]:
        return self._select(lambda booking: booking.room_name == room_name)

    def find_by_patient(self, patient_id: int) -> list[Booking]:
        return self._select(lambda booking: booking.patient_id == patient_id)

    def save(self, booking: Booking) -> Booking:
        with self._lock:
            saved = Booking(
                id=next(self._ids),
                patient_id=booking.patient_id,
                doctor_id=booking.doctor_id,
                room_name=booking.room_name,
                interval=booking.interval,
            )
            self._bookings[saved.id] = saved
        return saved

    def delete(self, appointment_id: int) -> bool:
        with self._lock:
            return self._bookings.pop(appointment_id, None) is not None

    def delete_all(self) -> None:
        with self._lock:
            self._bookings.clear()
