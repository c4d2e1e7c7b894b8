from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic.core import config
from clinic.database import get_db
from clinic.models.doctor import Doctor
from clinic.models.patient import Patient
from clinic.models.room import Room
from clinic.repositories.appointment_repository import SqlAppointmentRepository
from clinic.routes import dependencies
from clinic.routes.dependencies import DATABASE_UNAVAILABLE_DETAIL
from clinic.scheduling.admission import Booking
from clinic.scheduling.intervals import InvalidIntervalError, TimeInterval
from clinic.scheduling.locks import ResourceLocks
from clinic.scheduling.service import SchedulingService

router = APIRouter(tags=['appointments'])

booking_locks = ResourceLocks()


class CreateAppointmentRequest(BaseModel):
    patient_id: int
    doctor_id: int
    room_name: str
    starts_at: datetime
    finishes_at: datetime

    @field_validator('room_name')
    @classmethod
    def validate_room_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Room name is required.')
        return normalized

    @field_validator('starts_at', 'finishes_at')
    @classmethod
    def to_naive_utc(cls, value: datetime) -> datetime:
        # Stored timestamps are naive, so aware inputs are converted to UTC first.
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class AppointmentResponse(BaseModel):
    id: int
    patient_id: int
    doctor_id: int
    room_name: str
    starts_at: datetime
    finishes_at: datetime


def to_response(booking: Booking) -> AppointmentResponse:
    return AppointmentResponse(
        id=booking.id,
        patient_id=booking.patient_id,
        doctor_id=booking.doctor_id,
        room_name=booking.room_name,
        starts_at=booking.interval.start,
        finishes_at=booking.interval.end,
    )


def get_scheduling_service(db: Session = Depends(get_db)) -> SchedulingService:
    return SchedulingService(
        SqlAppointmentRepository(db),
        locks=booking_locks,
        check_patient_overlap=config.CHECK_PATIENT_OVERLAP,
    )


def ensure_references_exist(data: CreateAppointmentRequest, db: Session) -> None:
    if not db.get(Patient, data.patient_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Patient not found.')

    if not db.get(Doctor, data.doctor_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Doctor not found.')

    if not db.get(Room, data.room_name):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Room not found.')


@router.get('/appointments', response_model=list[AppointmentResponse])
def list_appointments(service: SchedulingService = Depends(get_scheduling_service)):
    dependencies.ensure_database_ready()

    try:
        bookings = service.store.find_all()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    if not bookings:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return [to_response(booking) for booking in bookings]


@router.get('/appointments/{appointment_id}', response_model=AppointmentResponse)
def get_appointment(appointment_id: int, service: SchedulingService = Depends(get_scheduling_service)):
    dependencies.ensure_database_ready()

    try:
        booking = service.store.find_by_id(appointment_id)
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail='Appointment not found.',
        )

    return to_response(booking)


@router.post('/appointment', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: CreateAppointmentRequest,
    db: Session = Depends(get_db),
    service: SchedulingService = Depends(get_scheduling_service),
):
    dependencies.ensure_database_ready()

    candidate = Booking(
        patient_id=data.patient_id,
        doctor_id=data.doctor_id,
        room_name=data.room_name,
        interval=TimeInterval(start=data.starts_at, end=data.finishes_at),
    )

    try:
        ensure_references_exist(data, db)
        decision = service.book(candidate)
    except InvalidIntervalError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    if not decision.admitted:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                'message': 'The doctor or the room is already booked at this time.',
                'conflicts': [to_response(conflict).model_dump(mode='json') for conflict in decision.conflicts],
            },
        )

    return to_response(decision.booking)


@router.delete('/appointments/{appointment_id}', status_code=status.HTTP_200_OK)
def delete_appointment(appointment_id: int, service: SchedulingService = Depends(get_scheduling_service)) -> None:
    dependencies.ensure_database_ready()

    try:
        deleted = service.cancel(appointment_id)
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail='Appointment not found.',
        )


@router.delete('/appointments', status_code=status.HTTP_200_OK)
def delete_all_appointments(service: SchedulingService = Depends(get_scheduling_service)) -> None:
    dependencies.ensure_database_ready()

    try:
        service.store.delete_all()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc
