from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from clinic.database import get_db
from clinic.models.doctor import Doctor
from clinic.routes import dependencies
from clinic.routes.dependencies import DATABASE_UNAVAILABLE_DETAIL, normalize_email, normalize_name

router = APIRouter(tags=['doctors'])


class CreateDoctorRequest(BaseModel):
    first_name: str
    last_name: str
    age: int | None = Field(default=None, ge=0, le=150)
    email: str

    @field_validator('first_name', 'last_name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        return normalize_name(value)

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return normalize_email(value)


class DoctorResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    age: int | None = None
    email: str

    class Config:
        from_attributes = True


@router.get('/doctors', response_model=list[DoctorResponse])
def list_doctors(db: Session = Depends(get_db)):
    dependencies.ensure_database_ready()

    try:
        doctors = db.query(Doctor).order_by(Doctor.id.asc()).all()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    if not doctors:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return doctors


@router.get('/doctors/{doctor_id}', response_model=DoctorResponse)
def get_doctor(doctor_id: int, db: Session = Depends(get_db)):
    dependencies.ensure_database_ready()

    try:
        doctor = db.get(Doctor, doctor_id)
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    if not doctor:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail='Doctor not found.',
        )

    return doctor


@router.post('/doctor', response_model=DoctorResponse, status_code=status.HTTP_201_CREATED)
def create_doctor(data: CreateDoctorRequest, db: Session = Depends(get_db)):
    dependencies.ensure_database_ready()

    try:
        doctor = Doctor(
            first_name=data.first_name,
            last_name=data.last_name,
            age=data.age,
            email=data.email,
        )
        db.add(doctor)
        db.commit()
        db.refresh(doctor)

        return doctor
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


@router.delete('/doctors/{doctor_id}', status_code=status.HTTP_200_OK)
def delete_doctor(doctor_id: int, db: Session = Depends(get_db)) -> None:
    dependencies.ensure_database_ready()

    try:
        doctor = db.get(Doctor, doctor_id)

        if not doctor:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail='Doctor not found.',
            )

        db.delete(doctor)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail='Doctor still has appointments.',
        ) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


@router.delete('/doctors', status_code=status.HTTP_200_OK)
def delete_all_doctors(db: Session = Depends(get_db)) -> None:
    dependencies.ensure_database_ready()

    try:
        db.query(Doctor).delete()
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail='Some doctors still have appointments.',
        ) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc
