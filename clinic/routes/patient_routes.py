from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from clinic.database import get_db
from clinic.models.patient import Patient
from clinic.routes import dependencies
from clinic.routes.dependencies import DATABASE_UNAVAILABLE_DETAIL, normalize_email, normalize_name

router = APIRouter(tags=['patients'])


class CreatePatientRequest(BaseModel):
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


class PatientResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    age: int | None = None
    email: str

    class Config:
        from_attributes = True


@router.get('/patients', response_model=list[PatientResponse])
def list_patients(db: Session = Depends(get_db)):
    dependencies.ensure_database_ready()

    try:
        patients = db.query(Patient).order_by(Patient.id.asc()).all()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    if not patients:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return patients


@router.get('/patients/{patient_id}', response_model=PatientResponse)
def get_patient(patient_id: int, db: Session = Depends(get_db)):
    dependencies.ensure_database_ready()

    try:
        patient = db.get(Patient, patient_id)
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    if not patient:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail='Patient not found.',
        )

    return patient


@router.post('/patient', response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
def create_patient(data: CreatePatientRequest, db: Session = Depends(get_db)):
    dependencies.ensure_database_ready()

    try:
        patient = Patient(
            first_name=data.first_name,
            last_name=data.last_name,
            age=data.age,
            email=data.email,
        )
        db.add(patient)
        db.commit()
        db.refresh(patient)

        return patient
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


@router.delete('/patients/{patient_id}', status_code=status.HTTP_200_OK)
def delete_patient(patient_id: int, db: Session = Depends(get_db)) -> None:
    dependencies.ensure_database_ready()

    try:
        patient = db.get(Patient, patient_id)

        if not patient:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail='Patient not found.',
            )

        db.delete(patient)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail='Patient still has appointments.',
        ) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


@router.delete('/patients', status_code=status.HTTP_200_OK)
def delete_all_patients(db: Session = Depends(get_db)) -> None:
    dependencies.ensure_database_ready()

    try:
        db.query(Patient).delete()
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail='Some patients still have appointments.',
        ) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc
