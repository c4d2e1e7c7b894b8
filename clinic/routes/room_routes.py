from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from clinic.database import get_db
from clinic.models.room import Room
from clinic.routes import dependencies
from clinic.routes.dependencies import DATABASE_UNAVAILABLE_DETAIL, normalize_name

router = APIRouter(tags=['rooms'])


class CreateRoomRequest(BaseModel):
    room_name: str

    @field_validator('room_name')
    @classmethod
    def validate_room_name(cls, value: str) -> str:
        return normalize_name(value)


class RoomResponse(BaseModel):
    room_name: str

    class Config:
        from_attributes = True


@router.get('/rooms', response_model=list[RoomResponse])
def list_rooms(db: Session = Depends(get_db)):
    dependencies.ensure_database_ready()

    try:
        rooms = db.query(Room).order_by(Room.room_name.asc()).all()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    if not rooms:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return rooms


@router.get('/rooms/{room_name}', response_model=RoomResponse)
def get_room(room_name: str, db: Session = Depends(get_db)):
    dependencies.ensure_database_ready()

    try:
        room = db.get(Room, room_name)
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc

    if not room:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail='Room not found.',
        )

    return room


@router.post('/room', response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(data: CreateRoomRequest, db: Session = Depends(get_db)):
    dependencies.ensure_database_ready()

    try:
        if db.get(Room, data.room_name):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail='A room with this name already exists.',
            )

        room = Room(room_name=data.room_name)
        db.add(room)
        db.commit()
        db.refresh(room)

        return room
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail='A room with this name already exists.',
        ) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


@router.delete('/rooms/{room_name}', status_code=status.HTTP_200_OK)
def delete_room(room_name: str, db: Session = Depends(get_db)) -> None:
    dependencies.ensure_database_ready()

    try:
        room = db.get(Room, room_name)

        if not room:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail='Room not found.',
            )

        db.delete(room)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail='Room still has appointments.',
        ) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc


@router.delete('/rooms', status_code=status.HTTP_200_OK)
def delete_all_rooms(db: Session = Depends(get_db)) -> None:
    dependencies.ensure_database_ready()

    try:
        db.query(Room).delete()
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail='Some rooms still have appointments.',
        ) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_DETAIL,
        ) from exc
