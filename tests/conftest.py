import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from clinic.database import Base, enable_sqlite_foreign_keys  # noqa: E402
from clinic.models.appointment import Appointment  # noqa: E402,F401
from clinic.models.doctor import Doctor  # noqa: E402
from clinic.models.patient import Patient  # noqa: E402
from clinic.models.room import Room  # noqa: E402


@pytest.fixture
def db_engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def clinic_db(db_engine):
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def seeded_db(clinic_db):
    clinic_db.add_all([
        Doctor(id=1, first_name='Jane', last_name='Smith', age=40, email='jane.smith@example.com'),
        Doctor(id=2, first_name='John', last_name='Doe', age=35, email='john.doe@example.com'),
        Patient(id=1, first_name='Alice', last_name='Smith', age=25, email='alice.smith@example.com'),
        Patient(id=2, first_name='Bob', last_name='Jones', age=30, email='bob.jones@example.com'),
        Room(room_name='Room101'),
        Room(room_name='Room102'),
    ])
    clinic_db.commit()
    return clinic_db


@pytest.fixture
def database_ready(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr('clinic.routes.dependencies.ensure_database_ready', lambda: None)
