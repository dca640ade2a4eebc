from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from classio.api import deps
from classio.core.roles import UserRole
from classio.core.security import create_user_token, get_password_hash
from classio.db import Base
from classio.db.models import ClassStudent, Lesson, ParentStudent, School, SchoolClass, Subject, User
from classio.main import app

PASSWORD = "secret123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def clear_query_cache():
    deps.query_cache.clear()
    yield
    deps.query_cache.clear()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[deps.get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def auth_headers(user: User) -> dict:
    token = create_user_token(user)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role: UserRole, school_id=None, first_name=None, last_name=None, email=None):
        counter["n"] += 1
        user = User(
            email=email or f"{role.value}{counter['n']}@school.test",
            hashed_password=get_password_hash(PASSWORD),
            role=role,
            first_name=first_name,
            last_name=last_name,
            school_id=school_id,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def school_setup(db, make_user):
    """Школа с одним классом: учитель, ученик с родителем, предмет и урок по понедельникам."""
    school = School(name="Школа №1")
    db.add(school)
    db.commit()

    principal = make_user(UserRole.admin, school.id, "Анна", "Директорова")
    teacher = make_user(UserRole.teacher, school.id, "Иван", "Петров")
    student = make_user(UserRole.student, school.id, "Маша", "Иванова")
    parent = make_user(UserRole.parent, school.id, "Ольга", "Иванова")
    other_student = make_user(UserRole.student, school.id, "Петя", "Сидоров")
    other_parent = make_user(UserRole.parent, school.id, "Павел", "Сидоров")

    school_class = SchoolClass(school_id=school.id, name="5А", head_teacher_id=teacher.id)
    db.add(school_class)
    db.commit()

    subject = Subject(name="Математика", class_id=school_class.id, teacher_id=teacher.id)
    db.add(subject)
    db.commit()

    lesson = Lesson(subject_id=subject.id, day_of_week=1, start_time="09:00", end_time="09:45", room="101")
    db.add(lesson)
    db.add_all([
        ClassStudent(class_id=school_class.id, student_id=student.id),
        ClassStudent(class_id=school_class.id, student_id=other_student.id),
        ParentStudent(parent_id=parent.id, student_id=student.id),
        ParentStudent(parent_id=other_parent.id, student_id=other_student.id),
    ])
    db.commit()
    db.refresh(lesson)

    return SimpleNamespace(
        school=school,
        school_class=school_class,
        principal=principal,
        teacher=teacher,
        student=student,
        parent=parent,
        other_student=other_student,
        other_parent=other_parent,
        subject=subject,
        lesson=lesson,
    )
