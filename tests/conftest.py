import os
from datetime import date
from decimal import Decimal

# settings 는 import 시점에 읽으므로 앱 모듈보다 먼저 설정
os.environ.setdefault("DB_USER", "test")
os.environ.setdefault("DB_PASSWORD", "test")
os.environ.setdefault("DB_HOST", "localhost")
os.environ.setdefault("DB_NAME", "school_results_test")
os.environ["API_INTERNAL_TOKEN"] = "test-token"
os.environ["SCHOOL_NAME"] = "Test High School"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.db import Base, get_db
from models.assignments import Assignment
from models.classes import Class
from models.comments import Comment
from models.scores import Score
from models.streams import Stream
from models.students import Student
from models.subjects import Subject
from models.teachers import Teacher
from models.terms import Term

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    from main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def auth_headers(role="dos", teacher_id=None):
    headers = {"Authorization": "Bearer test-token", "X-User-Role": role}
    if teacher_id is not None:
        headers["X-Teacher-Id"] = str(teacher_id)
    return headers


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def admin_headers():
    return auth_headers("dos")


@pytest.fixture
def seed(db_session):
    """
    Form 2 (East / West), 3과목, Term 1 2024
    East : Alice 80/60/40, Brian 90/90/90
    West : Cate 90/90/90, Dan 70/70/70, Eve 점수 없음
    """
    db = db_session
    maths_teacher = Teacher(teacher_code="TSC-001", fullname="Mary Wanjiru", email="mary@school.test")
    bio_teacher = Teacher(teacher_code="TSC-002", fullname="John Otieno", email="john@school.test")
    form2 = Class(class_name="Form 2", class_level=2)
    db.add_all([maths_teacher, bio_teacher, form2])
    db.flush()

    east = Stream(stream_name="East", class_id=form2.id)
    west = Stream(stream_name="West", class_id=form2.id)
    maths = Subject(subject_name="Mathematics", subject_code="MAT")
    english = Subject(subject_name="English", subject_code="ENG")
    biology = Subject(subject_name="Biology", subject_code="BIO")
    term = Term(
        term_name="Term 1", term_number=1, academic_year="2024",
        start_date=date(2024, 1, 8), end_date=date(2024, 4, 5),
    )
    db.add_all([east, west, maths, english, biology, term])
    db.flush()

    teacher_for = {maths.id: maths_teacher, english.id: maths_teacher, biology.id: bio_teacher}
    assignments = {}
    for stream in (east, west):
        for subject in (maths, english, biology):
            a = Assignment(
                teacher_id=teacher_for[subject.id].id, subject_id=subject.id, class_id=form2.id,
                stream_id=stream.id, academic_year="2024", term_id=term.id,
            )
            db.add(a)
            db.flush()
            assignments[(stream.id, subject.id)] = a

    marks = {
        ("ADM-001", "Alice Achieng", east): (80, 60, 40),
        ("ADM-002", "Brian Kamau", east): (90, 90, 90),
        ("ADM-003", "Cate Njeri", west): (90, 90, 90),
        ("ADM-004", "Dan Mwangi", west): (70, 70, 70),
        ("ADM-005", "Eve Chebet", west): None,
    }
    students = {}
    for (adm, name, stream), values in marks.items():
        student = Student(
            admission_number=adm, fullname=name, class_id=form2.id, stream_id=stream.id,
            guardian_phone=f"+2547000000{adm[-2:]}",
        )
        db.add(student)
        db.flush()
        students[name.split()[0]] = student
        for subject, value in zip((maths, english, biology), values or ()):
            a = assignments[(stream.id, subject.id)]
            db.add(Score(
                assignment_id=a.id, student_id=student.id, term_id=term.id,
                score=Decimal(value), submitted_by=a.teacher_id,
            ))

    db.add_all([
        Comment(student_id=students["Alice"].id, teacher_id=maths_teacher.id, term_id=term.id,
                comment_text="Works hard in class.", comment_type="general"),
        Comment(student_id=students["Alice"].id, teacher_id=bio_teacher.id, term_id=term.id,
                comment_text="Needs to revise biology.", comment_type="academic"),
    ])
    db.commit()

    return {
        "class": form2,
        "east": east,
        "west": west,
        "term": term,
        "maths": maths,
        "english": english,
        "biology": biology,
        "maths_teacher": maths_teacher,
        "bio_teacher": bio_teacher,
        "assignments": assignments,
        "students": students,
    }
