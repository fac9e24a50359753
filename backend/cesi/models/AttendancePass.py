from datetime import datetime
from cesi.extensions import db
from .base import TimestampMixin


class ClassSession(db.Model, TimestampMixin):
    __tablename__ = 'class_sessions'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    date = db.Column(db.Date, nullable=False, default=lambda: datetime.utcnow().date())
    classroom_id = db.Column(db.Integer, db.ForeignKey('classrooms.id'), nullable=False, index=True)
    teacher_id = db.Column(db.Integer, db.ForeignKey('teachers.id'), nullable=True, index=True)

    classroom = db.relationship('Classroom', back_populates='sessions')
    teacher = db.relationship('Teacher', back_populates='sessions')
    passes = db.relationship('AttendancePass', back_populates='session', lazy=True,
                             cascade="all, delete-orphan")


class AttendancePass(db.Model, TimestampMixin):
    __tablename__ = 'attendance_passes'

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('students.id'), nullable=False, index=True)
    session_id = db.Column(db.Integer, db.ForeignKey('class_sessions.id'), nullable=True, index=True)
    date = db.Column(db.Date, nullable=False, index=True)
    present = db.Column(db.Boolean, nullable=False, default=True)
    note = db.Column(db.String(255), nullable=True)

    student = db.relationship('Student', back_populates='passes')
    session = db.relationship('ClassSession', back_populates='passes')
