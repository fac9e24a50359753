from cesi.extensions import db
from .base import TimestampMixin


class Student(db.Model, TimestampMixin):
    __tablename__ = 'students'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    tutor_id = db.Column(db.Integer, db.ForeignKey('tutors.id'), nullable=False, index=True)
    classroom_id = db.Column(db.Integer, db.ForeignKey('classrooms.id'), nullable=False, index=True)

    tutor = db.relationship('Tutor', back_populates='students')
    classroom = db.relationship('Classroom', back_populates='students')
    pickups = db.relationship('Pickup', back_populates='student', lazy=True,
                              cascade="all, delete-orphan")
    passes = db.relationship('AttendancePass', back_populates='student', lazy=True,
                             cascade="all, delete-orphan")
    notifications = db.relationship('Notification', back_populates='student', lazy=True,
                                    cascade="all, delete-orphan")

    @property
    def school_id(self):
        return self.classroom.school_id if self.classroom else None

    def to_dict(self, include_related=False):
        data = {
            "id": self.id,
            "name": self.name,
            "tutor_id": self.tutor_id,
            "classroom_id": self.classroom_id,
        }

        if include_related:
            classroom = self.classroom
            data["tutor"] = self.tutor.to_dict() if self.tutor else None
            data["classroom"] = classroom.to_dict() if classroom else None
            data["school"] = classroom.school.to_dict() if classroom else None
            data["teacher"] = (
                classroom.teacher.to_dict() if classroom and classroom.teacher else None
            )

        return data
