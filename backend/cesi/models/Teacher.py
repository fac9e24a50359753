from cesi.extensions import db
from .base import TimestampMixin


class Teacher(db.Model, TimestampMixin):
    __tablename__ = 'teachers'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    phone = db.Column(db.String(15), nullable=False)
    photo = db.Column(db.String(255), nullable=True)
    school_id = db.Column(db.Integer, db.ForeignKey('schools.id'), nullable=False, index=True)

    school = db.relationship('School', back_populates='teachers')
    classrooms = db.relationship('Classroom', back_populates='teacher', lazy=True)
    sessions = db.relationship('ClassSession', back_populates='teacher', lazy=True)
    notifications = db.relationship('Notification', back_populates='teacher', lazy=True)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "photo": self.photo,
            "school_id": self.school_id,
        }
