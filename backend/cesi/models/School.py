from cesi.extensions import db
from .base import TimestampMixin


class School(db.Model, TimestampMixin):
    __tablename__ = 'schools'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    address = db.Column(db.String(255), nullable=True)
    administrator_id = db.Column(db.Integer, db.ForeignKey('administrators.id'), nullable=False, index=True)

    administrator = db.relationship('Administrator', back_populates='schools')
    brandings = db.relationship('SchoolBranding', back_populates='school', lazy=True,
                                cascade="all, delete-orphan", order_by='SchoolBranding.id')
    classrooms = db.relationship('Classroom', back_populates='school', lazy=True,
                                 cascade="all, delete-orphan")
    teachers = db.relationship('Teacher', back_populates='school', lazy=True)
    tutors = db.relationship('Tutor', back_populates='school', lazy=True)

    @property
    def branding(self):
        return self.brandings[0] if self.brandings else None

    def to_dict(self, include_branding=False):
        data = {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "administrator_id": self.administrator_id,
        }
        if include_branding:
            data["ui"] = self.branding.to_dict() if self.branding else None
        return data


class SchoolBranding(db.Model):
    """Colours and logo a school hands to its clients for theming."""
    __tablename__ = 'school_brandings'

    id = db.Column(db.Integer, primary_key=True)
    school_id = db.Column(db.Integer, db.ForeignKey('schools.id'), nullable=False, index=True)
    color1 = db.Column(db.String(20), nullable=True)
    color2 = db.Column(db.String(20), nullable=True)
    color3 = db.Column(db.String(20), nullable=True)
    logo = db.Column(db.String(255), nullable=True)

    school = db.relationship('School', back_populates='brandings')

    def to_dict(self):
        return {
            "color1": self.color1,
            "color2": self.color2,
            "color3": self.color3,
            "logo": self.logo,
        }


class Classroom(db.Model, TimestampMixin):
    __tablename__ = 'classrooms'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    grade = db.Column(db.String(50), nullable=True)
    school_id = db.Column(db.Integer, db.ForeignKey('schools.id'), nullable=False, index=True)
    teacher_id = db.Column(db.Integer, db.ForeignKey('teachers.id'), nullable=True, index=True)

    school = db.relationship('School', back_populates='classrooms')
    teacher = db.relationship('Teacher', back_populates='classrooms')
    students = db.relationship('Student', back_populates='classroom', lazy=True)
    sessions = db.relationship('ClassSession', back_populates='classroom', lazy=True,
                               cascade="all, delete-orphan")

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "grade": self.grade,
            "school_id": self.school_id,
            "teacher_id": self.teacher_id,
        }
