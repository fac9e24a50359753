from cesi.extensions import db
from .base import TimestampMixin


class Tutor(db.Model, TimestampMixin):
    __tablename__ = 'tutors'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    phone = db.Column(db.String(10), nullable=False)
    photo = db.Column(db.String(255), nullable=True)
    school_id = db.Column(db.Integer, db.ForeignKey('schools.id'), nullable=False, index=True)

    school = db.relationship('School', back_populates='tutors')
    guardians = db.relationship('Guardian', back_populates='tutor', lazy=True,
                                cascade="all, delete-orphan")
    students = db.relationship('Student', back_populates='tutor', lazy=True,
                               cascade="all, delete-orphan")
    pickups = db.relationship('Pickup', back_populates='tutor', lazy=True,
                              cascade="all, delete-orphan")
    reports = db.relationship('Report', back_populates='tutor', lazy=True,
                              cascade="all, delete-orphan")
    notifications = db.relationship('Notification', back_populates='tutor', lazy=True,
                                    cascade="all, delete-orphan")

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "photo": self.photo,
            "school_id": self.school_id,
        }


class Guardian(db.Model, TimestampMixin):
    """A person a tutor authorises to pick up the tutor's students."""
    __tablename__ = 'guardians'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    phone = db.Column(db.String(10), nullable=False)
    photo = db.Column(db.String(255), nullable=True)
    active = db.Column(db.Boolean, default=False, nullable=False, index=True)
    tutor_id = db.Column(db.Integer, db.ForeignKey('tutors.id'), nullable=False, index=True)

    tutor = db.relationship('Tutor', back_populates='guardians')
    pickups = db.relationship('Pickup', back_populates='guardian', lazy=True)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "photo": self.photo,
            "active": self.active,
            "tutor_id": self.tutor_id,
        }
