from datetime import datetime
from cesi.extensions import db
from .base import PickupStatus, TimestampMixin


class Pickup(db.Model, TimestampMixin):
    __tablename__ = 'pickups'

    id = db.Column(db.Integer, primary_key=True)
    status = db.Column(db.Enum(PickupStatus), nullable=False, default=PickupStatus.pending, index=True)
    observation = db.Column(db.Text, nullable=True)
    tutor_id = db.Column(db.Integer, db.ForeignKey('tutors.id'), nullable=False, index=True)
    guardian_id = db.Column(db.Integer, db.ForeignKey('guardians.id'), nullable=True, index=True)
    student_id = db.Column(db.Integer, db.ForeignKey('students.id'), nullable=False, index=True)

    tutor = db.relationship('Tutor', back_populates='pickups')
    guardian = db.relationship('Guardian', back_populates='pickups')
    student = db.relationship('Student', back_populates='pickups')
    tracking_events = db.relationship('TrackingEvent', back_populates='pickup', lazy=True,
                                      cascade="all, delete-orphan",
                                      order_by='TrackingEvent.recorded_at')

    def to_dict(self, include_related=False):
        data = {
            "id": self.id,
            "status": self.status.value,
            "observation": self.observation,
            "tutor_id": self.tutor_id,
            "guardian_id": self.guardian_id,
            "student_id": self.student_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_related:
            data["student"] = self.student.to_dict() if self.student else None
            data["guardian"] = self.guardian.to_dict() if self.guardian else None
        return data


class TrackingEvent(db.Model):
    __tablename__ = 'tracking_events'

    id = db.Column(db.Integer, primary_key=True)
    pickup_id = db.Column(db.Integer, db.ForeignKey('pickups.id'), nullable=False, index=True)
    latitude = db.Column(db.Float, nullable=False)
    longitude = db.Column(db.Float, nullable=False)
    location = db.Column(db.String(255), nullable=True)
    recorded_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    pickup = db.relationship('Pickup', back_populates='tracking_events')

    def to_dict(self):
        return {
            "id": self.id,
            "pickup_id": self.pickup_id,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "location": self.location,
            "recorded_at": self.recorded_at.isoformat(),
        }


class Report(db.Model):
    __tablename__ = 'reports'

    id = db.Column(db.Integer, primary_key=True)
    report_pdf = db.Column(db.String(255), nullable=False)
    tutor_id = db.Column(db.Integer, db.ForeignKey('tutors.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    tutor = db.relationship('Tutor', back_populates='reports')
