# liftlog/models/history.py
#
# Append-only event tables. Rows are written once and only disappear
# through the exercise -> day -> plan delete cascade.
from datetime import datetime
from .. import db
from .user import BigId


class WeightHistory(db.Model):
    __tablename__ = "weight_history"

    id = db.Column(BigId, primary_key=True)
    exercise_id = db.Column(
        BigId, db.ForeignKey("exercises.id"), nullable=False, index=True
    )
    weight = db.Column(db.Float, nullable=False)
    recorded_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    exercise = db.relationship("Exercise", back_populates="weight_history")

    def to_dict(self):
        return {
            "id": self.id,
            "exercise_id": self.exercise_id,
            "weight": self.weight,
            "recorded_at": self.recorded_at.isoformat() if self.recorded_at else None,
        }


class WorkoutLog(db.Model):
    __tablename__ = "workout_logs"

    id = db.Column(BigId, primary_key=True)
    exercise_id = db.Column(
        BigId, db.ForeignKey("exercises.id"), nullable=False, index=True
    )
    weight = db.Column(db.Float, nullable=False)              # weight used in the session
    sets_completed = db.Column(db.Integer, nullable=False, default=0)
    total_sets = db.Column(db.Integer, nullable=False, default=0)
    reps_achieved = db.Column(db.Boolean, nullable=False, default=False)
    set_weights = db.Column(db.JSON)                          # optional per-set weights
    completed_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    exercise = db.relationship("Exercise", back_populates="workout_logs")

    @property
    def all_sets_completed(self) -> bool:
        return bool(self.total_sets) and self.sets_completed >= self.total_sets

    def to_dict(self):
        return {
            "id": self.id,
            "exercise_id": self.exercise_id,
            "weight": self.weight,
            "sets_completed": self.sets_completed,
            "total_sets": self.total_sets,
            "reps_achieved": bool(self.reps_achieved),
            "set_weights": self.set_weights,
            "all_sets_completed": self.all_sets_completed,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
