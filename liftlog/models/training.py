# liftlog/models/training.py
from datetime import datetime
from .. import db
from .user import BigId


# -----------------------------
# Exercise library
# -----------------------------
class ExerciseTemplate(db.Model):
    __tablename__ = "exercise_templates"

    id = db.Column(BigId, primary_key=True)
    user_id = db.Column(BigId, db.ForeignKey("users.id"), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    category = db.Column(db.String(50))

    default_sets = db.Column(db.Integer, nullable=False, default=3)
    default_rep_min = db.Column(db.Integer, nullable=False, default=8)
    default_rep_max = db.Column(db.Integer, nullable=False, default=12)
    default_weight = db.Column(db.Float, nullable=False, default=0.0)
    default_increment = db.Column(db.Float, nullable=False, default=2.5)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    # No delete cascade: exercises outlive their template.
    exercises = db.relationship("Exercise", back_populates="template")

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "default_sets": self.default_sets,
            "default_rep_min": self.default_rep_min,
            "default_rep_max": self.default_rep_max,
            "default_weight": self.default_weight,
            "default_increment": self.default_increment,
        }


# -----------------------------
# Plans & days
# -----------------------------
class TrainingPlan(db.Model):
    __tablename__ = "training_plans"

    id = db.Column(BigId, primary_key=True)
    user_id = db.Column(BigId, db.ForeignKey("users.id"), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    training_days = db.relationship(
        "TrainingDay",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="TrainingDay.id",
    )

    def to_dict(self, with_days=True):
        data = {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if with_days:
            data["training_days"] = [d.to_dict() for d in self.training_days]
        return data


class TrainingDay(db.Model):
    __tablename__ = "training_days"

    id = db.Column(BigId, primary_key=True)
    user_id = db.Column(BigId, db.ForeignKey("users.id"), nullable=False, index=True)
    plan_id = db.Column(BigId, db.ForeignKey("training_plans.id"), index=True)  # NULL = standalone
    name = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    plan = db.relationship("TrainingPlan", back_populates="training_days")
    exercises = db.relationship(
        "Exercise",
        back_populates="training_day",
        cascade="all, delete-orphan",
        order_by="Exercise.order_index",
    )

    def to_dict(self, with_exercises=True):
        data = {
            "id": self.id,
            "plan_id": self.plan_id,
            "name": self.name,
        }
        if with_exercises:
            data["exercises"] = [e.to_dict() for e in self.exercises]
        return data


# -----------------------------
# Exercise placements
# -----------------------------
class Exercise(db.Model):
    __tablename__ = "exercises"

    id = db.Column(BigId, primary_key=True)
    training_day_id = db.Column(
        BigId, db.ForeignKey("training_days.id"), nullable=False, index=True
    )
    exercise_template_id = db.Column(
        BigId, db.ForeignKey("exercise_templates.id"), index=True
    )

    name = db.Column(db.String(100), nullable=False)
    sets = db.Column(db.Integer, nullable=False, default=3)
    rep_min = db.Column(db.Integer, nullable=False, default=8)
    rep_max = db.Column(db.Integer, nullable=False, default=12)
    weight = db.Column(db.Float, nullable=False, default=0.0)      # kg, never negative
    increment = db.Column(db.Float, nullable=False, default=2.5)
    order_index = db.Column(db.Integer, nullable=False, default=0)

    training_day = db.relationship("TrainingDay", back_populates="exercises")
    template = db.relationship("ExerciseTemplate", back_populates="exercises")

    weight_history = db.relationship(
        "WeightHistory", back_populates="exercise", cascade="all, delete-orphan"
    )
    workout_logs = db.relationship(
        "WorkoutLog", back_populates="exercise", cascade="all, delete-orphan"
    )

    def to_dict(self):
        return {
            "id": self.id,
            "training_day_id": self.training_day_id,
            "exercise_template_id": self.exercise_template_id,
            "name": self.name,
            "sets": self.sets,
            "rep_min": self.rep_min,
            "rep_max": self.rep_max,
            "weight": self.weight,
            "increment": self.increment,
            "order_index": self.order_index,
        }
