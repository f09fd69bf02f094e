from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from okr.core.database import Base


class Division(Base):
    __tablename__ = "divisions"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    departments = relationship("Department", back_populates="division", cascade="all, delete-orphan")


class Department(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    division_id = Column(Integer, ForeignKey("divisions.id"), nullable=True, index=True)
    weight = Column(Integer, nullable=True)  # share within the division, defaults to an equal split
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    division = relationship("Division", back_populates="departments")
    objectives = relationship("Objective", back_populates="department", cascade="all, delete-orphan")


class Objective(Base):
    __tablename__ = "objectives"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    weight = Column(Integer, nullable=True)  # percentage within the department
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    department = relationship("Department", back_populates="objectives")
    key_results = relationship("KeyResult", back_populates="objective", cascade="all, delete-orphan")


class KeyResult(Base):
    __tablename__ = "key_results"

    id = Column(Integer, primary_key=True, index=True)
    objective_id = Column(Integer, ForeignKey("objectives.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    metric_type = Column(String(16), default="HIGHER_BETTER", nullable=False)  # HIGHER_BETTER | LOWER_BETTER | QUALITATIVE
    unit = Column(String(32), nullable=True)
    weight = Column(Integer, default=0)
    threshold_below = Column(Float, nullable=True)
    threshold_meets = Column(Float, nullable=True)
    threshold_good = Column(Float, nullable=True)
    threshold_very_good = Column(Float, nullable=True)
    threshold_exceptional = Column(Float, nullable=True)
    actual_value = Column(String(64), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    objective = relationship("Objective", back_populates="key_results")
