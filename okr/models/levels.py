from sqlalchemy import Boolean, Column, Float, Integer, String, UniqueConstraint

from okr.core.database import Base


class ScoreLevelRecord(Base):
    __tablename__ = "score_levels"
    __table_args__ = (UniqueConstraint("name", name="uq_score_level_name"),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(64), nullable=False)
    score_value = Column(Float, nullable=False)
    color = Column(String(16), nullable=False)
    display_order = Column(Integer, default=0, nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)
