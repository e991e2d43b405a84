# app/shared/models/BaselineTraits.py
"""
Traits de personnalité de référence d'un utilisateur.

Seule la ligne la plus récente est utilisée (contexte du prompt).
traits_result = {"openness": 72, "neuroticism": 40, ...}
"""
from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from app.core.database import Base


class BaselineTraits(Base):
    __tablename__ = "baseline_traits"

    id      = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)

    traits_result = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<BaselineTraits id={self.id} user={self.user_id}>"
