# app/shared/models/Checkin.py
"""
Check-in émotionnel: auto-évaluation ponctuelle de l'utilisateur.

Immuable une fois créé : jamais modifié, jamais supprimé par l'engine.
Source de vérité des analytics (humeur, énergie, streaks).
"""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Checkin(Base):
    __tablename__ = "checkins"

    id      = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)     # id opaque du fournisseur d'identité

    mood_score   = Column(Integer, nullable=False)           # 1 à 5
    energy_level = Column(String, nullable=False)            # Low | Mid | High
    free_text    = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    # ── Relations ────────────────────────────────────────────
    intervention = relationship("Intervention", back_populates="checkin", uselist=False)

    def __repr__(self):
        return f"<Checkin id={self.id} user={self.user_id} mood={self.mood_score}>"
