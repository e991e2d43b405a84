# app/shared/models/Intervention.py
"""
Intervention: conseil généré pour exactement un Checkin (AdviceRecord).

Cycle de vie :
    création (génération) → feedback_score / feedback_at posés UNE seule fois.
    Re-notation interdite (vérifiée dans le service ET par l'UPDATE conditionnel).

Les interventions notées sont la source canonique des UserRatingStats.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Intervention(Base):
    __tablename__ = "interventions"

    id         = Column(Integer, primary_key=True, index=True)
    user_id    = Column(String, nullable=False, index=True)
    checkin_id = Column(Integer, ForeignKey("checkins.id", ondelete="CASCADE"), nullable=False, unique=True)

    # {"advice": str, "suggested_habit": str | None}
    message_payload = Column(JSON, nullable=False, default=dict)
    template_type   = Column(String, nullable=True)

    # ── Adaptation ───────────────────────────────────────────
    enhanced_prompt_used    = Column(Boolean, nullable=False, default=False)
    prompt_variation_number = Column(Integer, nullable=False, default=0)   # 0 = standard, 1..3 = enhanced
    is_fallback             = Column(Boolean, nullable=False, default=False)

    # ── Feedback (null → posé une fois) ──────────────────────
    feedback_score = Column(Integer, nullable=True)     # 1 à 5
    feedback_at    = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    # ── Relations ────────────────────────────────────────────
    checkin = relationship("Checkin", back_populates="intervention")

    @property
    def advice(self) -> str:
        return (self.message_payload or {}).get("advice", "")

    def __repr__(self):
        return (
            f"<Intervention id={self.id} user={self.user_id} "
            f"enhanced={self.enhanced_prompt_used} score={self.feedback_score}>"
        )
