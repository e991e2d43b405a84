# app/shared/models/RatingStats.py
"""
UserRatingStats: cache dérivé, une ligne par utilisateur.

Ce n'est PAS une seconde source de vérité : total_ratings et average_rating
doivent toujours être reproductibles par un rescan des Interventions notées.
Un refresh complet écrase la ligne (self-healing).

enhancement_triggered_at : latch d'épisode, posé une seule fois,
jamais effacé automatiquement (reset admin uniquement).
"""
from sqlalchemy import Column, Integer, String, Float, DateTime
from sqlalchemy.sql import func
from app.core.database import Base


class UserRatingStats(Base):
    __tablename__ = "user_rating_stats"

    user_id = Column(String, primary_key=True)

    total_ratings           = Column(Integer, nullable=False, default=0)
    average_rating          = Column(Float, nullable=False, default=0.0)   # 2 décimales
    ratings_below_threshold = Column(Integer, nullable=False, default=0)

    last_rating_at           = Column(DateTime(timezone=True), nullable=True)
    enhancement_triggered_at = Column(DateTime(timezone=True), nullable=True)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return (
            f"<UserRatingStats user={self.user_id} n={self.total_ratings} "
            f"avg={self.average_rating} latch={self.enhancement_triggered_at}>"
        )
