# app/shared/models/__init__.py
"""
Point d'entrée unique pour tous les modèles SQLAlchemy.

TOUJOURS importer les modèles depuis ce fichier :
  from app.shared.models import Checkin, Intervention, ...

→ Garantit que tous les modèles sont enregistrés dans Base.metadata
  avant la création des tables (Alembic, create_all).
"""

from app.shared.models.Checkin        import Checkin
from app.shared.models.Intervention   import Intervention
from app.shared.models.RatingStats    import UserRatingStats
from app.shared.models.BaselineTraits import BaselineTraits

__all__ = [
    "Checkin",
    "Intervention",
    # Cache dérivé
    "UserRatingStats",
    # Contexte prompt
    "BaselineTraits",
]
