# backend/app/core/exceptions.py
"""
Taxonomie d'erreurs des collaborateurs externes.

- Validation : rejetée par les schemas pydantic avant d'atteindre le service.
- DependencyError : record store ou service de génération indisponible.
  Levée au point d'appel du collaborateur, jamais avalée silencieusement.
- "Pas encore de données" n'est PAS une erreur : l'engine retourne un
  résultat à zéro.
"""
import functools
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DependencyError(RuntimeError):
    """Un collaborateur (record_store | advice_generator) a échoué."""

    def __init__(self, source: str, detail: str = ""):
        self.source = source
        self.detail = detail
        super().__init__(f"{source}: {detail}" if detail else source)


class RatingStatsUnavailable(DependencyError):
    """
    Le recalcul des stats a échoué.
    Porte le dernier profil valide en cache (ou None si jamais calculé)
    pour que l'appelant puisse s'en servir en repli.
    """

    error_code = "RATING_STATS_UNAVAILABLE"

    def __init__(self, detail: str = "", cached: Optional[object] = None):
        super().__init__("record_store", detail)
        self.cached = cached


def record_store_errors(fn: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """
    Décorateur de repository : SQLAlchemyError → DependencyError("record_store").

    La session est rollback avant de relever : sur PostgreSQL une requête en
    échec invalide la transaction, et les replis (profil en cache, contexte
    omis) réutilisent la même session pour la suite de la requête.
    Les méthodes décorées reçoivent la session en `db` (self, db, ...).
    """

    @functools.wraps(fn)
    async def wrapper(*args, **kwargs):
        try:
            return await fn(*args, **kwargs)
        except SQLAlchemyError as e:
            db = kwargs.get("db", args[1] if len(args) > 1 else None)
            if db is not None:
                await _rollback(db, fn.__name__)
            raise DependencyError("record_store", f"{fn.__name__}: {e.__class__.__name__}") from e

    return wrapper


async def _rollback(db, operation: str) -> None:
    try:
        await db.rollback()
    except SQLAlchemyError as e:
        logger.error(f"Rollback impossible après échec de {operation} : {e.__class__.__name__}")
