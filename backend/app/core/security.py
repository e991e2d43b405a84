# backend/app/core/security.py
"""
Vérification des JWT émis par le fournisseur d'identité externe.

L'API n'émet aucun token : elle lit seulement `sub` (user_id opaque)
et `role` pour les endpoints d'administration.
"""
from typing import Dict

from jose import jwt

from app.core.config import settings


def decode_token(token: str) -> Dict:
    """Lève jose.JWTError si la signature, l'expiration ou l'audience sont invalides."""
    options = {"verify_aud": settings.JWT_AUDIENCE is not None}
    return jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[settings.ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        options=options,
    )
