# pharmapos/core/security.py
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Request
from jose import jwt, JWTError

from pharmapos.core.config import settings


# JWT
def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Crée un token JWT"""
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Décode un token JWT, None si invalide ou expiré"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


def read_token_claims(request: Request) -> Optional[dict]:
    """
    Lit les claims du token Bearer de la requête.

    Le résultat est mémorisé dans request.state pour que les middlewares
    successifs ne décodent le token qu'une seule fois.
    """
    if hasattr(request.state, "token_claims"):
        return request.state.token_claims

    claims = None
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        claims = decode_access_token(auth_header[7:])

    request.state.token_claims = claims
    return claims
