#/pharmapos/db/session.py
from typing import Generator
import logging

from fastapi import HTTPException, Request
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError

from pharmapos.core.config import settings

logger = logging.getLogger(__name__)

engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.SQLALCHEMY_ECHO,
    **settings.SQLALCHEMY_ENGINE_OPTIONS,
)

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


def get_session_factory(request: Request):
    """Fabrique de sessions de l'application (app.state), SessionLocal par défaut"""
    return getattr(request.app.state, "session_factory", None) or SessionLocal


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dépendance DB
    - 1 session / requête
    - commit auto si succès
    - rollback garanti
    """
    db: Session = get_session_factory(request)()
    try:
        yield db
        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Erreur SQLAlchemy")
        raise HTTPException(
            status_code=500,
            detail="Erreur interne de base de données"
        ) from e
    except Exception:
        db.rollback()
        logger.exception("Erreur inattendue")
        raise
    finally:
        db.close()
