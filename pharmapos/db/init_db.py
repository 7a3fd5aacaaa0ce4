# pharmapos/db/init_db.py
import logging

from pharmapos.db.base import Base
# Import de tous les modèles pour que SQLAlchemy puisse les créer
import pharmapos.models  # noqa: F401

logger = logging.getLogger(__name__)


def init_db(bind=None):
    if bind is None:
        from pharmapos.db.session import engine
        bind = engine
    logger.info("Création des tables dans la base de données...")
    Base.metadata.create_all(bind=bind)
    logger.info("Toutes les tables ont été créées avec succès !")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
