# pharmapos/services/subscription_service.py
import logging

from sqlalchemy.orm import Session, joinedload

from pharmapos.models.subscription import Subscription, SubscriptionStatus

logger = logging.getLogger(__name__)


def get_active_subscription(db: Session, tenant_id):
    """
    Abonnement effectif (active ou grace_period) d'un tenant.

    L'unicité n'est pas garantie en base : l'ordre (date de fin puis id
    décroissants) rend le choix déterministe et le doublon est signalé.
    """
    if not tenant_id:
        return None

    subscriptions = (
        db.query(Subscription)
        .options(joinedload(Subscription.plan))
        .filter(
            Subscription.tenant_id == tenant_id,
            Subscription.status.in_(SubscriptionStatus.EFFECTIVE),
        )
        .order_by(Subscription.end_date.desc(), Subscription.id.desc())
        .limit(2)
        .all()
    )

    if not subscriptions:
        return None

    if len(subscriptions) > 1:
        logger.warning(
            f"Plusieurs abonnements effectifs pour le tenant {tenant_id}, "
            f"abonnement {subscriptions[0].id} retenu"
        )

    return subscriptions[0]


def is_subscription_active(db: Session, tenant_id) -> bool:
    """Vérifie si le tenant dispose d'un abonnement effectif"""
    return get_active_subscription(db, tenant_id) is not None
