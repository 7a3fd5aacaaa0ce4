# pharmapos/services/subscription_gate.py
"""
Contrôle d'accès par abonnement : fonctionnalités du plan et limites d'usage.

Toute erreur inattendue pendant l'évaluation laisse passer la requête
(GateOutcome.ALLOWED_DUE_TO_ERROR). C'est un arbitrage disponibilité contre
rigueur, à garder visible lors des revues de sécurité.

Les limites sont souples : aucune transaction ne couvre à la fois le contrôle
et la création de la ressource, deux requêtes concurrentes peuvent donc
dépasser la limite d'une unité.
"""
import json
import logging
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from pharmapos.core.config import settings
from pharmapos.core.exceptions import ErrorCode, PlanFeaturesError, Unauthorized
from pharmapos.core.paths import matches_any_prefix
from pharmapos.models.subscription import SubscriptionPlan, SubscriptionStatus, UNLIMITED
from pharmapos.schemas.subscription import (
    GateDecision,
    GateOutcome,
    LimitViolation,
    UsageMetrics,
)
from pharmapos.services.security_context import resolve_security_context
from pharmapos.services.subscription_service import get_active_subscription
from pharmapos.services.usage_service import get_usage_metrics

logger = logging.getLogger(__name__)

UsageProvider = Callable[[Session, str, Optional[SubscriptionPlan]], UsageMetrics]

ALL_FEATURES = "All Features"

# Segment d'URL -> fonctionnalité du plan
FEATURE_MAPPINGS = {
    "inventory": "Inventory Management",
    "products": "Inventory Management",
    "sales": "Point of Sale",
    "reports": "Basic Reports",
    "analytics": "Advanced Analytics",
    "users": "User Management",
    "branches": "Multi-Branch Management",
    "prescriptions": "Prescription Management",
    "patients": "Patient Management",
    "suppliers": "Supplier Management",
    "compliance": "Compliance Reporting",
    "shifts": "Shift Management",
    "billing": "Billing Management",
}

RESTRICTED_FEATURES = frozenset(FEATURE_MAPPINGS)

FEATURE_MINIMUM_PLANS = {
    "analytics": "Professional",
    "branches": "Professional",
    "compliance": "Professional",
    "users": "Professional",
}

# Segment d'URL -> compteur d'usage et limite du plan
LIMIT_RULES = {
    "users": {"type": "users", "counter": "users", "limit_key": "max_users", "label": "utilisateurs"},
    "inventory": {"type": "products", "counter": "products", "limit_key": "max_products", "label": "produits"},
    "products": {"type": "products", "counter": "products", "limit_key": "max_products", "label": "produits"},
    "sales": {"type": "transactions", "counter": "transactions", "limit_key": "max_transactions", "label": "transactions"},
    "branches": {"type": "branches", "counter": "branches", "limit_key": "max_branches", "label": "succursales"},
}


# =====================================
# ANALYSE DU CHEMIN
# =====================================

def should_skip(path: str) -> bool:
    """Chemins jamais soumis au contrôle (auth, facturation, santé, statiques)"""
    path = (path or "").lower()
    if matches_any_prefix(path, settings.SUBSCRIPTION_SKIP_PATHS):
        return True
    return any(path.endswith(ext) for ext in settings.SUBSCRIPTION_STATIC_EXTENSIONS)


def extract_feature(path: str) -> str:
    """Premier segment après /api/ (convention /api/{feature}/{action})"""
    segments = [segment for segment in (path or "").lower().split("/") if segment]
    if len(segments) >= 2 and segments[0] == "api":
        return segments[1]
    return ""


# =====================================
# FONCTIONNALITÉS DU PLAN
# =====================================

def parse_plan_features(raw) -> List[str]:
    if raw is None or raw == "":
        return []
    try:
        features = json.loads(raw) if isinstance(raw, str) else raw
    except ValueError as e:
        raise PlanFeaturesError(f"Fonctionnalités du plan illisibles : {raw!r}") from e
    if not isinstance(features, list) or not all(isinstance(f, str) for f in features):
        raise PlanFeaturesError(f"Fonctionnalités du plan invalides : {raw!r}")
    return features


def has_feature_access(features: List[str], feature: str) -> bool:
    required = FEATURE_MAPPINGS.get(feature.lower(), feature).lower()
    available = {f.lower() for f in features}
    return required in available or ALL_FEATURES.lower() in available


def required_plan_for_feature(feature: str) -> str:
    feature = feature.lower()
    if feature in FEATURE_MINIMUM_PLANS:
        return FEATURE_MINIMUM_PLANS[feature]
    if feature in RESTRICTED_FEATURES:
        return "Professional"
    return "Starter"


# =====================================
# LIMITES D'USAGE
# =====================================

def check_usage_limits(plan, usage: UsageMetrics, feature: str) -> Optional[LimitViolation]:
    rule = LIMIT_RULES.get(feature.lower())
    if plan is None or rule is None:
        return None

    limit = getattr(plan, rule["limit_key"])
    if limit is None or limit == UNLIMITED:
        return None

    current = getattr(usage, rule["counter"]).current
    if current >= limit:
        return LimitViolation(
            type=rule["type"],
            reason=f"Limite de {rule['label']} atteinte ({current}/{limit})",
            current=current,
            limit=limit,
        )
    return None


# =====================================
# ÉVALUATION
# =====================================

def evaluate_subscription_access(
    db: Session,
    path: str,
    user_id: Optional[str],
    usage_provider: Optional[UsageProvider] = None,
) -> GateDecision:
    if should_skip(path):
        return GateDecision(outcome=GateOutcome.SKIPPED)

    try:
        return _evaluate(db, path, user_id, usage_provider or get_usage_metrics)
    except Exception as e:
        logger.exception(f"Erreur lors du contrôle d'abonnement pour {path}, requête autorisée")
        return GateDecision.allowed_due_to_error(str(e))


def _evaluate(db: Session, path: str, user_id: Optional[str], usage_provider: UsageProvider) -> GateDecision:
    try:
        context = resolve_security_context(db, user_id)
    except Unauthorized as e:
        return GateDecision.deny(ErrorCode.AUTH_REQUIRED, str(e))

    subscription = get_active_subscription(db, context.tenant_id)
    if subscription is None:
        return GateDecision.deny(
            ErrorCode.NO_SUBSCRIPTION,
            "Aucun abonnement actif",
            context=context,
        )

    if subscription.status == SubscriptionStatus.GRACE_PERIOD:
        logger.warning(f"Tenant {context.tenant_id} en période de grâce")

    plan = subscription.plan
    subscription_info = {
        "plan_name": plan.name if plan else None,
        "subscription_status": subscription.status,
        "expires_at": subscription.end_date,
        "context": context,
    }

    feature = extract_feature(path)
    if feature:
        features = parse_plan_features(plan.features if plan else None)
        if not has_feature_access(features, feature):
            return GateDecision.deny(
                ErrorCode.FEATURE_NOT_AVAILABLE,
                f"Fonctionnalité '{feature}' non incluse dans votre abonnement",
                required_plan=required_plan_for_feature(feature),
                **subscription_info,
            )

    usage = usage_provider(db, context.tenant_id, plan)
    violation = check_usage_limits(plan, usage, feature)
    if violation is not None:
        return GateDecision.deny(
            ErrorCode.LIMIT_EXCEEDED,
            violation.reason,
            limit_violation=violation,
            usage=usage,
            **subscription_info,
        )

    return GateDecision(outcome=GateOutcome.ALLOWED, usage=usage, **subscription_info)
