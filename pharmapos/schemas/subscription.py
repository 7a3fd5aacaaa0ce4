# pharmapos/schemas/subscription.py
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from pharmapos.core.exceptions import ErrorCode
from pharmapos.schemas.security import SecurityContext


# =======================
# USAGE
# =======================
class UsageMetric(BaseModel):
    current: int = 0
    limit: Optional[int] = Field(None, description="None = illimité")
    percentage: float = 0.0


class UsageMetrics(BaseModel):
    """Compteurs d'usage d'un tenant, recalculés à chaque contrôle"""
    tenant_id: str
    users: UsageMetric = Field(default_factory=UsageMetric)
    products: UsageMetric = Field(default_factory=UsageMetric)
    transactions: UsageMetric = Field(default_factory=UsageMetric)
    branches: UsageMetric = Field(default_factory=UsageMetric)


class LimitViolation(BaseModel):
    type: str
    reason: str
    current: int
    limit: int


# =======================
# DÉCISION DU CONTRÔLE D'ABONNEMENT
# =======================
class GateOutcome(str, Enum):
    SKIPPED = "skipped"
    ALLOWED = "allowed"
    DENIED = "denied"
    # Erreur interne : la requête passe quand même (disponibilité > rigueur)
    ALLOWED_DUE_TO_ERROR = "allowed_due_to_error"


class GateDecision(BaseModel):
    outcome: GateOutcome
    error_code: Optional[ErrorCode] = None
    reason: str = ""
    required_plan: Optional[str] = None
    limit_violation: Optional[LimitViolation] = None

    # Informations d'abonnement pour les en-têtes de réponse
    plan_name: Optional[str] = None
    subscription_status: Optional[str] = None
    expires_at: Optional[datetime] = None

    context: Optional[SecurityContext] = None
    usage: Optional[UsageMetrics] = None

    @property
    def allowed(self) -> bool:
        return self.outcome != GateOutcome.DENIED

    @classmethod
    def deny(cls, error_code: ErrorCode, reason: str, **kwargs) -> "GateDecision":
        return cls(outcome=GateOutcome.DENIED, error_code=error_code, reason=reason, **kwargs)

    @classmethod
    def allowed_due_to_error(cls, reason: str) -> "GateDecision":
        return cls(
            outcome=GateOutcome.ALLOWED_DUE_TO_ERROR,
            error_code=ErrorCode.INTERNAL_EVALUATION_ERROR,
            reason=reason,
        )
