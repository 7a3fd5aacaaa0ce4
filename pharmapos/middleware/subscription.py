# pharmapos/middleware/subscription.py
from datetime import datetime
import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware

from pharmapos.core.config import settings
from pharmapos.core.exceptions import status_code_for
from pharmapos.core.security import read_token_claims
from pharmapos.db.session import get_session_factory
from pharmapos.schemas.subscription import GateDecision, GateOutcome
from pharmapos.services.subscription_gate import evaluate_subscription_access, should_skip

logger = logging.getLogger(__name__)


class SubscriptionMiddleware(BaseHTTPMiddleware):
    """Bloque les requêtes hors abonnement (fonctionnalité, limites d'usage)"""

    def __init__(self, app, usage_provider=None):
        super().__init__(app)
        self.usage_provider = usage_provider

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if should_skip(path):
            return await call_next(request)

        claims = read_token_claims(request) or {}
        session_factory = get_session_factory(request)
        try:
            decision = await run_in_threadpool(self._evaluate, session_factory, path, claims.get("sub"))
        except Exception as e:
            # Session indisponible, etc. : on laisse passer et on journalise
            logger.exception(f"Erreur dans SubscriptionMiddleware pour {path}")
            decision = GateDecision.allowed_due_to_error(str(e))

        if not decision.allowed:
            return self._violation_response(decision)

        if decision.outcome == GateOutcome.ALLOWED:
            request.state.security_context = decision.context
            request.state.subscription = decision

        response = await call_next(request)
        self._add_subscription_headers(response, decision)
        return response

    def _evaluate(self, session_factory, path: str, user_id) -> GateDecision:
        db = session_factory()
        try:
            return evaluate_subscription_access(db, path, user_id, self.usage_provider)
        finally:
            db.close()

    @staticmethod
    def _violation_response(decision: GateDecision) -> JSONResponse:
        violation = decision.limit_violation
        context = decision.context
        logger.warning(
            f"Violation d'abonnement : {decision.error_code.value} - {decision.reason} "
            f"(utilisateur {context.user_id if context else None}, "
            f"tenant {context.tenant_id if context else None})"
        )
        return JSONResponse(
            status_code=status_code_for(decision.error_code),
            content={
                "error": True,
                "errorCode": decision.error_code.value,
                "message": decision.reason,
                "requiredPlan": decision.required_plan,
                "limitType": violation.type if violation else None,
                "currentUsage": violation.current if violation else None,
                "limit": violation.limit if violation else None,
                "upgradeUrl": settings.SUBSCRIPTION_UPGRADE_URL,
                "timestamp": datetime.utcnow().isoformat(),
            },
        )

    @staticmethod
    def _add_subscription_headers(response, decision: GateDecision):
        if decision.outcome != GateOutcome.ALLOWED or not decision.plan_name:
            return
        response.headers["X-Subscription-Plan"] = decision.plan_name
        response.headers["X-Subscription-Status"] = decision.subscription_status or ""
        if decision.expires_at is not None:
            response.headers["X-Subscription-Expires"] = decision.expires_at.strftime("%Y-%m-%d")
