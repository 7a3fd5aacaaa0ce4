from pharmapos.middleware.branch_isolation import BranchIsolationMiddleware
from pharmapos.middleware.subscription import SubscriptionMiddleware

__all__ = ["BranchIsolationMiddleware", "SubscriptionMiddleware"]
