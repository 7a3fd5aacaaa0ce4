# pharmapos/models/__init__.py
"""
Fichier d'initialisation des modèles
"""

# =====================================
# MODÈLES DE BASE
# =====================================
from .tenant import Tenant
from .branch import Branch, UserBranch
from .user import User, UserSession
from .subscription import Subscription, SubscriptionPlan, SubscriptionStatus

# =====================================
# MODÈLES MÉTIER (comptage d'usage)
# =====================================
from .product import Product
from .sale import Sale


# =====================================
# LISTE DES MODÈLES DISPONIBLES
# =====================================
__all__ = [
    "Tenant",
    "Branch",
    "UserBranch",
    "User",
    "UserSession",
    "Subscription",
    "SubscriptionPlan",
    "SubscriptionStatus",
    "Product",
    "Sale",
]
