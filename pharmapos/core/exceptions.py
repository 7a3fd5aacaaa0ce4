#pharmapos/core/exceptions.py
from enum import Enum


class ErrorCode(str, Enum):
    AUTH_REQUIRED = "AUTH_REQUIRED"
    NO_SUBSCRIPTION = "NO_SUBSCRIPTION"
    FEATURE_NOT_AVAILABLE = "FEATURE_NOT_AVAILABLE"
    LIMIT_EXCEEDED = "LIMIT_EXCEEDED"
    BRANCH_ACCESS_DENIED = "BRANCH_ACCESS_DENIED"
    INTERNAL_EVALUATION_ERROR = "INTERNAL_EVALUATION_ERROR"


# Codes HTTP renvoyés au client pour chaque refus
ERROR_STATUS_CODES = {
    ErrorCode.AUTH_REQUIRED: 401,
    ErrorCode.NO_SUBSCRIPTION: 402,
    ErrorCode.FEATURE_NOT_AVAILABLE: 403,
    ErrorCode.LIMIT_EXCEEDED: 429,
    ErrorCode.BRANCH_ACCESS_DENIED: 403,
}


def status_code_for(error_code) -> int:
    return ERROR_STATUS_CODES.get(error_code, 403)


class AccessControlError(Exception):
    """Erreur de base du contrôle d'accès"""
    error_code = ErrorCode.INTERNAL_EVALUATION_ERROR


class Unauthorized(AccessControlError):
    """Utilisateur absent, inactif ou rôle illisible"""
    error_code = ErrorCode.AUTH_REQUIRED


class BranchAccessDenied(AccessControlError):
    error_code = ErrorCode.BRANCH_ACCESS_DENIED


class PlanFeaturesError(AccessControlError):
    """Liste de fonctionnalités du plan illisible (JSON invalide)"""
