#pharmapos/core/permissions.py
"""
Table statique rôle -> permissions.

Les permissions sont des chaînes opaques groupées par domaine. La table est
figée à l'import : aucune attribution dynamique n'existe à l'exécution.
"""
from types import MappingProxyType
from typing import FrozenSet, Iterable

from pharmapos.core.roles import Role, parse_role

# =====================================
# GESTION DES UTILISATEURS
# =====================================
USER_CREATE = "user.create"
USER_READ = "user.read"
USER_UPDATE = "user.update"
USER_DELETE = "user.delete"
USER_RESET_PASSWORD = "user.reset_password"

# =====================================
# EMPRUNT D'IDENTITÉ
# =====================================
IMPERSONATE_USER = "impersonate.user"
VIEW_IMPERSONATION_LOGS = "impersonate.view_logs"

# =====================================
# TENANTS
# =====================================
TENANT_CREATE = "tenant.create"
TENANT_READ = "tenant.read"
TENANT_UPDATE = "tenant.update"
TENANT_DELETE = "tenant.delete"

# =====================================
# ADMINISTRATION SYSTÈME
# =====================================
SYSTEM_SETTINGS = "system.settings"
SYSTEM_AUDIT_LOGS = "system.audit_logs"
SYSTEM_BACKUP = "system.backup"
SYSTEM_MONITORING = "system.monitoring"

# =====================================
# INVENTAIRE
# =====================================
INVENTORY_CREATE = "inventory.create"
INVENTORY_READ = "inventory.read"
INVENTORY_UPDATE = "inventory.update"
INVENTORY_DELETE = "inventory.delete"
INVENTORY_IMPORT = "inventory.import"
INVENTORY_EXPORT = "inventory.export"

# =====================================
# VENTES
# =====================================
SALES_CREATE = "sales.create"
SALES_READ = "sales.read"
SALES_UPDATE = "sales.update"
SALES_DELETE = "sales.delete"
SALES_REFUND = "sales.refund"

# =====================================
# OPÉRATIONS CLINIQUES
# =====================================
PRESCRIPTION_CREATE = "prescription.create"
PRESCRIPTION_READ = "prescription.read"
PRESCRIPTION_UPDATE = "prescription.update"
PRESCRIPTION_DELETE = "prescription.delete"
PATIENT_MANAGE = "patient.manage"

# =====================================
# RAPPORTS
# =====================================
REPORTS_VIEW = "reports.view"
REPORTS_CREATE = "reports.create"
REPORTS_EXPORT = "reports.export"
REPORTS_SCHEDULE = "reports.schedule"


_USER_ALL = {USER_CREATE, USER_READ, USER_UPDATE, USER_DELETE, USER_RESET_PASSWORD}
_INVENTORY_ALL = {
    INVENTORY_CREATE, INVENTORY_READ, INVENTORY_UPDATE,
    INVENTORY_DELETE, INVENTORY_IMPORT, INVENTORY_EXPORT,
}
_SALES_ALL = {SALES_CREATE, SALES_READ, SALES_UPDATE, SALES_DELETE, SALES_REFUND}
_CLINICAL_ALL = {
    PRESCRIPTION_CREATE, PRESCRIPTION_READ, PRESCRIPTION_UPDATE,
    PRESCRIPTION_DELETE, PATIENT_MANAGE,
}
_REPORTS_ALL = {REPORTS_VIEW, REPORTS_CREATE, REPORTS_EXPORT, REPORTS_SCHEDULE}

ROLE_PERMISSIONS = MappingProxyType({
    Role.SUPER_ADMIN: frozenset(
        _USER_ALL
        | {IMPERSONATE_USER, VIEW_IMPERSONATION_LOGS}
        | {TENANT_CREATE, TENANT_READ, TENANT_UPDATE, TENANT_DELETE}
        | {SYSTEM_SETTINGS, SYSTEM_AUDIT_LOGS, SYSTEM_BACKUP, SYSTEM_MONITORING}
        | _INVENTORY_ALL | _SALES_ALL | _CLINICAL_ALL | _REPORTS_ALL
    ),
    Role.OPERATIONS: frozenset(
        _USER_ALL
        | {TENANT_READ, TENANT_UPDATE}
        # Supervision uniquement, pas de paramètres système
        | {SYSTEM_MONITORING}
        | _INVENTORY_ALL | _SALES_ALL | _CLINICAL_ALL | _REPORTS_ALL
    ),
    Role.TENANT_ADMIN: frozenset(
        {USER_CREATE, USER_READ, USER_UPDATE, USER_RESET_PASSWORD}
        | _INVENTORY_ALL | _SALES_ALL | _CLINICAL_ALL | _REPORTS_ALL
    ),
    Role.PHARMACIST: frozenset({
        USER_READ,
        INVENTORY_READ, INVENTORY_CREATE, INVENTORY_UPDATE, INVENTORY_EXPORT,
        SALES_CREATE, SALES_READ,
        PRESCRIPTION_CREATE, PRESCRIPTION_READ, PRESCRIPTION_UPDATE, PATIENT_MANAGE,
        REPORTS_VIEW, REPORTS_EXPORT,
    }),
    Role.CASHIER: frozenset({
        USER_READ,
        INVENTORY_READ, INVENTORY_EXPORT,
        SALES_CREATE, SALES_READ,
        REPORTS_VIEW, REPORTS_EXPORT,
    }),
})


def permissions_for(role) -> FrozenSet[str]:
    """Permissions du rôle ; ensemble vide pour un rôle inconnu"""
    return ROLE_PERMISSIONS.get(parse_role(role), frozenset())


def role_has_permission(role, permission: str) -> bool:
    return permission in permissions_for(role)


def is_super_permission(permissions: Iterable[str]) -> bool:
    """
    Échappatoire explicite : system.settings implique toutes les autres
    permissions. Contourne le moindre privilège, à auditer séparément.
    """
    return SYSTEM_SETTINGS in permissions


def has_permission(context, permission: str) -> bool:
    return permission in context.permissions or is_super_permission(context.permissions)
