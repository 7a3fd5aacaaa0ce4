#pharmapos/core/roles.py
from enum import Enum
from typing import List, Optional


class Role(str, Enum):
    SUPER_ADMIN = "SuperAdmin"
    OPERATIONS = "Operations"
    TENANT_ADMIN = "TenantAdmin"
    PHARMACIST = "Pharmacist"
    CASHIER = "Cashier"


# Niveau hiérarchique : plus la valeur est basse, plus le rôle est privilégié
ROLE_HIERARCHY = {
    Role.SUPER_ADMIN: 1,
    Role.OPERATIONS: 2,
    Role.TENANT_ADMIN: 3,
    Role.PHARMACIST: 4,
    Role.CASHIER: 5,
}

ROLE_DISPLAY_NAMES = {
    Role.SUPER_ADMIN: "Super Admin",
    Role.OPERATIONS: "Operations",
    Role.TENANT_ADMIN: "Tenant Admin",
    Role.PHARMACIST: "Pharmacist",
    Role.CASHIER: "Cashier",
}

# Rôles transverses : visibilité sur tous les tenants
GLOBAL_ROLES = frozenset({Role.SUPER_ADMIN, Role.OPERATIONS})


def parse_role(value) -> Optional[Role]:
    """Convertit une valeur persistée en Role, None si inconnue"""
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        return None


def hierarchy_level(role: Role) -> int:
    return ROLE_HIERARCHY[role]


def display_name(role) -> str:
    return ROLE_DISPLAY_NAMES.get(parse_role(role), "Unknown")


def can_access_role(current: Role, target: Role) -> bool:
    return hierarchy_level(current) <= hierarchy_level(target)


def can_manage_role(current: Role, target: Role) -> bool:
    """
    - SuperAdmin gère tous les rôles sauf le sien
    - Operations, TenantAdmin et Pharmacist gèrent les rôles strictement inférieurs
    - Cashier ne gère personne
    """
    if current == Role.SUPER_ADMIN:
        return target != Role.SUPER_ADMIN
    if current == Role.CASHIER:
        return False
    return can_access_role(current, target) and current != target


def can_impersonate_role(current: Role, target: Role) -> bool:
    # Seul le SuperAdmin peut emprunter une identité
    return current == Role.SUPER_ADMIN and target != Role.SUPER_ADMIN


def manageable_roles(role: Role) -> List[Role]:
    return sorted(
        (r for r in Role if can_manage_role(role, r)),
        key=hierarchy_level,
    )
