"""
Authorization evaluator.

Pure allow/deny decision over a caller's roles:
    1. Malformed action/resource or empty role set -> deny
    2. Admin bypass -> allow
    3. Any held role grants (action, resource) -> allow
    4. Default -> deny

The evaluator holds no persistence of its own. Grants are supplied at
construction time, either from the role catalog or from the persisted
RolePermission graph, and are frozen so one instance can be shared freely.
"""
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

from .catalog import ROLE_CATALOG, RoleName, parse_permission_key

SUPERUSER_ROLE = RoleName.ADMIN.value

Grant = Tuple[str, str]


def _role_name(role) -> Optional[str]:
    """Accept either a role name or an object exposing `.name`."""
    name = getattr(role, 'name', role)
    return name if isinstance(name, str) else None


def _is_token(value) -> bool:
    return isinstance(value, str) and bool(value.strip())


class AuthorizationEvaluator:

    def __init__(self, grants: Mapping[str, Iterable[Grant]]):
        self._grants: Dict[str, FrozenSet[Grant]] = {
            role_name: frozenset((action, resource) for action, resource in pairs)
            for role_name, pairs in grants.items()
        }

    @classmethod
    def from_catalog(cls, role_catalog=ROLE_CATALOG) -> 'AuthorizationEvaluator':
        """Build grants from role catalog entries. Unparseable keys are ignored."""
        grants = {}
        for role in role_catalog:
            pairs = set()
            for key in role.permissions:
                try:
                    pairs.add(parse_permission_key(key))
                except ValueError:
                    continue
            grants[role.name] = pairs
        return cls(grants)

    @classmethod
    def from_database(cls, role_names=None) -> 'AuthorizationEvaluator':
        """
        Build grants from the persisted RolePermission graph.

        Args:
            role_names: restrict loading to these roles (all roles if None)
        """
        from .services import load_role_grants
        return cls(load_role_grants(role_names))

    def grants_for(self, role) -> FrozenSet[Grant]:
        return self._grants.get(_role_name(role), frozenset())

    def is_allowed(self, roles, action, resource) -> bool:
        """
        Check whether any of `roles` may perform `action` on `resource`.

        Args:
            roles: iterable of role names or role objects (may be empty)
            action: action identifier (e.g., 'approve')
            resource: resource identifier (e.g., 'results')

        Returns:
            bool: True if allowed, False otherwise
        """
        if not _is_token(action) or not _is_token(resource):
            return False

        role_names = {name for name in map(_role_name, roles or ()) if name}
        if not role_names:
            return False

        if SUPERUSER_ROLE in role_names:
            return True

        pair = (action, resource)
        return any(pair in self._grants.get(name, ()) for name in role_names)

    def allowed_pairs(self, roles) -> FrozenSet[Grant]:
        """Union of grants across the given roles (admin bypass not applied)."""
        pairs = set()
        for role in roles or ():
            pairs |= self.grants_for(role)
        return frozenset(pairs)
