"""
Role-based permission classes shared by every back-office app.

Each area of the API is open to a fixed set of roles:

    stores, users, product attributes ........ admin
    catalog, inventory, stock counts ......... admin, manager
    payables, revenues, bank accounts ........ admin, finance
    sales, customers, cash register .......... admin, manager, employee
    reports .................................. admin, manager, finance

Store scoping is enforced at object level by IsStoreMember and at
queryset level by ``filter_by_store_access``.
"""

from rest_framework.permissions import BasePermission, SAFE_METHODS
from .models import UserRole


class HasRole(BasePermission):
    """Allow authenticated users whose role is in ``allowed_roles``."""

    allowed_roles = ()
    message = 'Your role does not have access to this area.'

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user
            and user.is_authenticated
            and user.role in self.allowed_roles
        )


class IsAdminRole(HasRole):
    allowed_roles = (UserRole.ADMIN,)
    message = 'Only administrators can perform this action.'


class IsInventoryStaff(HasRole):
    allowed_roles = (UserRole.ADMIN, UserRole.MANAGER)
    message = 'Only administrators and managers can manage catalog and inventory.'


class IsFinanceStaff(HasRole):
    allowed_roles = (UserRole.ADMIN, UserRole.FINANCE)
    message = 'Only administrators and finance staff can access financial records.'


class IsSalesStaff(HasRole):
    allowed_roles = (UserRole.ADMIN, UserRole.MANAGER, UserRole.EMPLOYEE)
    message = 'Your role cannot operate the point of sale.'


class CanViewReports(HasRole):
    allowed_roles = (UserRole.ADMIN, UserRole.MANAGER, UserRole.FINANCE)
    message = 'Your role cannot view reports.'


class IsAdminOrReadOnly(BasePermission):
    """Read access for any authenticated user, writes for administrators."""

    message = 'Only administrators can modify this resource.'

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in SAFE_METHODS:
            return True
        return request.user.role == UserRole.ADMIN


class IsStoreMember(BasePermission):
    """
    Object-level permission for store-scoped records.

    Users with global access pass; everyone else must belong to the
    record's store. Objects without a ``store_id`` are not restricted.
    """

    message = 'This record belongs to another store.'

    def has_object_permission(self, request, view, obj):
        store_id = getattr(obj, 'store_id', None)
        if store_id is None:
            return True
        return request.user.can_access_store(store_id)


def filter_by_store_access(queryset, user, field='store'):
    """Restrict a queryset to the user's store unless they have global access."""
    if user.has_global_access:
        return queryset
    return queryset.filter(**{f'{field}_id': user.store_id})
