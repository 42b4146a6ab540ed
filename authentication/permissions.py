from rest_framework import permissions


def is_back_office_admin(user):
    """
    The one authorization rule of the back office: an authenticated, active
    staff account may manage the menu, orders and ratings.
    """
    return bool(
        user is not None
        and user.is_authenticated
        and user.is_active
        and getattr(user, 'is_staff', False)
    )


class IsBackOfficeAdmin(permissions.BasePermission):
    """
    Permission to only allow back-office admins
    """
    message = 'Admin login required.'

    def has_permission(self, request, view):
        return is_back_office_admin(request.user)
