# ui/access.py — role checks shared by the views and the navigation menu
from django.contrib.auth.mixins import LoginRequiredMixin
from django.core.exceptions import PermissionDenied


def has_access(view_class, user) -> bool:
    """True when ``user`` may open ``view_class``; no ``allowed_roles`` means any logged-in user."""
    if not (user and user.is_authenticated):
        return False
    roles = getattr(view_class, "allowed_roles", ())
    return not roles or getattr(user, "role", None) in roles


class RoleRequiredMixin(LoginRequiredMixin):
    """Anonymous users go to the login page, logged-in users without the role get 403."""

    allowed_roles = ()

    def dispatch(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return self.handle_no_permission()
        if not has_access(type(self), request.user):
            raise PermissionDenied
        return super().dispatch(request, *args, **kwargs)
