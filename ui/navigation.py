# ui/navigation.py — the tab menu shown on every page
from dataclasses import dataclass
from typing import List, Tuple

from django.conf import settings
from django.urls import resolve, reverse

from .access import has_access

TITLE_STOREFRONT = "Storefront"
TITLE_DASHBOARD = "Dashboard"
TITLE_USERS = "Users"
TITLE_PRODUCTS = "Products"
TITLE_LOGOUT = "Logout"


@dataclass(frozen=True)
class Tab:
    title: str
    icon: str
    url_name: str
    # routes that keep this tab selected
    routes: Tuple[str, ...] = ()


@dataclass
class MenuEntry:
    title: str
    icon: str
    href: str
    selected: bool


TABS = (
    Tab(TITLE_STOREFRONT, "✎", "storefront", ("storefront", "order-new", "order-edit", "order-detail")),
    Tab(TITLE_DASHBOARD, "◷", "dashboard", ("dashboard",)),
    Tab(TITLE_USERS, "☺", "users", ("users", "user-new", "user-edit", "user-delete")),
    Tab(TITLE_PRODUCTS, "▦", "products", ("products", "product-new", "product-edit", "product-delete")),
)


def available_tabs(request) -> List[MenuEntry]:
    """Tabs the user may open, with the one owning the current route selected."""
    current = getattr(getattr(request, "resolver_match", None), "url_name", None)
    entries = []
    for tab in TABS:
        href = reverse(tab.url_name)
        view_class = getattr(resolve(href).func, "view_class", None)
        if not has_access(view_class, request.user):
            continue
        entries.append(MenuEntry(tab.title, tab.icon, href, current in tab.routes))
    return entries


def menu(request):
    """Context processor: application name, menu tabs and the logout entry."""
    context = {"app_name": settings.BAKERY_APP_NAME, "logout_title": TITLE_LOGOUT}
    user = getattr(request, "user", None)
    if user is not None and user.is_authenticated:
        context["menu_tabs"] = available_tabs(request)
    else:
        context["menu_tabs"] = []
    return context
