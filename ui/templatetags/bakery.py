from django import template

from backend.formatting import format_price

register = template.Library()


@register.filter
def price(cents):
    """Renders a price held in cents, e.g. 1250 -> $12.50"""
    return format_price(cents)
