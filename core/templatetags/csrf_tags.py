from django import template

from core.csrf import get_intention_token

register = template.Library()

@register.simple_tag(takes_context=True)
def intention_csrf_token(context, intention):
    """
    Render the csrf token bound to an intention
    Usage: <input type="hidden" name="token" value="{% intention_csrf_token 'delete-role' %}">
    """
    request = context.get('request')
    if request is None:
        return ''
    return get_intention_token(request, intention)
