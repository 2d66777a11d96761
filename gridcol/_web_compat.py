from django.template import (
    Context,
    RequestContext,
    Template,
)
from django.template.backends.django import Template as DjangoLoadedTemplate
from django.template.loader import render_to_string
from django.utils.encoding import force_str  # noqa: F401
from django.utils.safestring import mark_safe
from django.utils.text import slugify  # noqa: F401


def log_used_template(request, template):
    if template is None or request is None:
        return

    if not hasattr(request, 'gridcol_used_templates'):
        request.gridcol_used_templates = []
    request.gridcol_used_templates.append(template)


def render_template(request, template, context):
    """
    @type request: django.http.HttpRequest|None
    @type template: str|django.template.Template|django.template.backends.django.Template
    @type context: dict
    """
    log_used_template(request, template)

    if template is None:
        return ''
    elif isinstance(template, str):
        return mark_safe(render_to_string(template_name=template, context=context, request=request))
    elif isinstance(template, DjangoLoadedTemplate):
        return mark_safe(template.render(context=context, request=request))
    elif isinstance(template, Template):
        if request is None:
            return mark_safe(template.render(Context(context)))
        return mark_safe(template.render(context=RequestContext(request, context)))
    else:
        return mark_safe(template.render(context, request))
