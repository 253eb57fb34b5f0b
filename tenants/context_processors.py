def tenant_scope(request):
    """Expose the request's company and role to templates."""
    scope = getattr(request, 'scope', None)
    return {
        'scope': scope,
        'company': scope.company if scope else None,
    }
