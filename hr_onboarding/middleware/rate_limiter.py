"""
Rate limiting configuration.

Applies per-blueprint rate limits using Flask-Limiter.
The Limiter instance is created in hr_onboarding/__init__.py with no default
limits; this module applies limits per route group.

Usage:
    from hr_onboarding.middleware.rate_limiter import init_rate_limits
    init_rate_limits(app, limiter)
"""

ONBOARDING_LIMIT = "60/minute"


def init_rate_limits(app, limiter):
    """
    Apply rate limits to API blueprints.

    Limits (per remote IP):
        - Onboarding API:   60/minute (configurable via ONBOARDING_RATE_LIMIT)
        - Health check:     exempt

    Rate limiting is disabled in testing mode or when RATELIMIT_ENABLED is false.
    """

    if app.config.get("TESTING") or not app.config.get("RATELIMIT_ENABLED", True):
        app.logger.info("Rate limiter disabled (TESTING=%s)", app.config.get("TESTING", False))
        return

    limit = app.config.get("ONBOARDING_RATE_LIMIT", ONBOARDING_LIMIT)
    bp = app.blueprints.get("onboarding")
    if bp:
        limiter.limit(limit)(bp)

    health_view = app.view_functions.get("health")
    if health_view:
        limiter.exempt(health_view)

    app.logger.info("Rate limiter configured — onboarding: %s", limit)
