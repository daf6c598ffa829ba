import sentry_sdk

from .config import Settings
from .errors import PayrollError
from .logging import SERVICE_NAME


def configure_error_monitoring(settings: Settings) -> bool:
    """Report unexpected failures to Sentry; rejected ledger operations are not reported."""

    if not settings.sentry_dsn:
        return False
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.env,
        traces_sample_rate=0.2,
        ignore_errors=[PayrollError],
    )
    sentry_sdk.set_tag("service", SERVICE_NAME)
    return True
