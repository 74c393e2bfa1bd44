"""
Session-wide state shared by every workflow.

One SessionContext is created by the application orchestrator and handed to
each component, so tests can build one without any UI.
"""

from dataclasses import dataclass, field

from common.localization import Localizer
from common.notifications import NotificationQueue
from navigation.core import NavigationController
from quota_guard.core import ErrorNormalizer, QuotaCircuitBreaker


@dataclass
class SessionContext:
    """
    Shared flags and services for one user session.

    The breaker, notification queue and navigation are owned here and
    referenced (never copied) by the workflows.
    """

    localizer: Localizer = field(default_factory=Localizer)
    notifications: NotificationQueue = field(default_factory=NotificationQueue)
    breaker: QuotaCircuitBreaker = field(default_factory=QuotaCircuitBreaker)
    navigation: NavigationController = field(default_factory=NavigationController)
    is_authenticated: bool = False
    errors: ErrorNormalizer = field(init=False)

    def __post_init__(self):
        self.errors = ErrorNormalizer(self.breaker, self.notifications)

    @property
    def locale(self) -> str:
        return self.localizer.locale

    @property
    def is_quota_exhausted(self) -> bool:
        return self.breaker.tripped
