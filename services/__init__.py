# Services Module for the OmaHub Studio
# Contains the application review workflow and its provisioning steps

from services.notification_service import NotificationService, NotificationType, get_notification_service
from services.application_service import ApplicationReviewService

__all__ = [
    'NotificationService',
    'NotificationType',
    'get_notification_service',
    'ApplicationReviewService',
]
