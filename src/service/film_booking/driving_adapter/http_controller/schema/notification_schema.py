from pydantic import BaseModel

from src.service.film_booking.app.notification import Notification


class NotificationResponse(BaseModel):
    title: str
    description: str
    variant: str = 'default'

    @classmethod
    def from_notification(cls, notification: Notification) -> 'NotificationResponse':
        return cls(**notification.to_dict())
