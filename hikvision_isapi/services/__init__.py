from .event_notification import EventNotificationService  # noqa: F401
from .face import FaceService  # noqa: F401
from .person import PersonService  # noqa: F401
