# SmartQueue — Database Models
# Import all models here for SQLAlchemy discovery

from app.models.location import Location            # noqa
from app.models.ticket import Ticket                # noqa
from app.models.checkin import Checkin              # noqa
from app.models.user_profile import UserProfile     # noqa
from app.models.admin import Admin                  # noqa
