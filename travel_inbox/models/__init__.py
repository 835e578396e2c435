from .user.user import User
from .items.saved_item import SavedItem
from .trips.trip_model import Trip
from .trips.trip_item import TripItem
from .trips.companion import Companion
from .trips.pending_invite import PendingInvite
from .trips.collaboration import Comment, Vote
from .analytics.analytics_event import AnalyticsEvent
