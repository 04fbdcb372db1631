"""All ORM models, imported together so they register on ``Base.metadata``."""
from buildmarket.users.models import User, UserType  # noqa: F401
from buildmarket.tenders.models import Tender, TenderBid, TenderStatus, PersonType, BidStatus  # noqa: F401
from buildmarket.marketplace.models import MarketplaceListing, ListingType  # noqa: F401
from buildmarket.messaging.models import Message  # noqa: F401
from buildmarket.notifications.models import Notification, NotificationType  # noqa: F401
from buildmarket.reviews.models import Review  # noqa: F401
from buildmarket.directory.models import Specialist, Crew  # noqa: F401
