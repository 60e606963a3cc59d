# juliecraft/models/__init__.py
# Importing every model here registers all tables on Base.metadata

from juliecraft.models.auth import Profile, PasswordResetToken  # noqa: F401
from juliecraft.models.catalog import Category  # noqa: F401
from juliecraft.models.inventory import Product  # noqa: F401
from juliecraft.models.orders import Order, OrderItem  # noqa: F401
from juliecraft.models.cart import UserCart  # noqa: F401
from juliecraft.models.notifications import Notification  # noqa: F401
from juliecraft.models.content import HomepageSection, FooterContent  # noqa: F401
