# Campus Gate — Database Models
# Import all models here for SQLAlchemy discovery

from app.models.user import User          # noqa
from app.models.visitor import Visitor    # noqa
from app.models.student import Student    # noqa
