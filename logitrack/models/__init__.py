# LogiTrack database models
# Import all models here for SQLAlchemy discovery

from logitrack.models.document import Document       # noqa
from logitrack.models.unique_key import UniqueKey    # noqa
