"""ReviewRoster core library: models, storage, selection and services."""
from . import config
from . import errors
from . import models
from . import routing
from . import schemas
from . import services
from . import storage

__all__ = [
    "config",
    "errors",
    "models",
    "routing",
    "schemas",
    "services",
    "storage",
]
