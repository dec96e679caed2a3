"""
ORM model registry.

Importing this package registers every mapped class on Base.metadata,
which create_all() and the Alembic environment rely on.
"""

from codigohub.models.user import User  # noqa: F401
from codigohub.models.codigo import Codigo  # noqa: F401
from codigohub.models.collection import Collection, ColeccionCodigo  # noqa: F401
from codigohub.models.category import Category, CodigoCategoria  # noqa: F401
from codigohub.models.subscription import Subscription  # noqa: F401
