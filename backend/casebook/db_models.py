# Import all models once to ensure SQLAlchemy mapper registry is fully populated.
# Alembic autogenerate and the test fixtures rely on Base.metadata holding every table.

from .users.models import User  # noqa: F401
from .blogs.models import Blog  # noqa: F401
from .case_studies.models import CaseStudy  # noqa: F401
from .content.models import ContentInteraction  # noqa: F401
