from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Import models so Alembic and create_all can discover metadata
from linkgate.models import audit, download_link  # noqa: E402,F401
