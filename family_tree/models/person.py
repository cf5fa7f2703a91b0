import uuid
from datetime import datetime

from sqlalchemy import Column, Date, DateTime, JSON, String

from family_tree.database import Base


class Person(Base):
    """
    One family member, owned by a user.

    parent_id / spouse_id are plain strings, not foreign keys: records
    may point at people that no longer exist and the tree copes.
    """
    __tablename__ = "people"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)

    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)

    date_of_birth = Column(Date, nullable=True)
    date_of_death = Column(Date, nullable=True)
    marriage_date = Column(Date, nullable=True)

    profile_picture = Column(String, nullable=True)

    parent_id = Column(String, nullable=True, index=True)
    spouse_id = Column(String, nullable=True)

    # [{name, date, description}] as stored by the form
    special_occasions = Column(JSON, nullable=True, default=list)

    created_at = Column(DateTime, default=datetime.utcnow)
