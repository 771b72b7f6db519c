import uuid
from sqlalchemy import Column, Uuid, String, DateTime, func
from showxpress.db.session import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    clerk_id = Column(String(255), unique=True, nullable=False, index=True) # identity provider id
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    image = Column(String, default="")
    role = Column(String(20), default="user") # user, admin
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
