import uuid
from sqlalchemy import Column, Uuid, String, DateTime, func, Text, Integer, Float, JSON
from sqlalchemy.orm import relationship
from showxpress.db.session import Base

class Movie(Base):
    """Local copy of a TMDB movie, cached the first time a show is scheduled for it."""

    __tablename__ = "movies"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tmdb_id = Column(String(50), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    overview = Column(Text, nullable=True)
    backdrop_path = Column(String(255), nullable=True)
    poster_path = Column(String(255), nullable=True)
    release_date = Column(String(20), nullable=True)
    runtime = Column(Integer, nullable=True) # minutes
    vote_average = Column(Float, default=0.0)
    vote_count = Column(Integer, default=0)
    genres = Column(JSON, nullable=True) # [{"id": 28, "name": "Action"}, ...]
    original_language = Column(String(10), nullable=True)
    tagline = Column(String(500), nullable=True)
    cast = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    # Relationships
    shows = relationship("Show", back_populates="movie")
