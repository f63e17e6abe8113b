from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class Image(Base):
    """Category-owned media row from before properties existed."""

    __tablename__ = "images"

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(
        Integer,
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    filename = Column(String(500), nullable=True)  # relative to UPLOAD_PATH
    original_name = Column(String(500), nullable=True)
    title = Column(String(200), nullable=True)
    title_ar = Column(String(200), nullable=True)
    video_url = Column(String(1000), nullable=True)
    file_size = Column(Integer, nullable=True)
    mime_type = Column(String(100), nullable=True)
    image_url = Column(String(1000), nullable=True)  # externally hosted
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    category = relationship("Category", back_populates="images")
