from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, func
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class User(Base):
    __tablename__ = 'user'

    id = Column(String(16), primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    registered_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Link(Base):
    __tablename__ = 'link'

    id = Column(Integer, primary_key=True, index=True)
    short_code = Column(String, unique=True, nullable=False, index=True)
    long_url = Column(String, nullable=False)
    owner_id = Column(String(16), ForeignKey("user.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    visit_count = Column(Integer, default=0, nullable=False)
    unique_visitor_count = Column(Integer, default=0, nullable=False)

    visits = relationship(
        "Visit",
        order_by="Visit.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class Visit(Base):
    __tablename__ = 'visit'

    id = Column(Integer, primary_key=True, index=True)
    link_id = Column(Integer, ForeignKey("link.id"), nullable=False, index=True)
    visitor_id = Column(String(16), nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False)
