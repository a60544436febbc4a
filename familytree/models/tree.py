from sqlalchemy import Column, Integer, ForeignKey, DateTime, Enum, String, Boolean, Text, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from familytree.database import Base
import enum

class AccessLevel(str, enum.Enum):
    VIEW = "VIEW"
    EDIT = "EDIT"
    ADMIN = "ADMIN"

class Tree(Base):
    __tablename__ = "trees"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    is_public = Column(Boolean, default=False, nullable=False)
    hide_living = Column(Boolean, default=True, nullable=False)
    share_token = Column(String, unique=True, nullable=True, index=True)
    language = Column(String, default="en", nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    owner = relationship("User", backref="owned_trees")
    people = relationship("Person", back_populates="tree", cascade="all, delete-orphan", order_by="Person.id")
    access_list = relationship("TreeAccess", back_populates="tree", cascade="all, delete-orphan")

class TreeAccess(Base):
    __tablename__ = "tree_access"
    __table_args__ = (UniqueConstraint("tree_id", "user_email", name="uq_tree_access_tree_email"),)

    id = Column(Integer, primary_key=True, index=True)
    tree_id = Column(Integer, ForeignKey("trees.id"), nullable=False)
    user_email = Column(String, nullable=False)
    access_level = Column(Enum(AccessLevel), default=AccessLevel.VIEW, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    tree = relationship("Tree", back_populates="access_list")
