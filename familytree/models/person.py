from sqlalchemy import Column, Integer, String, Date, ForeignKey, DateTime, Enum, Boolean
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from familytree.database import Base
import enum

class Gender(str, enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"
    UNKNOWN = "UNKNOWN"

class Person(Base):
    __tablename__ = "people"

    id = Column(Integer, primary_key=True, index=True)
    tree_id = Column(Integer, ForeignKey("trees.id"), nullable=False, index=True)
    first_name = Column(String, nullable=False)
    middle_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    maiden_name = Column(String, nullable=True)
    suffix = Column(String, nullable=True)
    nickname = Column(String, nullable=True)
    gender = Column(Enum(Gender), default=Gender.UNKNOWN, nullable=False)
    birth_date = Column(Date, nullable=True)
    death_date = Column(Date, nullable=True)
    is_living = Column(Boolean, default=True, nullable=False)
    is_public = Column(Boolean, default=False, nullable=False)
    photo_url = Column(String, nullable=True)

    # Weak references into the same tree; cleared before a parent is deleted
    father_id = Column(Integer, ForeignKey("people.id", ondelete="SET NULL"), nullable=True)
    mother_id = Column(Integer, ForeignKey("people.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    tree = relationship("Tree", back_populates="people")
    # undated events last, then by id, on every backend
    events = relationship("Event", back_populates="person", cascade="all, delete-orphan", order_by="[Event.date.is_(None), Event.date, Event.id]")
    notes = relationship("Note", back_populates="person", cascade="all, delete-orphan", order_by="Note.id")
    # spouse rows where this person is on either side
    spouse_links = relationship("Spouse", foreign_keys="Spouse.person_id", back_populates="person", cascade="all, delete-orphan")
    spouse_of_links = relationship("Spouse", foreign_keys="Spouse.spouse_id", back_populates="spouse", cascade="all, delete-orphan")

class Spouse(Base):
    __tablename__ = "spouses"

    id = Column(Integer, primary_key=True, index=True)
    tree_id = Column(Integer, ForeignKey("trees.id"), nullable=False, index=True)
    person_id = Column(Integer, ForeignKey("people.id"), nullable=False)
    spouse_id = Column(Integer, ForeignKey("people.id"), nullable=False)
    marriage_date = Column(Date, nullable=True)
    marriage_location = Column(String, nullable=True)
    divorce_date = Column(Date, nullable=True)
    is_current = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    person = relationship("Person", foreign_keys=[person_id], back_populates="spouse_links")
    spouse = relationship("Person", foreign_keys=[spouse_id], back_populates="spouse_of_links")
