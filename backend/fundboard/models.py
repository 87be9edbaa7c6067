from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from .database import Base
import datetime

STATE_ROW_ID = 1

# largest value an INTEGER column holds on postgres; amount and goal stay within it
MAX_INTEGER = 2 ** 31 - 1


def utcnow():
    return datetime.datetime.now(datetime.timezone.utc)


class Donation(Base):
    """
    One completed pledge. Never updated or deleted by the app; an operator
    deleting a row out-of-band releases its numbers through the claim cascade.
    """
    __tablename__ = 'donations'
    id = Column(Integer, primary_key=True, index=True)
    amount = Column(Integer, nullable=False)
    numbers = Column(Text, nullable=False)  # comma-joined, submission order: "3,7"
    method = Column(String(20), nullable=False)
    donor_name = Column(Text, nullable=False)
    donor_phone = Column(Text, nullable=False)
    donor_address = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class NumberClaim(Base):
    """One row per claimed number; the primary key makes each number claimable once."""
    __tablename__ = 'number_claims'
    number = Column(Integer, primary_key=True, autoincrement=False)
    donation_id = Column(Integer, ForeignKey('donations.id', ondelete='CASCADE'), nullable=False, index=True)


class FundraiserState(Base):
    """Singleton settings row (id=1) holding goal and bio."""
    __tablename__ = 'fundraiser_state'
    id = Column(Integer, primary_key=True, default=STATE_ROW_ID)
    goal = Column(Integer, nullable=False)
    bio = Column(Text, nullable=False, default='')
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
