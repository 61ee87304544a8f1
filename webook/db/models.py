"""SQLAlchemy models."""
from __future__ import annotations

from sqlalchemy import BigInteger, Column, Integer, String

from .session import Base


class User(Base):
    """Storage row for an account. Times are epoch milliseconds."""

    __tablename__ = "users"

    # BigInteger ids do not autoincrement on SQLite, Integer is used there.
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    # NULL rather than "" so many accounts can lack an e-mail/phone/open-id.
    email = Column(String(255), unique=True, nullable=True)
    password = Column(String(255), nullable=False, default="")
    nickname = Column(String(128), nullable=False, default="")
    # UTC midnight of the day; NULL when unset, so 0 stays 1970-01-01.
    birthday = Column(BigInteger, nullable=True)
    about_me = Column(String(4096), nullable=False, default="")
    phone = Column(String(32), unique=True, nullable=True)
    ctime = Column(BigInteger, nullable=False, default=0)
    utime = Column(BigInteger, nullable=False, default=0)
    wechat_open_id = Column(String(255), unique=True, nullable=True)
    wechat_union_id = Column(String(255), nullable=True)
