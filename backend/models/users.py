from database import Base
from sqlalchemy import Column, String, Boolean


class User(Base):
    __tablename__ = 'users'

    # Subject identifier issued by the identity provider
    id = Column(String(64), primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, nullable=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    is_active = Column(Boolean, default=True)

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, is_active={self.is_active})>"
