from sqlalchemy import Column, Integer, String
from database import Base


class AssetType(Base):
    __tablename__ = "asset_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(16), nullable=False, unique=True)  # e.g. USD
    description_short = Column(String(50), nullable=True)
    description_long = Column(String(200), nullable=True)
    symbol = Column(String(8), nullable=True)
