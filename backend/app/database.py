"""Database models and setup for the country pricing table."""

from sqlalchemy import create_engine, Column, Integer, Float, String
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from typing import Dict, List, Optional
import logging
import os

logger = logging.getLogger(__name__)

Base = declarative_base()

# (code, name, currency, symbol, services, price multiplier)
DEFAULT_COUNTRIES = [
    ("US", "United States", "USD", "$", "uber,bolt", 1.0),
    ("GB", "United Kingdom", "GBP", "£", "uber,bolt", 0.8),
    ("DE", "Germany", "EUR", "€", "uber,bolt", 0.9),
    ("FR", "France", "EUR", "€", "uber,bolt", 0.95),
    ("CA", "Canada", "CAD", "C$", "uber,bolt", 0.75),
    ("AU", "Australia", "AUD", "A$", "uber,bolt", 0.7),
    ("IN", "India", "INR", "₹", "uber,bolt,yango", 0.25),
    ("BR", "Brazil", "BRL", "R$", "uber,bolt", 0.35),
    ("RU", "Russia", "RUB", "₽", "yango,bolt", 0.4),
    ("ZA", "South Africa", "ZAR", "R", "uber,bolt", 0.3),
]


class CountryConfigDB(Base):
    """Database model for storing per-country pricing."""
    __tablename__ = "country_configs"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(8), unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
    currency = Column(String(3), nullable=False)
    currency_symbol = Column(String, nullable=False)
    # Comma separated provider names
    services = Column(String, nullable=False)
    price_multiplier = Column(Float, nullable=False)

    def __repr__(self):
        return f"<CountryConfig(code={self.code}, currency={self.currency}, multiplier={self.price_multiplier})>"

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "name": self.name,
            "currency": self.currency,
            "currency_symbol": self.currency_symbol,
            "services": [s for s in self.services.split(",") if s],
            "price_multiplier": self.price_multiplier,
        }


def default_country_rows() -> List[dict]:
    """Built-in country table as plain dicts."""
    return [
        {
            "code": code,
            "name": name,
            "currency": currency,
            "currency_symbol": symbol,
            "services": services.split(","),
            "price_multiplier": multiplier,
        }
        for code, name, currency, symbol, services, multiplier in DEFAULT_COUNTRIES
    ]


class DatabaseManager:
    """Manager class for database operations."""

    def __init__(self, database_url: Optional[str] = None):
        """Initialize database connection."""
        self.database_url = database_url or os.getenv(
            "DATABASE_URL",
            "sqlite:///./ridecompare.db"
        )

        connect_args = {"check_same_thread": False} if "sqlite" in self.database_url else {}
        self.engine = create_engine(self.database_url, connect_args=connect_args)

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

        Base.metadata.create_all(bind=self.engine)

    def get_session(self) -> Session:
        """Get a new database session."""
        return self.SessionLocal()

    def init_default_countries(self) -> int:
        """Seed the country table if it is empty. Returns the number of rows added."""
        session = self.get_session()
        try:
            if session.query(CountryConfigDB).count() > 0:
                return 0

            for code, name, currency, symbol, services, multiplier in DEFAULT_COUNTRIES:
                session.add(CountryConfigDB(
                    code=code,
                    name=name,
                    currency=currency,
                    currency_symbol=symbol,
                    services=services,
                    price_multiplier=multiplier,
                ))
            session.commit()
            logger.info("Initialized %d default country configs", len(DEFAULT_COUNTRIES))
            return len(DEFAULT_COUNTRIES)
        finally:
            session.close()

    def reset_countries(self) -> int:
        """Drop all country rows and reseed the defaults."""
        session = self.get_session()
        try:
            session.query(CountryConfigDB).delete()
            session.commit()
        finally:
            session.close()
        return self.init_default_countries()

    def get_all_countries(self) -> Dict[str, dict]:
        """Retrieve all country configs keyed by code."""
        session = self.get_session()
        try:
            rows = session.query(CountryConfigDB).order_by(CountryConfigDB.id).all()
            return {row.code: row.to_dict() for row in rows}
        finally:
            session.close()

    def get_country(self, code: str) -> Optional[dict]:
        """Get a single country config, or None if the code is unknown."""
        session = self.get_session()
        try:
            row = session.query(CountryConfigDB).filter_by(code=code.upper()).first()
            return row.to_dict() if row else None
        finally:
            session.close()

    def update_price_multiplier(self, code: str, multiplier: float) -> Optional[dict]:
        """Change the price multiplier of an existing country."""
        if multiplier <= 0:
            raise ValueError("Price multiplier must be positive")

        session = self.get_session()
        try:
            row = session.query(CountryConfigDB).filter_by(code=code.upper()).first()
            if row is None:
                return None
            row.price_multiplier = multiplier
            session.commit()
            return row.to_dict()
        finally:
            session.close()


# Singleton instance
_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    """Get singleton database manager instance."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
        _db_manager.init_default_countries()
    return _db_manager
