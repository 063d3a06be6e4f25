"""
SQLAlchemy Database Models for FocusFit

Provides persistent storage for:
- User profiles (hurdles, dietary restrictions, preferences)
- Weekly focus plans, stored as JSON documents
- Dopamine wins recorded when tasks are completed
"""

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRecord(Base):
    """
    User profile document.

    Attributes:
        id: User identifier from the auth provider
        email: Account email (guests get a placeholder)
        adhd_hurdles: List of hurdle values
        dietary_restrictions: List of restriction values, or ["none"]
        current_plan_id: Id of the plan shown on the dashboard
        preferences: Haptics/confetti/voice logging flags
        created_at: Profile creation timestamp
        updated_at: Last modification timestamp
    """

    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, nullable=False)
    adhd_hurdles = Column(JSON, nullable=False, default=list)
    dietary_restrictions = Column(JSON, nullable=False, default=list)
    current_plan_id = Column(String, nullable=True)
    preferences = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def __repr__(self):
        return f"<UserRecord(id='{self.id}', current_plan_id='{self.current_plan_id}')>"


class FocusPlanRecord(Base):
    """
    Saved weekly plan.

    Attributes:
        id: Plan identifier (hex uuid)
        user_id: Owning user
        week_number: Week number stamped on the plan
        provenance: "model_generated" or "fallback"
        plan_data: Full WeeklyPlan in its camelCase JSON shape
        created_at: When the plan was saved
        updated_at: Last task-status change
    """

    __tablename__ = "focus_plans"

    id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    week_number = Column(Integer, nullable=False, default=1)
    provenance = Column(String, nullable=False)
    plan_data = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def __repr__(self):
        return f"<FocusPlanRecord(id='{self.id}', user_id='{self.user_id}', week={self.week_number})>"


class DopamineWinRecord(Base):
    """
    A completion event celebrated in the app.

    Attributes:
        id: Primary key
        user_id: Owning user (not a foreign key, so wins survive profile moves)
        win_type: "workout", "meal", "focus" or "milestone"
        title: Short title, usually the task title
        description: Human-readable description
        timestamp: When the win happened
    """

    __tablename__ = "dopamine_wins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False, index=True)
    win_type = Column(String, nullable=False)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    timestamp = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<DopamineWinRecord(id={self.id}, type='{self.win_type}', title='{self.title}')>"


# Database connection and session management

def get_engine(database_url: str = "sqlite:///focusfit.db"):
    """
    Create SQLAlchemy engine.

    In-memory SQLite URLs share one connection so every session sees the
    same database.

    Args:
        database_url: Database connection string (default: SQLite file)

    Returns:
        SQLAlchemy Engine instance
    """
    if database_url.startswith("sqlite") and ":memory:" in database_url:
        return create_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url, echo=False, connect_args={"check_same_thread": False}
        )
    return create_engine(database_url, echo=False)


def get_session_factory(engine):
    """
    Create session factory.

    Args:
        engine: SQLAlchemy Engine instance

    Returns:
        Session factory (sessionmaker)
    """
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def init_database(database_url: str = "sqlite:///focusfit.db"):
    """
    Initialize database and create all tables.

    Args:
        database_url: Database connection string

    Returns:
        Session factory bound to the initialized engine
    """
    engine = get_engine(database_url)
    Base.metadata.create_all(engine)
    return get_session_factory(engine)
