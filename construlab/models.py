from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base
import enum


class UserRole(str, enum.Enum):
    FREE = "free"
    PRO = "pro"
    ADMIN = "admin"
    BANNED = "banned"


class SubscriptionStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PAST_DUE = "past_due"
    BANNED = "banned"
    TRIAL = "trial"


# DECISION: role and subscription_status are stored as VARCHAR, validated against
# the enums above at the API boundary, so adding a role doesn't need a migration.


class User(Base):
    """Account profile — role, subscription and white-label fields."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=False, default="")
    role = Column(String, default=UserRole.FREE.value)
    subscription_status = Column(String, default=SubscriptionStatus.INACTIVE.value)
    subscription_expiry = Column(DateTime, nullable=True)
    # White-label
    company_name = Column(String, nullable=True)
    company_logo_url = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Deleting a user removes their projects and tokens
    auth_tokens = relationship("AuthToken", back_populates="user", cascade="all, delete-orphan")
    projects = relationship("Project", back_populates="owner", cascade="all, delete-orphan")


class AuthToken(Base):
    """JWT refresh token storage — access tokens are stateless."""
    __tablename__ = "auth_tokens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    token_hash = Column(String, nullable=False)
    token_type = Column(String, default="refresh")
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="auth_tokens")


class Project(Base):
    """Saved drawing. `data` holds the geometry payload (points, scale, is_closed, unit_system)."""
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    owner = relationship("User", back_populates="projects")


class MaterialPreset(Base):
    """Named set of per-m³ ratios used as multipliers by the calculators."""
    __tablename__ = "material_presets"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    cement_kg_per_m3 = Column(Float, nullable=False)
    sand_m3_per_m3 = Column(Float, nullable=False)
    gravel_m3_per_m3 = Column(Float, nullable=False)
    water_l_per_m3 = Column(Float, nullable=False)
    steel_kg_per_m3_min = Column(Float, nullable=False)
    steel_kg_per_m3_max = Column(Float, nullable=False)
    cost_concrete_per_m3 = Column(Float, default=0.0)
    cost_steel_per_kg = Column(Float, default=0.0)
    notes = Column(String)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
