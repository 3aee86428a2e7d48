from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from devcamper.domain.roles import UserRole
from devcamper.infrastructure.db.session import Base


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class User(TimestampMixin, Base):
    __tablename__ = "users"
    __private_fields__ = frozenset({"hashed_password", "reset_password_token", "reset_password_expire"})

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=UserRole.user.value, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    reset_password_token: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    reset_password_expire: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    bootcamps: Mapped[list["Bootcamp"]] = relationship("Bootcamp", back_populates="user", cascade="all, delete-orphan")
    courses: Mapped[list["Course"]] = relationship("Course", back_populates="user", cascade="all, delete-orphan")
    reviews: Mapped[list["Review"]] = relationship("Review", back_populates="user", cascade="all, delete-orphan")


class Bootcamp(TimestampMixin, Base):
    __tablename__ = "bootcamps"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str] = mapped_column(String(255), nullable=False)

    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    formatted_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    street: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    zipcode: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True)

    careers: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    average_rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    average_cost: Mapped[int | None] = mapped_column(Integer, nullable=True)
    photo: Mapped[str] = mapped_column(String(255), nullable=False, default="no-photo.jpg")
    housing: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    job_assistance: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    job_guarantee: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    accept_gi: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    user: Mapped[User] = relationship("User", back_populates="bootcamps")
    courses: Mapped[list["Course"]] = relationship(
        "Course",
        back_populates="bootcamp",
        cascade="all, delete-orphan",
        order_by="Course.id",
    )
    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="bootcamp",
        cascade="all, delete-orphan",
        order_by="Review.id",
    )


class Course(TimestampMixin, Base):
    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    bootcamp_id: Mapped[int] = mapped_column(ForeignKey("bootcamps.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    weeks: Mapped[str] = mapped_column(String(20), nullable=False)
    tuition: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    minimum_skill: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    scholarship_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    bootcamp: Mapped[Bootcamp] = relationship("Bootcamp", back_populates="courses")
    user: Mapped[User] = relationship("User", back_populates="courses")


class Review(TimestampMixin, Base):
    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("bootcamp_id", "user_id", name="uq_review_bootcamp_user"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    bootcamp_id: Mapped[int] = mapped_column(ForeignKey("bootcamps.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    bootcamp: Mapped[Bootcamp] = relationship("Bootcamp", back_populates="reviews")
    user: Mapped[User] = relationship("User", back_populates="reviews")
