"""Authentication service for JWT, password and username handling."""

import re
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import func
from sqlalchemy.orm import Session

from src.config import get_settings
from src.models.user import User

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")

# Paths of the web app that cannot double as profile URLs
RESERVED_USERNAMES = frozenset(
    {
        "admin",
        "api",
        "auth",
        "login",
        "logout",
        "marketplace",
        "notifications",
        "profile",
        "recipe",
        "recipes",
        "settings",
        "signup",
        "yard",
        "chat",
        "about",
        "help",
        "terms",
        "privacy",
        "contact",
        "search",
        "explore",
        "home",
        "spoons",
    }
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def create_access_token(user_id: int, email: str) -> str:
    """Create a JWT access token."""
    expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_expiration_minutes)
    to_encode = {
        "sub": str(user_id),
        "email": email,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate a user by email and password."""
    user = db.query(User).filter(User.email == email).first()
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


def create_user(db: Session, email: str, password: str, name: str | None = None) -> User:
    """Create a new user."""
    hashed_password = get_password_hash(password)
    user = User(email=email, password_hash=hashed_password, name=name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def validate_username(db: Session, username: str, user_id: int | None = None) -> str | None:
    """Return why a username cannot be used, or None when it is available."""
    if len(username) < 3 or len(username) > 20:
        return "Username must be between 3 and 20 characters"
    if not USERNAME_PATTERN.match(username):
        return "Username can only contain letters, numbers, and underscores"
    if username.lower() in RESERVED_USERNAMES:
        return "This username is not available"

    query = db.query(User.id).filter(func.lower(User.username) == username.lower())
    if user_id is not None:
        query = query.filter(User.id != user_id)
    if query.first():
        return "Username is already taken"
    return None


def is_admin(user: User) -> bool:
    return user.email.lower() in settings.admin_email_set
