import logging
import re
from imagestore.errors import ValidationFailed
from imagestore.extensions import db
from imagestore.models.user import User

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")
MIN_PASSWORD_LENGTH = 8


def normalize_email(email):
    return (email or "").strip().lower()


def register_user(name, email, password):
    """Create an account after validating the form fields."""
    name = (name or "").strip()
    email = normalize_email(email)
    password = password or ""

    errors = {}
    if not name:
        errors["name"] = ["The name field is required."]
    elif len(name) > 255:
        errors["name"] = ["The name may not be greater than 255 characters."]
    if not EMAIL_PATTERN.fullmatch(email):
        errors["email"] = ["The email must be a valid email address."]
    elif User.query.filter_by(email=email).first():
        errors["email"] = ["The email has already been taken."]
    if len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = [
            f"The password must be at least {MIN_PASSWORD_LENGTH} characters."
        ]
    if errors:
        raise ValidationFailed(errors)

    user = User(name=name, email=email)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    logger.info("Registered user %s", user.id)
    return user


def authenticate(email, password):
    """Return the matching user, or None when the credentials are wrong."""
    user = User.query.filter_by(email=normalize_email(email)).first()
    if not user or not user.check_password(password or ""):
        return None
    return user
