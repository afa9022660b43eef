"""Registration, login and logout."""
import logging
from flask import redirect, request, url_for

from imagestore.auth import login_user, logout_user
from imagestore.blueprints.auth import auth_bp
from imagestore.errors import Unauthenticated, ValidationFailed
from imagestore.services import user_service

logger = logging.getLogger(__name__)


@auth_bp.route("/register", methods=["POST"])
def register():
    user = user_service.register_user(
        name=request.form.get("name"),
        email=request.form.get("email"),
        password=request.form.get("password"),
    )
    login_user(user)
    return redirect(url_for("images.index"), code=303)


@auth_bp.route("/login", methods=["POST"])
def login():
    email = request.form.get("email", "")
    password = request.form.get("password", "")
    if not email or not password:
        errors = {}
        if not email:
            errors["email"] = ["The email field is required."]
        if not password:
            errors["password"] = ["The password field is required."]
        raise ValidationFailed(errors)

    user = user_service.authenticate(email, password)
    if not user:
        logger.info("Failed login for %s", email)
        raise Unauthenticated("These credentials do not match our records.")

    login_user(user)
    return redirect(url_for("images.index"), code=303)


@auth_bp.route("/logout", methods=["POST"])
def logout():
    logout_user()
    return redirect(url_for("home"), code=303)
