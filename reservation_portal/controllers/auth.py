"""Authentication blueprint handling registration, login, and logout."""

from __future__ import annotations

from functools import wraps
from typing import Callable

from flask import Blueprint, abort, jsonify
from flask_login import current_user, login_required, login_user, logout_user
from flask_wtf import FlaskForm
from wtforms import PasswordField, SelectField, StringField, SubmitField
from wtforms.validators import Email, EqualTo, InputRequired, Length, Optional

from ..data_access import users_dao
from ..models.entities import Role
from .serializers import form_errors, user_payload

bp = Blueprint("auth", __name__, url_prefix="/auth")


class RegistrationForm(FlaskForm):
    """Registration form for students and faculty."""

    full_name = StringField("Full Name", validators=[InputRequired(), Length(max=120)])
    email = StringField("Email", validators=[InputRequired(), Email(), Length(max=255)])
    password = PasswordField("Password", validators=[InputRequired(), Length(min=8, max=128)])
    confirm_password = PasswordField(
        "Confirm Password",
        validators=[InputRequired(), EqualTo("password", message="Passwords must match.")],
    )
    role = SelectField(
        "Role",
        choices=[(role.value, role.value.title()) for role in users_dao.SELF_SERVICE_ROLES],
        validators=[InputRequired()],
        default=Role.STUDENT.value,
    )
    nim_nip = StringField("NIM / NIP", validators=[Optional(), Length(max=30)])
    phone = StringField("Phone", validators=[Optional(), Length(max=30)])
    submit = SubmitField("Create account")


class LoginForm(FlaskForm):
    """Basic credential form."""

    email = StringField("Email", validators=[InputRequired(), Email()])
    password = PasswordField("Password", validators=[InputRequired()])
    submit = SubmitField("Sign in")


def role_required(*roles: Role) -> Callable:
    """Decorator enforcing role-based access control."""

    def decorator(view: Callable) -> Callable:
        @wraps(view)
        @login_required
        def wrapped(*args, **kwargs):
            if roles and not current_user.has_role(roles):
                abort(403)
            return view(*args, **kwargs)

        return wrapped

    return decorator


@bp.route("/register", methods=["POST"])
def register():
    """Handle new user registration."""

    if current_user.is_authenticated:
        return jsonify({"message": "You are already signed in.", "user": user_payload(current_user)})

    form = RegistrationForm()
    if not form.validate_on_submit():
        return form_errors(form)
    if users_dao.get_user_by_email(form.email.data):
        form.email.errors.append("An account with that email already exists.")
        return form_errors(form)

    user = users_dao.create_user(
        full_name=form.full_name.data,
        email=form.email.data,
        password_hash=users_dao.hash_password(form.password.data),
        role=form.role.data,
        nim_nip=form.nim_nip.data or None,
        phone=form.phone.data or None,
    )
    login_user(user)
    return jsonify({"message": "Account created.", "user": user_payload(user)}), 201


@bp.route("/login", methods=["POST"])
def login():
    """Authenticate an existing user."""

    form = LoginForm()
    if not form.validate_on_submit():
        return form_errors(form)

    user = users_dao.get_user_by_email(form.email.data)
    if not user or not users_dao.verify_password(user.password_hash, form.password.data):
        return jsonify({"error": "invalid_credentials", "message": "Invalid credentials. Please try again."}), 401
    if not user.is_active:
        return (
            jsonify({"error": "inactive_account", "message": "This account has been deactivated. Contact support."}),
            403,
        )
    login_user(user)
    return jsonify({"message": "Signed in successfully.", "user": user_payload(user)})


@bp.route("/logout")
@login_required
def logout():
    """Log out the current user."""

    logout_user()
    return jsonify({"message": "You have been signed out."})


@bp.route("/me")
@login_required
def me():
    return jsonify(user_payload(current_user))
