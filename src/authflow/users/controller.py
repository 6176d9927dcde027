from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.http import json_body, parse_bool
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container
from ..security.decorators import bearer_required
from .model import UserUpdate


def _require_fields(data: dict, *names: str, message: str) -> None:
    if any(not str(data.get(n) or "").strip() for n in names):
        raise ValidationError(message)


def register(app: Flask, container: Container) -> None:
    login_required = bearer_required(container.tokens, role=Role.USER)
    admin_required = bearer_required(container.tokens, role=Role.ADMIN)

    # -----------------------------
    # Users
    # -----------------------------
    @app.route("/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        data = json_body()
        _require_fields(data, "firstName", "lastName", "email", "password", message="All fields are required")
        user = container.auth_service.register(
            first_name=data["firstName"],
            last_name=data["lastName"],
            email=data["email"],
            password=data["password"],
        )
        return jsonify({"message": "User registered successfully", "user": user.to_dict()}), 201

    @app.route("/auth/verify-email", methods=["POST"], endpoint="auth_verify_email")
    def auth_verify_email():
        data = json_body()
        _require_fields(data, "email", "otp", message="Email and OTP are required")
        container.auth_service.verify_email(email=data["email"], otp=str(data["otp"]))
        return jsonify({"message": "Email verified successfully"}), 200

    @app.route("/auth/resend-otp", methods=["POST"], endpoint="auth_resend_otp")
    def auth_resend_otp():
        data = json_body()
        _require_fields(data, "email", message="Email is required")
        container.auth_service.resend_otp(email=data["email"])
        return jsonify({"message": "OTP sent to your email"}), 200

    @app.route("/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        data = json_body()
        _require_fields(data, "email", "password", message="Email and password are required")
        result = container.auth_service.login(email=data["email"], password=data["password"])
        return jsonify({"message": "Login successful", "user": result.user.to_dict(), "token": result.token}), 200

    @app.route("/auth/profile", methods=["GET"], endpoint="auth_profile")
    @login_required
    def auth_profile():
        user = container.profile_service.get_profile(g.claims.user_id)
        return jsonify({"message": "Profile retrieved successfully", "user": user.to_dict()}), 200

    @app.route("/auth/profile/photo", methods=["POST"], endpoint="auth_profile_photo")
    @login_required
    def auth_profile_photo():
        photo = request.files.get("photo")
        user = container.profile_service.update_profile_photo(
            g.claims.user_id,
            image=photo.read() if photo else None,
            filename=photo.filename if photo else None,
        )
        return jsonify({"message": "Profile photo updated", "user": user.to_dict()}), 200

    # -----------------------------
    # Admins
    # -----------------------------
    @app.route("/admin/register", methods=["POST"], endpoint="admin_register")
    def admin_register():
        data = json_body()
        _require_fields(data, "firstName", "lastName", "email", "password", message="All fields are required")
        admin = container.admin_service.register_admin(
            first_name=data["firstName"],
            last_name=data["lastName"],
            email=data["email"],
            password=data["password"],
        )
        return jsonify({"message": "Admin registered successfully", "admin": admin.to_dict()}), 201

    @app.route("/admin/request-otp", methods=["POST"], endpoint="admin_request_otp")
    def admin_request_otp():
        data = json_body()
        _require_fields(data, "email", message="Email is required")
        container.admin_service.request_admin_login(email=data["email"])
        return jsonify({"message": "OTP sent to your email"}), 200

    @app.route("/admin/verify-otp-login", methods=["POST"], endpoint="admin_verify_otp_login")
    def admin_verify_otp_login():
        data = json_body()
        _require_fields(data, "email", "otp", message="Email and OTP are required")
        result = container.admin_service.complete_admin_login(email=data["email"], otp=str(data["otp"]))
        return jsonify({"message": "Login successful", "admin": result.admin.to_dict(), "token": result.token}), 200

    @app.route("/admin/profile", methods=["GET"], endpoint="admin_profile")
    @admin_required
    def admin_profile():
        admin = container.admin_service.get_admin_profile(g.claims.user_id)
        return jsonify({"message": "Profile retrieved successfully", "admin": admin.to_dict()}), 200

    @app.route("/admin/users/count", methods=["GET"], endpoint="admin_user_count")
    def admin_user_count():
        return jsonify({"totalUsers": container.admin_service.count_users()}), 200

    @app.route("/admin/users", methods=["POST"], endpoint="admin_add_user")
    @admin_required
    def admin_add_user():
        data = json_body()
        _require_fields(
            data,
            "firstName",
            "lastName",
            "email",
            "password",
            message="First name, last name, email, and password are required",
        )
        user = container.admin_service.add_user(
            first_name=data["firstName"],
            last_name=data["lastName"],
            email=data["email"],
            password=data["password"],
            is_verified=parse_bool(data.get("isVerified")),
        )
        return jsonify({"message": "User created successfully", "user": user.to_dict()}), 201

    @app.route("/admin/users/<int:user_id>", methods=["PUT"], endpoint="admin_update_user")
    @admin_required
    def admin_update_user(user_id: int):
        data = json_body()
        is_verified = data.get("isVerified")
        update = UserUpdate(
            first_name=data.get("firstName"),
            last_name=data.get("lastName"),
            email=data.get("email"),
            password=data.get("password"),
            is_verified=parse_bool(is_verified) if is_verified is not None else None,
        )
        user = container.admin_service.update_user(user_id, update)
        return jsonify({"message": "User updated successfully", "user": user.to_dict()}), 200

    @app.route("/admin/users/<int:user_id>", methods=["DELETE"], endpoint="admin_delete_user")
    @admin_required
    def admin_delete_user(user_id: int):
        container.admin_service.delete_user(user_id)
        return jsonify({"message": "User deleted successfully"}), 200
