# policy_engine/controllers/__init__.py
"""HTTP blueprints"""
from .auth_controller import auth_bp
from .password_controller import password_bp

__all__ = ['auth_bp', 'password_bp']
