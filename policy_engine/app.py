# policy_engine/app.py
"""Application factory for the password policy engine"""
import logging

import click
from flask import Flask, jsonify

from policy_engine.config import config, policy_from_config
from policy_engine.exceptions import PolicyEngineError
from policy_engine.extensions import ENGINE_EXTENSION_KEY, db
from policy_engine.services.password_policy import AuthMode, PasswordPolicyEngine
from policy_engine.utils.security import build_fingerprinter
from policy_engine.utils.timeutils import utc_now

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'


def create_app(config_name='default', clock=None):
    """Create and configure Flask application"""
    app = Flask(__name__)

    # Instantiated so property-based settings resolve
    app.config.from_object(config[config_name]())

    configure_logging(app)

    from policy_engine import models  # noqa: F401 - registers tables

    db.init_app(app)
    app.extensions[ENGINE_EXTENSION_KEY] = PasswordPolicyEngine(
        policy=policy_from_config(app.config),
        fingerprinter=build_fingerprinter(app.config),
        clock=clock or utc_now
    )

    from policy_engine.controllers.auth_controller import auth_bp
    from policy_engine.controllers.password_controller import password_bp

    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(password_bp, url_prefix='/password')

    register_error_handlers(app)
    register_commands(app)

    with app.app_context():
        db.create_all()

    return app


def configure_logging(app):
    """Attach one stream handler to the package logger at LOG_LEVEL"""
    level = str(app.config.get('LOG_LEVEL', 'INFO')).upper()
    package_logger = logging.getLogger('policy_engine')
    package_logger.setLevel(level)
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
    app.logger.setLevel(level)


def register_error_handlers(app):
    """Register error handlers"""
    @app.errorhandler(PolicyEngineError)
    def policy_engine_error(error):
        if error.status_code >= 500:
            app.logger.error(f'{error.error_code}: {error}')
            db.session.rollback()
        return jsonify({'error': error.error_code, 'message': str(error)}), error.status_code

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'not_found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return jsonify({'error': 'internal_error'}), 500


def register_commands(app):
    """Flask CLI commands"""
    from policy_engine.services import account_service

    @app.cli.command('init-db')
    def init_db():
        """Initialize database tables"""
        db.create_all()
        click.echo('Database initialized successfully')

    @app.cli.command('create-user')
    @click.argument('username')
    @click.option('--federated', is_flag=True, help='Account signs in through an external identity provider')
    def create_user(username, federated):
        """Create an account and record its first password"""
        if federated:
            user, result = account_service.create_account(username, auth_mode=AuthMode.FEDERATED)
        else:
            password = click.prompt('Password', hide_input=True, confirmation_prompt=True)
            user, result = account_service.create_account(username, password)
        if user is None:
            raise click.ClickException(f'{result.verdict.value}: {", ".join(sorted(result.reasons))}')
        click.echo(f'Created {user.auth_mode} account {user.username} (id {user.id})')

    @app.cli.command('check-password')
    def check_password():
        """Evaluate a password against the strength rules"""
        engine = app.extensions[ENGINE_EXTENSION_KEY]
        password = click.prompt('Password', hide_input=True)
        result = engine.validate(password, ())
        if result.is_accepted:
            click.echo('accepted')
            return
        click.echo(f'{result.verdict.value}: {", ".join(sorted(result.reasons))}')
        for requirement in engine.strength_checker.requirements():
            click.echo(f'  - {requirement}')
        click.get_current_context().exit(1)

    @app.cli.command('rotation-report')
    def rotation_report():
        """List accounts whose password must be rotated"""
        overdue = account_service.accounts_needing_rotation()
        if not overdue:
            click.echo('No accounts need rotation')
            return
        for user, status in overdue:
            click.echo(f'{user.username}\t{status.value}')
