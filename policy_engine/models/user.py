# policy_engine/models/user.py
"""User account model"""
from policy_engine.extensions import db
from policy_engine.services.password_policy import AuthMode
from policy_engine.utils.security import PasswordFingerprint
from policy_engine.utils.timeutils import utc_now


class User(db.Model):
    """Account record; auth_mode says whether a local password applies at all"""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    auth_mode = db.Column(db.String(20), nullable=False, default=AuthMode.LOCAL_PASSWORD.value)

    # Current credential; empty for federated accounts
    password_algorithm = db.Column(db.String(64), nullable=True)
    password_hash = db.Column(db.String(256), nullable=True)
    salt = db.Column(db.String(256), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    is_active = db.Column(db.Boolean, default=True)

    password_histories = db.relationship('PasswordHistory', backref='user',
                                         lazy=True, cascade='all, delete-orphan',
                                         order_by='PasswordHistory.created_at')

    def __repr__(self):
        return f'<User {self.username}>'

    @property
    def mode(self):
        return AuthMode(self.auth_mode)

    @property
    def is_federated(self):
        return self.mode is AuthMode.FEDERATED

    @property
    def fingerprint(self):
        if self.password_hash is None:
            return None
        return PasswordFingerprint(self.password_algorithm, self.salt, self.password_hash)

    def set_fingerprint(self, fingerprint):
        self.password_algorithm = fingerprint.algorithm
        self.salt = fingerprint.salt
        self.password_hash = fingerprint.digest

    def history(self):
        """Password history as the engine's immutable tuple, oldest first"""
        return tuple(row.to_entry() for row in self.password_histories)
