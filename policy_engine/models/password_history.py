# policy_engine/models/password_history.py
"""Password History model
Stores fingerprints of previously accepted passwords (never plaintext)
"""
from policy_engine.extensions import db
from policy_engine.services.history_store import HistoryEntry
from policy_engine.utils.security import PasswordFingerprint
from policy_engine.utils.timeutils import utc_now


class PasswordHistory(db.Model):
    """One accepted password of a user, kept for reuse checks and rotation age"""
    __tablename__ = 'password_history'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    algorithm = db.Column(db.String(64), nullable=False)
    salt = db.Column(db.String(256), nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)

    def __repr__(self):
        return f'<PasswordHistory user_id={self.user_id} created_at={self.created_at}>'

    @property
    def fingerprint(self):
        return PasswordFingerprint(self.algorithm, self.salt, self.password_hash)

    def to_entry(self):
        return HistoryEntry(self.fingerprint, self.created_at)

    @classmethod
    def from_entry(cls, user_id, entry):
        return cls(
            user_id=user_id,
            algorithm=entry.fingerprint.algorithm,
            salt=entry.fingerprint.salt,
            password_hash=entry.fingerprint.digest,
            created_at=entry.created_at
        )
