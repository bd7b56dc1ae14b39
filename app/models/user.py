"""
Model: User
Owner of uploaded replays; admins may moderate and download them
"""

from db import db
from flask_login import UserMixin


class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user = db.Column(db.String(100), unique=True)
    admin_access = db.Column(db.Boolean, default=False)

    @property
    def is_admin(self):
        return bool(self.admin_access)
