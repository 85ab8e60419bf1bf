from __future__ import annotations

from ..extensions import db


DEFAULT_SETTINGS = {
    "hourly_rate_cents": 2500,
    "currency": "EGP",
    "theme": "white",
    "auto_logout_hours": 10,
    "enable_arabic": False,
}


class AppSettings(db.Model):
    """
    Process-wide settings. Exactly one row (id=1).

    Only hourly_rate_cents feeds billing; the rest is presentation, except
    auto_logout_hours which bounds token lifetime.
    """
    __tablename__ = "app_settings"

    SINGLETON_ID = 1

    id = db.Column(db.Integer, primary_key=True)
    hourly_rate_cents = db.Column(db.Integer, nullable=False, default=DEFAULT_SETTINGS["hourly_rate_cents"])
    currency = db.Column(db.String(8), nullable=False, default=DEFAULT_SETTINGS["currency"])
    theme = db.Column(db.String(32), nullable=False, default=DEFAULT_SETTINGS["theme"])
    auto_logout_hours = db.Column(db.Integer, nullable=False, default=DEFAULT_SETTINGS["auto_logout_hours"])
    enable_arabic = db.Column(db.Boolean, nullable=False, default=DEFAULT_SETTINGS["enable_arabic"])

    updated_at = db.Column(db.DateTime, nullable=True)

    def to_dict(self) -> dict:
        return {
            "hourly_rate_cents": self.hourly_rate_cents,
            "currency": self.currency,
            "theme": self.theme,
            "auto_logout_hours": self.auto_logout_hours,
            "enable_arabic": self.enable_arabic,
        }
