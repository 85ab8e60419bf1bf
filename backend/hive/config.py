# backend/hive/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/hive.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///hive.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Day boundaries for the revenue summary are computed in this zone
    BUSINESS_TIMEZONE = os.environ.get("BUSINESS_TIMEZONE", "UTC")

    # Long stays are billed a flat amount instead of the hourly rate
    TIME_CAP_HOURS = int(os.environ.get("TIME_CAP_HOURS", "4"))
    TIME_CAP_CENTS = int(os.environ.get("TIME_CAP_CENTS", "10000"))
