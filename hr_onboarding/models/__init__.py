"""
Consultant Onboarding Engine
Shared SQLAlchemy instance for all models.

Usage:
    from hr_onboarding.models import db
"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
