"""Shared SQLAlchemy metadata for the transcript tables.

Students, Courses and StudentCourses all register on this single MetaData
instance so that setup and Alembic see the same table definitions.
"""

from sqlalchemy import MetaData

metadata = MetaData()
