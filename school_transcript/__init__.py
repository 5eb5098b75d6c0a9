"""School transcript schema: Students, Courses and their StudentCourses junction."""

__version__ = "1.0.0"
