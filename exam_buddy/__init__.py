"""
Exam Buddy: chat with your course material.
"""

__version__ = "1.0.0"
