"""
Academic website builder: loads the personal, publication, course and project
JSON documents and populates the site template with them.
"""

__version__ = "1.0.0"
