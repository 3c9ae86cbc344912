"""TechHub — GitHub repository discovery and AI analysis service.

Browses repositories and organizations through the GitHub REST API and
proxies repository and issue-screenshot analyses to an AI gateway.
"""

__version__ = "0.1.0"
