"""Version of the buildversion tool itself."""

__version__ = "1.0.0"
PROJECT_URL = "https://github.com/Misterblue/BuildVersion"
