"""NutriPal: nutrition tracking with an AI chat coach."""

__version__ = '0.1.0'
