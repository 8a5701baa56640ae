"""Income tax calculator for salaries paid in multiple currencies."""

__version__ = "0.1.0"
