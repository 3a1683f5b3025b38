"""Run Cypress spec files in parallel chunks"""

from cypar.__version__ import __version__


__all__ = ['__version__']
