"""Registration intake service: stores form submissions and exports them as CSV and XLSX"""

__version__ = "1.0.0"
