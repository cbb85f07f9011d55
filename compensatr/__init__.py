"""
Compensatr - Carbon Offset Portfolio Selection

Selects carbon offset projects that capture the most CO2 per year within a
budget while meeting unit, continent and term-mix constraints, and reports
the resulting purchase plan and yearly CO2 capture.
"""

__version__ = "0.1.0"
