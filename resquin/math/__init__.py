"""
Indicator computations for resquin.
"""

from resquin.math.indicators import resp_styles, resp_distributions
from resquin.math.response_table import ResponseTable
