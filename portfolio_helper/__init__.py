"""Portfolio helper: enrich a table of stock purchases with market data.

Reads a delimited text file of holdings, looks up current prices and dividend
history per symbol, and writes the table back with derived gain columns and a
TOTAL row.
"""

__version__ = "0.1.0"
