"""
------------------------------------------------------------------------------
Project:        ShopFlux
File:           shopflux/__init__.py
Version:        1.0.0
Producer:       ShopFlux Team
Generator:      Antigravity
Description:    Analytics and reporting engine for ShopFlux. Turns sales,
                purchase, inventory, customer and expense collections into
                report rows, chart payloads, metrics and exports.
------------------------------------------------------------------------------
"""

__version__ = "1.0.0"
