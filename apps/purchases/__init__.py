"""
Purchases app.

Merchandise purchases that feed store inventory, operating expenses, and
the accounts payable (installments) both of them generate.
"""
