"""Point of sale: customers, cash register sessions, sales and returns."""
