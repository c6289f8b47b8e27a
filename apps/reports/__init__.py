"""Read-only reports: seller performance, dashboard, sales and financial results."""
