"""HTTP layer for the portfolio returns service."""
