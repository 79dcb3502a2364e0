"""Small helpers for month keys, money and name ordering."""
