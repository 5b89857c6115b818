"""Pricing models: Black-Scholes closed forms and binomial lattices."""
