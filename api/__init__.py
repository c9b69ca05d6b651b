"""HTTP trigger surface for the monthly coupon engine."""

__version__ = "0.1.0"
