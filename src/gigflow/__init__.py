"""GigFlow - freelance marketplace backend: gigs, bids, and the hire transaction."""

__version__ = "0.1.0"
