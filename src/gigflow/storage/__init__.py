"""DuckDB persistence for gigs, bids, and notifications."""
