"""Fundable amount service: SEC EDGAR income imports and fundable amount calculations."""
