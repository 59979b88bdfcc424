"""
Domains package for organizing business logic into clear, separated modules.

- companies: Company records, SEC EDGAR imports and fundable amount calculations
"""
