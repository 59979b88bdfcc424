"""
Companies Domain

Stores companies and their SEC income records, imports them from SEC EDGAR and
derives the standard and special fundable amounts for each company.
"""
