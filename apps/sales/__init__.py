"""
Sales app: VAT calculation, draft sale building and atomic transaction commit.
"""
