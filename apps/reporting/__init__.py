"""
Reporting app: dashboard snapshot, VAT and payment-method breakdowns and
period summaries, computed from stored transactions on every request.
"""
