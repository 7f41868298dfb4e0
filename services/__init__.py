"""
Clinic domain services: stock ledger, sales, day-close, patient numbering, payment plans.
"""
