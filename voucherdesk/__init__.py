"""
voucherdesk - commendation tracking and café voucher issuance.

Components:
- models: Student and Voucher records
- policy: eligibility threshold and commendation debit
- roster: student roster transitions (adjust, lookup)
- ledger: voucher log transitions (prepend, toggle redeemed)
- issuance: the coordinated issue-voucher transaction
- desk: persistence-backed shell composing the above
"""

__version__ = "0.3.0"
