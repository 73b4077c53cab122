"""
tender_validation — Required-document validation for tender bids

Checks whether a bid's uploaded documents (file names and, when
available, extracted PDF text) satisfy the tender's required document
list, and reports matched, missing and duplicate documents.
"""

__version__ = "1.0.0"
__author__ = "TenderValidation"
