"""Test package for DocuChats.

Structure:
    - unit/: Individual function and class tests
    - integration/: API and cross-component workflow tests

Test PDFs are built in memory by the pdf_factory fixture in conftest.
Leverages pytest with pytest-check for soft assertions.
"""
