# CryptoStream Test Suite
"""
Test suite including:
- Counter arithmetic unit tests
- CTR initialization vector tests
- Streaming encryption tests against the cryptography AES-CTR oracle

Run with: pytest
Coverage: coverage run -m pytest && coverage report
"""
