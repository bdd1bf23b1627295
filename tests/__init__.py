"""
GovProof Test Suite
===================

Test organization:
- tests/unit/          - Unit tests (no node, circom or snarkjs needed)

Run tests:
    pytest                          # All tests
    pytest tests/unit               # Unit tests only
    pytest --cov=govproof           # With coverage
"""
