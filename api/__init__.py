"""
Module 09D - Minimal API (FastAPI)

HTTP API for the Merkle distributor:
- POST /distributions - Build a distribution record from entries
- POST /proofs/verify - Stateless proof verification
- GET/PUT /merkle-root - Published root
- POST /claims - Redeem a claim
- GET /claimed/{account}/{token} - Claimed counter
- POST /ledger/mint - Fund the distributor
- GET /balances/{token}/{holder} - Ledger balance
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
