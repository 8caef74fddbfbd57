# src/api/lambda_handler.py
"""
AWS Lambda handler for FastAPI using Mangum (ASGI adapter).

How it works:
- API Gateway invokes Lambda
- Mangum translates the event into an ASGI request
- FastAPI handles routing (/health, /products, /estimate, ...)
- Response is returned back to API Gateway

The calculator holds no model or state, so there is nothing to warm up at cold start.
"""

from __future__ import annotations

from mangum import Mangum

from src.api.app import app

handler = Mangum(app, lifespan="off")
