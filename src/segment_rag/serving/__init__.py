"""
Serving — FastAPI application exposing the query path over HTTP.
"""
