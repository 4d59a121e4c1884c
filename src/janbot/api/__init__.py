"""
HTTP surface of the Janbot assistant (FastAPI).
"""
