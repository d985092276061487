"""HTTP API layer"""
